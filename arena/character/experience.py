"""
Experience and levelling for arena characters.
"""

import random

from core.utils import round_half_up

from .record import CharacterRecord

# Experience needed to go from level 1 to level 2.
BASE_LEVEL_EXPERIENCE = 100
# Every level needs 20% more experience than the previous one.
LEVEL_GROWTH_FACTOR = 1.2
# Attribute points granted on level up.
POINTS_PER_LEVEL = 2

WIN_EXPERIENCE_RANGE = (20, 30)
LOSS_EXPERIENCE_RANGE = (5, 10)
# Each level past the first adds 10% to the experience awarded.
LEVEL_EXPERIENCE_BONUS = 0.1


class ExperienceModel:
    """
    Awards battle experience and turns it into levels.
    """

    def exp_for_next_level(self, level: int) -> int:
        """
        Returns the experience needed to leave the given level.

        Args:
            level (int):
                The current level.

        Returns:
            int:
                The experience required for the next level.

        """
        return round_half_up(BASE_LEVEL_EXPERIENCE * LEVEL_GROWTH_FACTOR ** (level - 1))

    def award_battle_experience(
        self,
        is_winner: bool,
        level: int,
        is_matchmade: bool,
        rng: random.Random,
    ) -> int:
        """
        Computes the experience gained from a battle.

        Args:
            is_winner (bool):
                Whether the character won the battle.
            level (int):
                The level of the character.
            is_matchmade (bool):
                Only matchmade battles award experience.
            rng (random.Random):
                The random generator of the battle.

        Returns:
            int:
                The experience gained.

        """
        if not is_matchmade:
            return 0
        low, high = WIN_EXPERIENCE_RANGE if is_winner else LOSS_EXPERIENCE_RANGE
        multiplier = 1 + (level - 1) * LEVEL_EXPERIENCE_BONUS
        return round_half_up(rng.randint(low, high) * multiplier)

    def can_level_up(self, record: CharacterRecord) -> bool:
        return record.experience >= self.exp_for_next_level(record.level)

    def level_up(self, record: CharacterRecord) -> CharacterRecord:
        """Spends the experience for one level, if there is enough of it."""
        if not self.can_level_up(record):
            return record
        return record.model_copy(
            update={
                "experience": record.experience - self.exp_for_next_level(record.level),
                "level": record.level + 1,
                "available_attribute_points": record.available_attribute_points + POINTS_PER_LEVEL,
            }
        )

    def apply_pending_level_ups(self, record: CharacterRecord) -> CharacterRecord:
        """Levels the character up as many times as its experience allows."""
        while self.can_level_up(record):
            record = self.level_up(record)
        return record
