"""
Battle state module for the arena.

Holds the per-battle snapshot of a character: its fixed stats, its current
health and mana, its position in the rotation and the buffs and periodic
effects currently active on it.
"""

from __future__ import annotations

from typing import Any

from core.constants import DamageType
from pydantic import BaseModel, Field

from .record import CharacterRecord
from .stats import StatsRecord


class Buff(BaseModel):
    """
    A temporary modifier on a character, identified by its type.

    A character holds at most one buff per type.
    """

    name: str = Field(description="Display name of the buff, usually the ability name.")
    type: str = Field(description="Buff type, e.g. damageIncrease or physicalReduction.")
    amount: float = Field(default=0, description="Magnitude in percent.")
    duration: float = Field(gt=0, description="Duration in seconds.")
    end_time: float = Field(default=0, description="Simulated time at which the buff expires.")

    def __str__(self) -> str:
        return f"{self.name} ({self.type} {self.amount}%)"


class PeriodicEffect(BaseModel):
    """
    An effect that triggers every `interval` seconds until `end_time`.

    A character holds at most one periodic effect per type.
    """

    name: str = Field(description="Display name of the effect.")
    type: str = Field(description="Effect type, e.g. poison or manaDrain.")
    amount: float = Field(default=0, description="Mana or health moved per tick.")
    damage: float = Field(default=0, description="Damage dealt per tick.")
    interval: float = Field(default=1.0, gt=0, description="Seconds between two ticks.")
    duration: float = Field(gt=0, description="Duration in seconds.")
    last_proc_time: float = Field(default=0, description="Simulated time of the last tick.")
    end_time: float = Field(default=0, description="Simulated time at which the effect expires.")
    source_id: str | None = Field(default=None, description="Id of the character that applied it.")
    source_name: str | None = Field(default=None, description="Name of the character that applied it.")

    def is_due(self, now: float) -> bool:
        """Checks whether the effect ticks at the given time."""
        return now >= self.last_proc_time + self.interval and now < self.end_time

    def __str__(self) -> str:
        return f"{self.name} ({self.type}, every {self.interval}s)"


class CharacterBattleState:
    """
    The mutable combat snapshot of a character for a single battle.

    Attributes:
        id (str):
            The character id.
        name (str):
            The display name.
        owner_id (str):
            The id of the owning player.
        base_stats (StatsRecord):
            The stats at the start of the battle, never modified.
        current_health (float):
            The remaining health.
        current_mana (float):
            The remaining mana.
        rotation (list[str]):
            The ordered ability ids the character cycles through.
        next_ability_index (int):
            Index in the rotation of the next ability to try.
        attack_type (DamageType):
            Kind of the basic attack used when no ability can be used.
        buffs (list[Buff]):
            The active buffs, at most one per type.
        periodic_effects (list[PeriodicEffect]):
            The active periodic effects, at most one per type.
        level (int):
            The character level.

    """

    def __init__(
        self,
        id: str,
        name: str,
        owner_id: str,
        base_stats: StatsRecord,
        rotation: list[str] | None = None,
        attack_type: DamageType = DamageType.PHYSICAL,
        level: int = 1,
    ) -> None:
        self.id = id
        self.name = name
        self.owner_id = owner_id
        self.base_stats = base_stats
        self.current_health: float = base_stats.health
        self.current_mana: float = base_stats.mana
        self.rotation: list[str] = list(rotation or [])
        self.next_ability_index: int = 0
        self.attack_type = DamageType(attack_type)
        self.buffs: list[Buff] = []
        self.periodic_effects: list[PeriodicEffect] = []
        self.level = level

    @classmethod
    def from_record(cls, record: CharacterRecord) -> CharacterBattleState:
        """
        Creates a fresh battle snapshot, at full health and mana.

        Args:
            record (CharacterRecord):
                The persisted character.

        Returns:
            CharacterBattleState:
                The battle snapshot.

        Raises:
            ValueError:
                If the record carries no stats.

        """
        if record.stats is None:
            raise ValueError(f"Character '{record.id}' has no stats.")
        return cls(
            id=record.id,
            name=record.name,
            owner_id=record.owner_id,
            base_stats=record.stats,
            rotation=record.rotation,
            attack_type=record.attack_type,
            level=record.level,
        )

    # ============================================================================
    # RESOURCES
    # ============================================================================

    @property
    def max_health(self) -> int:
        return self.base_stats.health

    @property
    def max_mana(self) -> int:
        return self.base_stats.mana

    @property
    def is_alive(self) -> bool:
        return self.current_health > 0

    @property
    def health_percentage(self) -> float:
        """Returns the remaining health in percent of the maximum."""
        if self.max_health <= 0:
            return 0.0
        return self.current_health / self.max_health * 100

    def take_damage(self, amount: float) -> None:
        """Removes health; health can drop below zero."""
        self.current_health -= amount

    def restore_health(self, amount: float) -> float:
        """
        Adds health, capped at the maximum.

        Returns:
            float:
                The health actually restored.

        """
        before = self.current_health
        self.current_health = min(self.max_health, self.current_health + amount)
        return self.current_health - before

    def spend_mana(self, amount: float) -> float:
        """
        Removes up to `amount` mana, never going below zero.

        Returns:
            float:
                The mana actually removed.

        """
        spent = max(0.0, min(self.current_mana, amount))
        self.current_mana -= spent
        return spent

    def restore_mana(self, amount: float) -> float:
        """
        Adds mana, capped at the maximum.

        Returns:
            float:
                The mana actually restored.

        """
        before = self.current_mana
        self.current_mana = min(self.max_mana, self.current_mana + amount)
        return self.current_mana - before

    # ============================================================================
    # ROTATION
    # ============================================================================

    @property
    def next_ability_id(self) -> str | None:
        """Returns the id of the ability the character tries next."""
        if not self.rotation:
            return None
        return self.rotation[self.next_ability_index]

    def advance_rotation(self) -> None:
        """Moves to the next ability, wrapping around at the end."""
        if self.rotation:
            self.next_ability_index = (self.next_ability_index + 1) % len(self.rotation)

    # ============================================================================
    # EFFECTS
    # ============================================================================

    def get_buff(self, buff_type: str) -> Buff | None:
        return next((buff for buff in self.buffs if buff.type == buff_type), None)

    def get_periodic_effect(self, effect_type: str) -> PeriodicEffect | None:
        return next(
            (effect for effect in self.periodic_effects if effect.type == effect_type),
            None,
        )

    def total_buff_amount(self, buff_type: str) -> float:
        """Returns the summed magnitude of every buff of the given type."""
        return sum(buff.amount for buff in self.buffs if buff.type == buff_type)

    def buffs_of_type(self, buff_type: str) -> list[Buff]:
        return [buff for buff in self.buffs if buff.type == buff_type]

    def to_snapshot(self) -> dict[str, Any]:
        """Returns a plain dictionary with the current state, used for display."""
        return {
            "id": self.id,
            "name": self.name,
            "health": self.current_health,
            "max_health": self.max_health,
            "mana": self.current_mana,
            "max_mana": self.max_mana,
            "buffs": [buff.model_dump() for buff in self.buffs],
            "periodic_effects": [effect.model_dump() for effect in self.periodic_effects],
        }

    def __str__(self) -> str:
        return f"{self.name} ({self.current_health}/{self.max_health} HP, {self.current_mana}/{self.max_mana} MP)"

    def __repr__(self) -> str:
        return f"CharacterBattleState(id={self.id!r}, name={self.name!r})"
