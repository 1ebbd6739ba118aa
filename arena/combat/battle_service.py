"""
Battle service module for the arena.

Ties the engine to the store: loads characters, runs seeded simulations,
persists battle results, awards experience and answers history queries.
"""

import random

from abilities.catalog import AbilityCatalog
from catchery import log_error, log_info, log_warning
from character.battle_state import CharacterBattleState
from character.experience import ExperienceModel
from character.record import CharacterRecord
from core.config import ArenaConfig
from core.errors import ArenaError, ExperienceAwardError, NotFoundError, PersistenceError, ValidationError
from core.store import BATTLE_LOGS, CHARACTERS, DataStore

from .engine import BattleEngine
from .result import BattleResult, format_battle_result, new_battle_id, seed_from_battle_id


class BattleService:
    """
    Runs and records battles.

    Attributes:
        store (DataStore):
            Where characters and battle results live.
        catalog (AbilityCatalog):
            The abilities rotations refer to.
        config (ArenaConfig):
            Battle settings.
        experience (ExperienceModel):
            Experience awards and levelling.

    """

    def __init__(
        self,
        store: DataStore,
        catalog: AbilityCatalog,
        config: ArenaConfig | None = None,
        experience: ExperienceModel | None = None,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.config = config or ArenaConfig()
        self.experience = experience or ExperienceModel()

    # ============================================================================
    # CHARACTERS
    # ============================================================================

    def get_character(self, character_id: str) -> CharacterRecord:
        """
        Loads a character from the store.

        Args:
            character_id (str):
                The character id.

        Returns:
            CharacterRecord:
                The character.

        Raises:
            NotFoundError:
                If no character has this id.
            ValidationError:
                If the stored record is malformed.

        """
        for record in self.store.read(CHARACTERS):
            if record.get("id") == character_id:
                try:
                    return CharacterRecord.model_validate(record)
                except ValueError as e:
                    log_error(
                        f"Stored character '{character_id}' is malformed.",
                        {"character_id": character_id},
                        exception=e,
                    )
                    raise ValidationError(
                        f"Character '{character_id}' is malformed.",
                        {"character_id": character_id},
                    ) from e
        raise NotFoundError(f"Character '{character_id}' not found.", {"character_id": character_id})

    def get_owned_character(self, character_id: str, owner_id: str) -> CharacterRecord:
        """Loads a character, which must belong to `owner_id`."""
        record = self.get_character(character_id)
        if record.owner_id != owner_id:
            raise NotFoundError(
                f"Character '{character_id}' not found.",
                {"character_id": character_id, "owner_id": owner_id},
            )
        return record

    def validate_rotation(self, record: CharacterRecord) -> None:
        """
        Checks that a character may enter a battle.

        Raises:
            ValidationError:
                If the rotation holds fewer abilities than required.

        """
        required = self.config.min_rotation_length
        if len(record.rotation) < required:
            raise ValidationError(
                f"{record.name} must have at least {required} abilities in rotation.",
                {"character_id": record.id, "rotation_length": len(record.rotation)},
            )

    # ============================================================================
    # BATTLES
    # ============================================================================

    def simulate_battle(
        self,
        record1: CharacterRecord,
        record2: CharacterRecord,
        is_matchmade: bool = False,
        seed: int | None = None,
        battle_id: str | None = None,
    ) -> BattleResult:
        """
        Simulates a battle between two stored characters.

        The records are not modified: each battle works on fresh snapshots
        at full health and mana.

        Args:
            record1 (CharacterRecord):
                The first combatant, who acts first on ties.
            record2 (CharacterRecord):
                The second combatant.
            is_matchmade (bool):
                Whether the battle came from matchmaking, which awards experience.
            seed (int | None):
                Seed of the random generator, derived from the battle id when None.
            battle_id (str | None):
                Id of the battle, a new one when None.

        Returns:
            BattleResult:
                The result, not yet saved.

        """
        battle_id = battle_id or new_battle_id()
        if seed is None:
            seed = seed_from_battle_id(battle_id)
        rng = random.Random(seed)

        engine = BattleEngine(self.catalog, self.config)
        outcome = engine.simulate(
            CharacterBattleState.from_record(record1),
            CharacterBattleState.from_record(record2),
            rng,
        )

        experience = (0, 0)
        if is_matchmade:
            experience = (
                self.experience.award_battle_experience(
                    outcome.winner_id == record1.id, record1.level, is_matchmade, rng
                ),
                self.experience.award_battle_experience(
                    outcome.winner_id == record2.id, record2.level, is_matchmade, rng
                ),
            )

        result = format_battle_result(
            outcome,
            battle_id=battle_id,
            is_matchmade=is_matchmade,
            experience=experience,
            seed=seed,
        )
        log_info(
            f"Battle {battle_id} between {record1.name} and {record2.name} simulated.",
            {
                "battle_id": battle_id,
                "winner": result.winner,
                "rounds": result.rounds,
                "matchmade": is_matchmade,
                "seed": seed,
            },
        )
        return result

    def save_battle_result(self, result: BattleResult) -> None:
        """
        Appends a battle result to the battlelogs collection.

        Raises:
            PersistenceError:
                If the store could not write the collection.

        """
        battles = self.store.read(BATTLE_LOGS)
        battles.append(result.to_json())
        if not self.store.write(BATTLE_LOGS, battles):
            log_error(
                f"Failed to save battle {result.id}.",
                {"battle_id": result.id, "collection": BATTLE_LOGS},
            )
            raise PersistenceError(f"Failed to save battle {result.id}.", {"battle_id": result.id})

    def award_experience(self, result: BattleResult) -> list[CharacterRecord]:
        """
        Adds the experience of a battle to both stored characters and applies
        any level up it unlocks.

        Args:
            result (BattleResult):
                The battle whose experience is awarded.

        Returns:
            list[CharacterRecord]:
                The updated characters.

        Raises:
            PersistenceError:
                If the store could not write the characters.

        """
        records = self.store.read(CHARACTERS)
        updated: list[CharacterRecord] = []
        for summary in (result.character, result.opponent):
            index = next((i for i, r in enumerate(records) if r.get("id") == summary.id), None)
            if index is None:
                log_warning(
                    f"Character '{summary.id}' disappeared before experience was awarded.",
                    {"character_id": summary.id, "battle_id": result.id},
                )
                continue
            record = CharacterRecord.model_validate(records[index])
            record = record.model_copy(update={"experience": record.experience + summary.experience_gained})
            record = self.experience.apply_pending_level_ups(record)
            records[index] = record.to_json()
            updated.append(record)
        if not self.store.write(CHARACTERS, records):
            log_error(
                f"Failed to award experience for battle {result.id}.",
                {"battle_id": result.id, "collection": CHARACTERS},
            )
            raise PersistenceError(
                f"Failed to award experience for battle {result.id}.",
                {"battle_id": result.id},
            )
        return updated

    def run_matchmade_battle(self, character_id: str, opponent_id: str) -> BattleResult:
        """
        Runs, saves and rewards a battle between two paired characters.

        Args:
            character_id (str):
                The character whose arrival triggered the pairing, who acts
                first on ties.
            opponent_id (str):
                The character that was waiting in the queue.

        Returns:
            BattleResult:
                The saved result.

        Raises:
            ExperienceAwardError:
                If the battle was saved but the experience could not be
                awarded. The battle stands.

        """
        record1 = self.get_character(character_id)
        record2 = self.get_character(opponent_id)
        result = self.simulate_battle(record1, record2, is_matchmade=True)
        self.save_battle_result(result)
        try:
            self.award_experience(result)
        except (ArenaError, ValueError) as e:
            raise ExperienceAwardError(
                f"Battle {result.id} was saved but its experience was not awarded.",
                result.id,
                {"character_id": character_id, "opponent_id": opponent_id},
            ) from e
        return result

    def challenge(self, character_id: str, opponent_id: str, owner_id: str) -> BattleResult:
        """
        Runs a direct battle requested by a player. No experience is awarded.

        Args:
            character_id (str):
                The challenger, which must belong to `owner_id`.
            opponent_id (str):
                The challenged character.
            owner_id (str):
                The player issuing the challenge.

        Returns:
            BattleResult:
                The saved result.

        Raises:
            NotFoundError:
                If either character does not exist or the challenger is not owned.
            ValidationError:
                If either rotation is too short.

        """
        character = self.get_owned_character(character_id, owner_id)
        opponent = self.get_character(opponent_id)
        self.validate_rotation(character)
        self.validate_rotation(opponent)
        result = self.simulate_battle(character, opponent, is_matchmade=False)
        self.save_battle_result(result)
        return result

    # ============================================================================
    # HISTORY
    # ============================================================================

    def get_player_battles(self, owner_id: str) -> list[BattleResult]:
        """Returns every stored battle involving a character of the player."""
        return [
            battle
            for battle in (BattleResult.model_validate(record) for record in self.store.read(BATTLE_LOGS))
            if battle.involves_owner(owner_id)
        ]

    def get_battle(self, battle_id: str) -> BattleResult | None:
        """Returns a stored battle, or None if there is none with this id."""
        for record in self.store.read(BATTLE_LOGS):
            if record.get("id") == battle_id:
                return BattleResult.model_validate(record)
        return None
