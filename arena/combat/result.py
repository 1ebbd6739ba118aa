"""
Battle result module for the arena.

Turns a finished simulation into the record stored in the battlelogs
collection and returned to players.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from character.battle_state import CharacterBattleState
from character.stats import StatsRecord
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .battle_log import BattleLogEntry
from .engine import BattleOutcome


class CharacterSummary(BaseModel):
    """A combatant as recorded in a battle result."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Character id.")
    name: str = Field(description="Character name at the time of the battle.")
    owner_id: str = Field(
        validation_alias=AliasChoices("playerId", "ownerId", "owner_id"),
        serialization_alias="playerId",
        description="Id of the owning player.",
    )
    stats: StatsRecord = Field(description="Stats used in the battle.")
    level: int = Field(default=1, description="Level at the time of the battle.")
    experience_gained: int = Field(default=0, description="Experience awarded for the battle.")

    @classmethod
    def from_state(cls, state: CharacterBattleState, experience_gained: int = 0) -> "CharacterSummary":
        return cls(
            id=state.id,
            name=state.name,
            owner_id=state.owner_id,
            stats=state.base_stats,
            level=state.level,
            experience_gained=experience_gained,
        )


class BattleResult(BaseModel):
    """A finished battle."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Unique battle id.")
    character: CharacterSummary = Field(description="The first combatant, who started the battle.")
    opponent: CharacterSummary = Field(description="The second combatant.")
    winner: str | None = Field(default=None, description="Id of the winner, None for a draw.")
    log: list[BattleLogEntry] = Field(default_factory=list, description="The battle log.")
    timestamp: str = Field(description="ISO-8601 time at which the battle was recorded.")
    rounds: int = Field(default=0, description="Number of actions taken.")
    is_matchmade: bool = Field(default=False, description="Whether the battle came from matchmaking.")
    seed: int | None = Field(default=None, description="Seed of the random generator, for replays.")

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    def involves_owner(self, owner_id: str) -> bool:
        """Checks whether either combatant belongs to the player."""
        return owner_id in (self.character.owner_id, self.opponent.owner_id)

    def experience_for(self, character_id: str) -> int:
        """Returns the experience the character gained, 0 if it did not take part."""
        for summary in (self.character, self.opponent):
            if summary.id == character_id:
                return summary.experience_gained
        return 0

    def to_json(self) -> dict[str, Any]:
        """Returns the result in its stored camelCase shape."""
        return self.model_dump(mode="json", by_alias=True)


def new_battle_id() -> str:
    return str(uuid.uuid4())


def seed_from_battle_id(battle_id: str) -> int:
    """Derives a 64-bit seed from a battle id, so each battle replays from its id."""
    return uuid.uuid5(uuid.NAMESPACE_OID, battle_id).int & 0xFFFFFFFFFFFFFFFF


def format_battle_result(
    outcome: BattleOutcome,
    battle_id: str,
    is_matchmade: bool,
    experience: tuple[int, int] = (0, 0),
    seed: int | None = None,
    timestamp: datetime | None = None,
) -> BattleResult:
    """
    Builds the stored record of a battle.

    Args:
        outcome (BattleOutcome):
            The finished simulation.
        battle_id (str):
            The id of the battle.
        is_matchmade (bool):
            Whether the battle came from matchmaking.
        experience (tuple[int, int]):
            Experience awarded to the first and the second combatant. Ignored
            unless the battle is matchmade.
        seed (int | None):
            Seed of the random generator used.
        timestamp (datetime | None):
            Time of the battle, now when None.

    Returns:
        BattleResult:
            The battle record.

    """
    exp1, exp2 = experience if is_matchmade else (0, 0)
    timestamp = timestamp or datetime.now(timezone.utc)
    return BattleResult(
        id=battle_id,
        character=CharacterSummary.from_state(outcome.character1, exp1),
        opponent=CharacterSummary.from_state(outcome.character2, exp2),
        winner=outcome.winner_id,
        log=list(outcome.log.entries),
        timestamp=timestamp.isoformat(),
        rounds=outcome.rounds,
        is_matchmade=is_matchmade,
        seed=seed,
    )
