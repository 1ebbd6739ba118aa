"""
Character package for the arena.

Persisted character records, derived stats, per-battle snapshots and
experience.
"""

from .battle_state import Buff, CharacterBattleState, PeriodicEffect
from .experience import ExperienceModel
from .record import CharacterRecord
from .stats import (
    Attributes,
    StatsRecord,
    calculate_level,
    calculate_stats,
    validate_attributes,
)

__all__ = [
    # Battle state
    "Buff",
    "CharacterBattleState",
    "PeriodicEffect",
    # Persistence
    "CharacterRecord",
    # Experience
    "ExperienceModel",
    # Stats
    "Attributes",
    "StatsRecord",
    "calculate_level",
    "calculate_stats",
    "validate_attributes",
]
