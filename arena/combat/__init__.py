"""
Combat package for the arena.

Combat math, cooldowns and the structured battle log. The engine, the
result formatting and the battle service are imported from their modules
(combat.engine, combat.result, combat.battle_service).
"""

from .battle_log import BattleEvent, BattleLog, BattleLogEntry
from .cooldowns import CooldownTracker
from .damage import (
    AttackResult,
    apply_damage_reduction,
    effective_attack_speed,
    healing,
    magic_attack,
    physical_attack,
    random_int,
)

__all__ = [
    # Battle log
    "BattleEvent",
    "BattleLog",
    "BattleLogEntry",
    # Cooldowns
    "CooldownTracker",
    # Combat math
    "AttackResult",
    "apply_damage_reduction",
    "effective_attack_speed",
    "healing",
    "magic_attack",
    "physical_attack",
    "random_int",
]
