"""
Abilities package for the arena.

The ability variants, the parser for stored records and the catalog.
"""

from .catalog import AbilityCatalog
from .definition import (
    Ability,
    BaseAbility,
    BuffAbility,
    BuffSpec,
    CriticalEffectSpec,
    DirectAbility,
    DotAbility,
    DotSpec,
    HealAbility,
    HealSpec,
    MultiAttackAbility,
    MultiAttackSpec,
    PeriodicAbility,
    PeriodicSpec,
    ability_to_json,
    infer_kind,
    parse_ability,
)

__all__ = [
    # Catalog
    "AbilityCatalog",
    # Variants
    "Ability",
    "BaseAbility",
    "BuffAbility",
    "DirectAbility",
    "DotAbility",
    "HealAbility",
    "MultiAttackAbility",
    "PeriodicAbility",
    # Payloads
    "BuffSpec",
    "CriticalEffectSpec",
    "DotSpec",
    "HealSpec",
    "MultiAttackSpec",
    "PeriodicSpec",
    # Parsing
    "ability_to_json",
    "infer_kind",
    "parse_ability",
]
