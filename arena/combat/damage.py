"""
Damage module for the arena.

The combat math: damage rolls, buffs, critical hits, damage reduction and
healing. Every random draw goes through the random.Random of the battle, so
a battle replays exactly from its seed.
"""

import math
import random

from character.battle_state import CharacterBattleState
from core.constants import CRITICAL_MULTIPLIER, DAMAGE_REDUCTION_CAP, DamageType
from core.utils import round_half_up
from effects.registry import EffectType
from pydantic import BaseModel, Field


class AttackResult(BaseModel):
    """The outcome of a single hit, before it is applied to the defender."""

    damage: int = Field(description="Damage after reductions, at least 1.")
    is_critical: bool = Field(description="Whether the hit was critical.")
    base_damage: int = Field(description="Damage before reductions.")
    damage_type: DamageType = Field(description="Kind of damage dealt.")


def random_int(rng: random.Random, minimum: float, maximum: float) -> int:
    """
    Draws a uniform integer between minimum and maximum, both included.

    Stat ranges may have fractional bounds (e.g. 14.5); the draw covers
    floor(maximum - minimum + 1) integers starting at minimum.

    Args:
        rng (random.Random): The random generator of the battle.
        minimum (float): The lower bound.
        maximum (float): The upper bound.

    Returns:
        int: The drawn value.

    """
    return int(math.floor(rng.random() * (maximum - minimum + 1) + minimum))


def roll_critical(rng: random.Random, chance: float) -> bool:
    """Returns True with `chance` percent probability."""
    return rng.random() * 100 <= chance


def apply_damage_reduction(
    base_damage: float,
    reduction_percent: float,
    cap: float = DAMAGE_REDUCTION_CAP,
) -> int:
    """
    Applies a percentage reduction to a hit.

    Args:
        base_damage (float):
            The damage before reduction.
        reduction_percent (float):
            The total reduction, in percent. Capped at `cap`.
        cap (float):
            The highest reduction allowed, as a fraction.

    Returns:
        int:
            The reduced damage, never lower than 1.

    """
    reduction = min(max(reduction_percent / 100, 0.0), cap)
    return max(1, round_half_up(base_damage * (1 - reduction)))


def apply_damage_buffs(attacker: CharacterBattleState, damage: int) -> int:
    """Applies every damage increase buff of the attacker, one after the other."""
    for buff in attacker.buffs_of_type(EffectType.DAMAGE_INCREASE):
        damage = round_half_up(damage * (1 + buff.amount / 100))
    return damage


def _attack(
    attacker: CharacterBattleState,
    defender: CharacterBattleState,
    damage_type: DamageType,
    multiplier: float,
    guaranteed_crit: bool,
    rng: random.Random,
    crit_bonus: float,
    reduction_cap: float,
) -> AttackResult:
    stats = attacker.base_stats
    if damage_type is DamageType.MAGIC:
        low, high = stats.min_magic_damage, stats.max_magic_damage
        crit_chance = stats.spell_crit_chance
        reduction = defender.base_stats.magic_damage_reduction
        reduction += defender.total_buff_amount(EffectType.MAGIC_REDUCTION)
    else:
        low, high = stats.min_physical_damage, stats.max_physical_damage
        crit_chance = stats.critical_chance
        reduction = defender.base_stats.physical_damage_reduction
        reduction += defender.total_buff_amount(EffectType.PHYSICAL_REDUCTION)

    base_damage = round_half_up(random_int(rng, low, high) * multiplier)
    base_damage = apply_damage_buffs(attacker, base_damage)

    is_critical = guaranteed_crit or roll_critical(rng, crit_chance + crit_bonus)
    if is_critical:
        base_damage = round_half_up(base_damage * CRITICAL_MULTIPLIER)

    return AttackResult(
        damage=apply_damage_reduction(base_damage, reduction, reduction_cap),
        is_critical=is_critical,
        base_damage=base_damage,
        damage_type=damage_type,
    )


def physical_attack(
    attacker: CharacterBattleState,
    defender: CharacterBattleState,
    multiplier: float,
    guaranteed_crit: bool,
    rng: random.Random,
    crit_bonus: float = 0,
    reduction_cap: float = DAMAGE_REDUCTION_CAP,
) -> AttackResult:
    """
    Computes a physical hit.

    The rolled damage is multiplied, increased by the attacker's damage
    buffs, doubled on critical, then reduced by the defender's physical
    reduction and physical reduction buffs. The defender is not modified.

    Args:
        attacker (CharacterBattleState):
            The attacking character.
        defender (CharacterBattleState):
            The defending character.
        multiplier (float):
            Multiplier of the rolled damage.
        guaranteed_crit (bool):
            Whether the hit is always critical.
        rng (random.Random):
            The random generator of the battle.
        crit_bonus (float):
            Percent added to the critical chance.
        reduction_cap (float):
            The highest reduction allowed, as a fraction.

    Returns:
        AttackResult:
            The damage to apply.

    """
    return _attack(
        attacker,
        defender,
        DamageType.PHYSICAL,
        multiplier,
        guaranteed_crit,
        rng,
        crit_bonus,
        reduction_cap,
    )


def magic_attack(
    attacker: CharacterBattleState,
    defender: CharacterBattleState,
    multiplier: float,
    guaranteed_crit: bool,
    rng: random.Random,
    crit_bonus: float = 0,
    reduction_cap: float = DAMAGE_REDUCTION_CAP,
) -> AttackResult:
    """
    Computes a magic hit, like physical_attack but with the magic stats,
    the spell critical chance and the magic reductions.
    """
    return _attack(
        attacker,
        defender,
        DamageType.MAGIC,
        multiplier,
        guaranteed_crit,
        rng,
        crit_bonus,
        reduction_cap,
    )


def heal_amount(character: CharacterBattleState, multiplier: float) -> int:
    """Returns the heal of a character: its average magic damage times `multiplier`."""
    return round_half_up(character.base_stats.average_magic_damage * multiplier)


def healing(character: CharacterBattleState, multiplier: float) -> float:
    """
    Heals a character, without going over its maximum health.

    Args:
        character (CharacterBattleState):
            The character to heal.
        multiplier (float):
            Multiplier of the average magic damage.

    Returns:
        float:
            The health actually restored.

    """
    return character.restore_health(heal_amount(character, multiplier))


def effective_attack_speed(character: CharacterBattleState) -> float:
    """
    Returns the seconds between two actions of a character.

    Every attack speed reduction on the character lengthens the delay by its
    amount in percent.

    Args:
        character (CharacterBattleState):
            The character.

    Returns:
        float:
            The delay until its next action.

    """
    speed = character.base_stats.attack_speed
    for buff in character.buffs_of_type(EffectType.ATTACK_SPEED_REDUCTION):
        speed *= 1 + buff.amount / 100
    return speed
