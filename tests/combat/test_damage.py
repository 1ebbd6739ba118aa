"""
Tests for the combat math.
"""

import random

import pytest
from character.battle_state import Buff, CharacterBattleState
from character.stats import StatsRecord
from combat.damage import (
    apply_damage_buffs,
    apply_damage_reduction,
    effective_attack_speed,
    heal_amount,
    healing,
    magic_attack,
    physical_attack,
    random_int,
)
from core.utils import round_half_up


@pytest.fixture
def attacker():
    return CharacterBattleState(
        id="c1",
        name="Aria",
        owner_id="p1",
        base_stats=StatsRecord(
            health=130,
            mana=80,
            min_physical_damage=6,
            max_physical_damage=12,
            min_magic_damage=6,
            max_magic_damage=10.5,
            attack_speed=8,
            critical_chance=0,
            spell_crit_chance=0,
        ),
    )


@pytest.fixture
def defender():
    return CharacterBattleState(
        id="c2",
        name="Borin",
        owner_id="p2",
        base_stats=StatsRecord(
            health=150,
            mana=70,
            physical_damage_reduction=40,
            magic_damage_reduction=10,
        ),
    )


def test_reduction_is_capped():
    """
    Test that reductions above the cap count as the cap.
    """
    assert apply_damage_reduction(10, 95) == 2
    assert apply_damage_reduction(10, 80) == 2
    assert apply_damage_reduction(10, 50) == 5
    assert apply_damage_reduction(10, 95, cap=0.5) == 5


def test_reduction_floor():
    """
    Test that a hit always deals at least 1 damage.
    """
    assert apply_damage_reduction(1, 80) == 1
    assert apply_damage_reduction(0, 0) == 1


def test_stacked_reductions_keep_the_floor(attacker, defender):
    """
    Test that stats and buffs together never reduce a hit below 20% or 1.
    """
    defender.buffs.append(Buff(name="Shield Wall", type="physicalReduction", amount=60, duration=8))
    rng = random.Random(3)
    for _ in range(100):
        result = physical_attack(attacker, defender, 1.0, False, rng)
        assert result.damage >= 1
        assert result.damage == max(1, round_half_up(result.base_damage * 0.2))


def test_random_int_bounds():
    """
    Test that integer ranges include both bounds.
    """
    rng = random.Random(11)
    values = {random_int(rng, 3, 6) for _ in range(500)}
    assert values == {3, 4, 5, 6}


def test_guaranteed_crit_doubles(attacker, defender):
    """
    Test that a guaranteed critical doubles the rolled damage.
    """
    attacker.base_stats = attacker.base_stats.model_copy(update={"min_physical_damage": 10, "max_physical_damage": 10})
    result = physical_attack(attacker, defender, 1.2, True, random.Random(0))
    assert result.is_critical
    assert result.base_damage == 24
    assert result.damage == 14


def test_no_crit_at_zero_chance(attacker, defender):
    """
    Test that a character without critical chance does not crit.
    """
    rng = random.Random(5)
    assert not any(magic_attack(attacker, defender, 1.5, False, rng).is_critical for _ in range(50))


def test_crit_bonus(attacker, defender):
    """
    Test that a 100% crit bonus makes every hit critical.
    """
    rng = random.Random(5)
    assert all(magic_attack(attacker, defender, 1.5, False, rng, crit_bonus=100).is_critical for _ in range(20))


def test_magic_attack_uses_magic_reduction(attacker, defender):
    """
    Test that magic hits are reduced by the magic reduction and its buffs.
    """
    attacker.base_stats = attacker.base_stats.model_copy(update={"min_magic_damage": 10, "max_magic_damage": 10})
    defender.buffs.append(Buff(name="Arcane Ward", type="magicReduction", amount=40, duration=8))
    result = magic_attack(attacker, defender, 1.0, False, random.Random(0))
    assert result.base_damage == 10
    assert result.damage == 5


def test_damage_buffs(attacker):
    """
    Test that damage increase buffs raise the damage.
    """
    attacker.buffs.append(Buff(name="Battle Cry", type="damageIncrease", amount=20, duration=10))
    assert apply_damage_buffs(attacker, 10) == 12
    assert apply_damage_buffs(attacker, 3) == 4


def test_healing(attacker):
    """
    Test that heals use the average magic damage and stop at the maximum.
    """
    assert heal_amount(attacker, 1.5) == 12
    attacker.current_health = 125
    assert healing(attacker, 1.5) == 5
    assert attacker.current_health == 130


def test_attack_speed_reduction(attacker):
    """
    Test that slows lengthen the delay between actions.
    """
    assert effective_attack_speed(attacker) == 8
    attacker.buffs.append(Buff(name="Frost Nova", type="attackSpeedReduction", amount=25, duration=6))
    assert effective_attack_speed(attacker) == 10
