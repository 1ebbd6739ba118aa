"""
Tests for the structured battle log.
"""

from combat.battle_log import (
    AbilityUsed,
    AttackHit,
    BattleEnded,
    BattleLog,
    BattleLogEntry,
    CriticalEffect,
    Defeated,
    FinalState,
    ManaDrained,
)
from core.constants import DamageType


def test_attack_hit_messages():
    """
    Test the hit lines for both damage types.
    """
    hit = AttackHit(
        attacker="Aria",
        target="Borin",
        attack="Fireball",
        damage_type=DamageType.MAGIC,
        amount=24,
        critical=True,
        target_health=106,
    )
    assert hit.describe() == "Aria casts Fireball (CRITICAL) on Borin for 24 magic damage"
    hit = AttackHit(
        attacker="Borin",
        target="Aria",
        attack="Basic Attack",
        damage_type=DamageType.PHYSICAL,
        amount=7,
        target_health=123,
    )
    assert str(hit) == "Borin uses Basic Attack on Aria for 7 physical damage"


def test_buff_usage_messages():
    """
    Test the suffix added for each buff type.
    """
    used = AbilityUsed(
        actor="Borin", ability="Shield Wall", effect_type="physicalReduction", amount=30, duration=8
    )
    assert used.describe() == (
        "Borin uses Shield Wall, increasing physical damage reduction by 30% for 8 seconds"
    )
    slow = AbilityUsed(
        actor="Aria",
        ability="Frost Nova",
        verb="casts",
        effect_type="attackSpeedReduction",
        amount=25,
        duration=6,
        target="Borin",
    )
    assert slow.describe() == "Aria casts Frost Nova, slowing Borin's attack speed by 25% for 6 seconds"
    assert AbilityUsed(actor="Aria", ability="Heal", verb="casts").describe() == "Aria casts Heal"


def test_defeat_messages():
    """
    Test the defeat lines for each cause.
    """
    assert Defeated(character="Borin").describe() == "Borin has been defeated!"
    assert Defeated(character="Aria", cause="backlash").describe() == "Aria has been defeated by their own spell!"
    burned = Defeated(character="Borin", cause="effect", effect="Burning", effect_type="burning")
    assert burned.describe() == "Borin has been burned to ash!"


def test_end_messages():
    """
    Test the lines logged when the battle ends.
    """
    assert BattleEnded(reason="defeat", winner="Aria").describe() == "Aria wins the battle!"
    assert BattleEnded(reason="timeLimit", winner="Aria").describe() == (
        "Time limit reached! Aria wins with more health remaining!"
    )
    assert BattleEnded(reason="draw").describe() == (
        "Time limit reached! Battle ended in a draw (equal health remaining)"
    )


def test_final_state_message():
    """
    Test that the final state floors the values and shows the percentage of the living.
    """
    alive = FinalState(character="Aria", health=50.6, max_health=100, mana=20.9)
    assert alive.describe() == "Final state - Aria: 50 health (50.6%), 20 mana"
    dead = FinalState(character="Borin", health=-3, max_health=130, mana=0)
    assert dead.describe() == "Final state - Borin: -3 health, 0 mana"


def test_misc_messages():
    """
    Test the mana drain cast and critical burning lines.
    """
    cast = ManaDrained(character="Borin", effect="Mana Drain", amount=8, mana=42, caster="Aria")
    assert cast.describe() == "Aria casts Mana Drain on Borin, draining 8 mana"
    burning = CriticalEffect(character="Borin", effect_type="burning", damage=2, duration=4)
    assert burning.describe() == "Borin is burning for 2 damage per second for 4 seconds!"


def test_record_rounds_time():
    """
    Test that entries are stamped with one decimal and keep their event.
    """
    log = BattleLog()
    entry = log.record(0.1 + 0.2, Defeated(character="Borin"))
    assert entry.time == 0.3
    assert entry.message == "Borin has been defeated!"
    assert len(log) == 1
    assert log.messages() == ["Borin has been defeated!"]
    assert log.events_of(Defeated) == [entry.event]


def test_entry_round_trip():
    """
    Test that a stored entry is read back with its typed event.
    """
    log = BattleLog()
    log.record(
        5,
        AttackHit(
            attacker="Aria",
            target="Borin",
            attack="Strike",
            damage_type=DamageType.PHYSICAL,
            amount=9,
            target_health=121,
        ),
    )
    data = log.entries[0].model_dump(mode="json", by_alias=True)
    assert data["event"]["kind"] == "attackHit"
    assert data["event"]["targetHealth"] == 121
    entry = BattleLogEntry.model_validate(data)
    assert isinstance(entry.event, AttackHit)
    assert entry.event.damage_type is DamageType.PHYSICAL
