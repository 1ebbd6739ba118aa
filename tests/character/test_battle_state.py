"""
Tests for the battle snapshot of a character.
"""

import pytest
from character.battle_state import Buff, CharacterBattleState, PeriodicEffect
from character.record import CharacterRecord
from character.stats import StatsRecord


@pytest.fixture
def state():
    return CharacterBattleState(
        id="c1",
        name="Aria",
        owner_id="p1",
        base_stats=StatsRecord(health=100, mana=50),
        rotation=["a", "b", "c"],
    )


def test_starts_at_full_resources(state):
    """
    Test that a fresh snapshot has full health and mana.
    """
    assert state.current_health == 100
    assert state.current_mana == 50
    assert state.is_alive
    assert state.health_percentage == 100


def test_health_can_go_negative(state):
    """
    Test that damage is not clamped at zero.
    """
    state.take_damage(130)
    assert state.current_health == -30
    assert not state.is_alive


def test_restores_are_capped(state):
    """
    Test that heals and mana gains stop at the maximum and report what they added.
    """
    state.take_damage(10)
    assert state.restore_health(25) == 10
    assert state.current_health == 100
    state.spend_mana(5)
    assert state.restore_mana(20) == 5
    assert state.current_mana == 50


def test_spend_mana_never_goes_below_zero(state):
    """
    Test that spending more mana than available empties the pool.
    """
    assert state.spend_mana(80) == 50
    assert state.current_mana == 0
    assert state.spend_mana(10) == 0


def test_rotation_wraps(state):
    """
    Test that the fourth ability used is the first one again.
    """
    used = []
    for _ in range(4):
        used.append(state.next_ability_id)
        state.advance_rotation()
    assert used == ["a", "b", "c", "a"]


def test_empty_rotation(state):
    """
    Test that a character without a rotation has no next ability.
    """
    state.rotation = []
    assert state.next_ability_id is None
    state.advance_rotation()
    assert state.next_ability_index == 0


def test_lookups_by_type(state):
    """
    Test the buff and effect lookups.
    """
    state.buffs.append(Buff(name="Battle Cry", type="damageIncrease", amount=20, duration=10))
    state.periodic_effects.append(PeriodicEffect(name="Poison", type="poison", damage=5, duration=6))
    assert state.get_buff("damageIncrease").name == "Battle Cry"
    assert state.get_buff("physicalReduction") is None
    assert state.total_buff_amount("damageIncrease") == 20
    assert state.get_periodic_effect("poison").damage == 5
    snapshot = state.to_snapshot()
    assert snapshot["buffs"][0]["type"] == "damageIncrease"
    assert snapshot["max_health"] == 100


def test_periodic_effect_is_due():
    """
    Test that an effect ticks once per interval and never at its end time.
    """
    effect = PeriodicEffect(name="Poison", type="poison", damage=10, interval=2, duration=6, end_time=6)
    assert not effect.is_due(1)
    assert effect.is_due(2)
    effect.last_proc_time = 4
    assert not effect.is_due(5)
    assert not effect.is_due(6)


def test_from_record_uses_stored_stats():
    """
    Test that a snapshot starts from the stats of the stored record.
    """
    record = CharacterRecord.model_validate(
        {
            "id": "c1",
            "playerId": "p1",
            "name": "Aria",
            "attributes": {"strength": 3, "agility": 3, "stamina": 3, "intellect": 3, "wisdom": 3},
            "rotation": ["strike"],
        }
    )
    state = CharacterBattleState.from_record(record)
    assert state.owner_id == "p1"
    assert state.current_health == record.stats.health
    assert state.rotation == ["strike"]


def test_from_record_without_stats():
    """
    Test that a record whose stats were cleared after loading is refused.
    """
    record = CharacterRecord.model_validate(
        {"id": "c9", "playerId": "p1", "name": "Ghost", "stats": {"health": 100, "mana": 50}}
    )
    record.stats = None
    with pytest.raises(ValueError, match="no stats"):
        CharacterBattleState.from_record(record)
