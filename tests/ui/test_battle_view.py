"""
Tests for the console playback of battles.
"""

import pytest
from abilities.catalog import AbilityCatalog
from combat.battle_log import AttackHit, BattleLogEntry, ManaDrained
from combat.battle_service import BattleService
from core.constants import DamageType
from core.store import BATTLE_LOGS, CHARACTERS, MemoryStore
from ui.battle_view import ResourceTracker, format_entry, play_battle, render_battle, winner_name


@pytest.fixture
def result():
    store = MemoryStore(
        {
            CHARACTERS: [
                {
                    "id": "c1",
                    "playerId": "p1",
                    "name": "Aria",
                    "attributes": {"strength": 3, "agility": 3, "stamina": 3, "intellect": 3, "wisdom": 3},
                    "rotation": ["strike", "strike", "strike"],
                },
                {
                    "id": "c2",
                    "playerId": "p2",
                    "name": "Borin",
                    "attributes": {"strength": 3, "agility": 3, "stamina": 3, "intellect": 3, "wisdom": 3},
                    "rotation": ["strike", "strike", "strike"],
                },
            ],
            BATTLE_LOGS: [],
        }
    )
    catalog = AbilityCatalog.from_records([{"id": "strike", "name": "Strike", "damage": "physical"}])
    return BattleService(store, catalog).challenge("c1", "c2", "p1")


def test_tracker_follows_events(result):
    """
    Test that the tracker reads health and mana from the events.
    """
    tracker = ResourceTracker(result.character, result.opponent)
    tracker.update(
        BattleLogEntry(
            time=1,
            message="",
            event=AttackHit(
                attacker="Aria",
                target="Borin",
                attack="Strike",
                damage_type=DamageType.PHYSICAL,
                amount=10,
                target_health=120,
            ),
        )
    )
    tracker.update(
        BattleLogEntry(time=2, message="", event=ManaDrained(character="Aria", effect="Drain", amount=8, mana=72))
    )
    assert tracker.health["Borin"] == 120
    assert tracker.mana["Aria"] == 72
    assert "120/130" in tracker.bars("Borin")


def test_render_battle(result):
    """
    Test that every log line ends up in the rendered text.
    """
    text = render_battle(result)
    for entry in result.log:
        assert entry.message in text
    assert format_entry(result.log[0]).startswith("[dim]")
    assert "\x1b[" not in text


def test_play_battle(result, mocker):
    """
    Test that playback prints the combatants, the log and the outcome.
    """
    printed = mocker.patch("ui.battle_view.cprint")
    ruled = mocker.patch("ui.battle_view.crule")
    play_battle(result)
    assert printed.call_count > len(result.log)
    last_rule = ruled.call_args_list[-1].args[0]
    name = winner_name(result)
    assert last_rule == ("Draw" if name is None else f"Winner: {name}")
