"""
Tests for the matchmaking queue.
"""

from datetime import datetime, timedelta, timezone

import pytest
from abilities.catalog import AbilityCatalog
from combat.battle_service import BattleService
from core.errors import ExperienceAwardError, NotFoundError, PersistenceError, ValidationError
from core.store import BATTLE_LOGS, CHARACTERS, MemoryStore
from matchmaking.queue import (
    MESSAGE_ADDED,
    MESSAGE_MATCH_FOUND,
    MESSAGE_STILL_SEARCHING,
    MatchmakingQueue,
)

ABILITIES = [
    {"id": "strike", "name": "Strike", "damage": "physical", "cooldown": 3},
    {"id": "bolt", "name": "Bolt", "type": "magic", "damage": "magic", "manaCost": 5, "cooldown": 4},
    {"id": "guard", "name": "Guard", "buffEffect": {"type": "physicalReduction", "amount": 20, "duration": 5}},
]


def character(id, owner, rotation=("strike", "bolt", "guard")):
    return {
        "id": id,
        "playerId": owner,
        "name": id.title(),
        "attributes": {"strength": 3, "agility": 3, "stamina": 3, "intellect": 3, "wisdom": 3},
        "rotation": list(rotation),
    }


class FakeClock:
    """Returns a time that only moves when told to."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def store():
    return MemoryStore(
        {
            CHARACTERS: [
                character("alpha", "x"),
                character("beta", "x"),
                character("gamma", "y"),
                character("delta", "z"),
                character("short", "z", rotation=("strike",)),
            ],
            BATTLE_LOGS: [],
        }
    )


@pytest.fixture
def service(store):
    return BattleService(store, AbilityCatalog.from_records(ABILITIES))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def queue(service, clock):
    return MatchmakingQueue(service, clock=clock)


def test_same_owner_never_pairs(queue, store):
    """
    Test that two characters of the same player wait side by side.
    """
    first = queue.enqueue("alpha", "x")
    second = queue.enqueue("beta", "x")
    assert first.message == MESSAGE_ADDED
    assert first.queue_position == 1
    assert second.message == MESSAGE_ADDED
    assert second.queue_position == 2
    assert second.match is None
    assert len(queue) == 2
    assert store.read(BATTLE_LOGS) == []


def test_pairing_notifies_both_sides(queue, store):
    """
    Test that the joining character fights the waiting one and both learn the battle id.
    """
    queue.enqueue("alpha", "x")
    response = queue.enqueue("gamma", "y")
    assert response.message == MESSAGE_MATCH_FOUND
    assert response.match.opponent_id == "alpha"
    assert len(queue) == 0

    battles = store.read(BATTLE_LOGS)
    assert len(battles) == 1
    assert battles[0]["id"] == response.match.battle_id
    assert battles[0]["character"]["id"] == "gamma"
    assert battles[0]["isMatchmade"] is True

    status = queue.status("alpha", "x")
    assert not status.in_queue
    assert status.match.opponent_id == "gamma"
    assert status.match.battle_id == response.match.battle_id

    again = queue.status("alpha", "x")
    assert not again.in_queue
    assert again.match is None


def test_oldest_eligible_entry_is_chosen(queue, clock):
    """
    Test that the opponent is the first waiting character of another player.
    """
    queue.enqueue("alpha", "x")
    clock.advance(5)
    queue.enqueue("beta", "x")
    response = queue.enqueue("gamma", "y")
    assert response.match.opponent_id == "alpha"
    assert queue.position("beta") == 1
    assert len(queue) == 1


def test_pending_match_is_delivered_on_enqueue(queue):
    """
    Test that a paired character asking to join again receives its match instead.
    """
    queue.enqueue("alpha", "x")
    match = queue.enqueue("gamma", "y").match
    response = queue.enqueue("alpha", "x")
    assert response.message == MESSAGE_MATCH_FOUND
    assert response.match.battle_id == match.battle_id
    assert len(queue) == 0


def test_enqueue_twice_refreshes_timestamp(queue, clock):
    """
    Test that joining again while waiting keeps the position and updates the time.
    """
    queue.enqueue("alpha", "x")
    clock.advance(30)
    response = queue.enqueue("alpha", "x")
    assert response.message == MESSAGE_STILL_SEARCHING
    assert response.queue_position == 1
    assert queue.snapshot().entries[0].timestamp == clock.now
    assert len(queue) == 1


def test_status_while_waiting(queue, clock):
    """
    Test the status of a character still in the queue.
    """
    queue.enqueue("alpha", "x")
    queue.enqueue("beta", "x")
    status = queue.status("beta", "x")
    assert status.in_queue
    assert status.queue_position == 2
    assert status.queue_time == clock.now


def test_status_when_not_queued(queue):
    """
    Test the status of a character that never joined.
    """
    status = queue.status("delta", "z")
    assert not status.in_queue
    assert status.match is None
    assert status.queue_position is None


def test_dequeue(queue):
    """
    Test leaving the queue.
    """
    queue.enqueue("alpha", "x")
    queue.enqueue("beta", "x")
    result = queue.dequeue("alpha")
    assert result.success
    assert result.removed
    assert queue.position("beta") == 1
    assert not queue.dequeue("alpha").removed


def test_dequeue_hands_back_pending_match(queue):
    """
    Test that leaving after being paired still delivers the match, once.
    """
    queue.enqueue("alpha", "x")
    match = queue.enqueue("gamma", "y").match
    result = queue.dequeue("alpha")
    assert not result.removed
    assert result.match.battle_id == match.battle_id
    assert queue.status("alpha", "x").match is None


def test_failed_battle_restores_queue(queue, service, mocker):
    """
    Test that both characters are back in the queue when their battle fails.
    """
    mocker.patch.object(service, "run_matchmade_battle", side_effect=PersistenceError("disk full"))
    queue.enqueue("alpha", "x")
    with pytest.raises(PersistenceError):
        queue.enqueue("gamma", "y")
    assert [entry.character_id for entry in queue.snapshot().entries] == ["alpha", "gamma"]
    assert queue.pending == {}


def test_malformed_opponent_restores_queue(queue, store):
    """
    Test that a waiting character whose stored record is broken does not make
    both characters disappear from the queue.
    """
    store.write(CHARACTERS, store.read(CHARACTERS) + [{"id": "broken", "playerId": "w", "name": "Broken"}])
    queue.enqueue("broken", "w")
    with pytest.raises(ValidationError):
        queue.enqueue("alpha", "x")
    assert [entry.character_id for entry in queue.snapshot().entries] == ["broken", "alpha"]
    assert queue.pending == {}
    assert store.read(BATTLE_LOGS) == []


def test_unexpected_error_restores_queue(queue, service, mocker):
    """
    Test that any failure while fighting puts both characters back in the queue.
    """
    mocker.patch.object(service, "run_matchmade_battle", side_effect=RuntimeError("boom"))
    queue.enqueue("alpha", "x")
    with pytest.raises(RuntimeError):
        queue.enqueue("gamma", "y")
    assert [entry.character_id for entry in queue.snapshot().entries] == ["alpha", "gamma"]


def test_saved_battle_without_experience_is_still_delivered(queue, service, store, mocker):
    """
    Test that a battle saved before experience failed is delivered to both
    sides and never fought again.
    """
    mocker.patch.object(service, "award_experience", side_effect=PersistenceError("disk full"))
    queue.enqueue("alpha", "x")
    with pytest.raises(ExperienceAwardError):
        queue.enqueue("gamma", "y")

    battles = store.read(BATTLE_LOGS)
    assert len(battles) == 1
    assert len(queue) == 0
    caller = queue.status("gamma", "y")
    assert caller.match.opponent_id == "alpha"
    assert caller.match.battle_id == battles[0]["id"]
    waiting = queue.status("alpha", "x")
    assert waiting.match.opponent_id == "gamma"
    assert waiting.match.battle_id == battles[0]["id"]
    assert len(store.read(BATTLE_LOGS)) == 1


def test_join_validates_the_character(queue):
    """
    Test that joining checks ownership and the rotation.
    """
    with pytest.raises(NotFoundError):
        queue.join("alpha", "y")
    with pytest.raises(NotFoundError):
        queue.join("nobody", "x")
    with pytest.raises(ValidationError):
        queue.join("short", "z")
    assert queue.join("alpha", "x").message == MESSAGE_ADDED


def test_snapshot(queue):
    """
    Test the overview of the queue and its camelCase shape.
    """
    queue.enqueue("alpha", "x")
    queue.enqueue("beta", "x")
    snapshot = queue.snapshot()
    assert snapshot.queue_length == 2
    data = snapshot.model_dump(mode="json", by_alias=True)
    assert data["queueLength"] == 2
    assert data["entries"][0]["characterId"] == "alpha"
    assert data["entries"][1]["ownerId"] == "x"
