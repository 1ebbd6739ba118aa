"""
Tests for the cooldown tracker.
"""

import pytest
from combat.cooldowns import CooldownTracker


@pytest.fixture
def tracker():
    return CooldownTracker()


def test_unused_ability_is_ready(tracker):
    """
    Test that an ability that was never used is not on cooldown.
    """
    assert not tracker.is_on_cooldown("fireball", 0)
    assert tracker.get_remaining("fireball", 0) == 0


def test_cooldown_window(tracker):
    """
    Test that an ability is usable again exactly when its cooldown ends.
    """
    tracker.set_on_cooldown("fireball", 5, 10)
    assert tracker.is_on_cooldown("fireball", 10)
    assert tracker.is_on_cooldown("fireball", 14.9)
    assert not tracker.is_on_cooldown("fireball", 15)
    assert tracker.get_remaining("fireball", 12) == 3


def test_active_cooldowns_and_reset(tracker):
    """
    Test the listing of running cooldowns and the reset.
    """
    tracker.set_on_cooldown("fireball", 5, 0)
    tracker.set_on_cooldown("heal", 2, 0)
    assert tracker.active_cooldowns(3) == {"fireball": 2}
    tracker.reset_all()
    assert tracker.active_cooldowns(0) == {}
