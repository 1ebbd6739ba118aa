"""
Tests for battle experience and levelling.
"""

import random

import pytest
from character.experience import ExperienceModel
from character.record import CharacterRecord
from character.stats import Attributes


@pytest.fixture
def model():
    return ExperienceModel()


@pytest.fixture
def record():
    return CharacterRecord(
        id="c1",
        owner_id="p1",
        name="Aria",
        attributes=Attributes(strength=3, agility=3, stamina=3, intellect=3, wisdom=3),
    )


def test_exp_for_next_level(model):
    """
    Test that every level needs 20% more experience.
    """
    assert model.exp_for_next_level(1) == 100
    assert model.exp_for_next_level(2) == 120
    assert model.exp_for_next_level(3) == 144


def test_direct_battles_award_nothing(model):
    """
    Test that only matchmade battles award experience.
    """
    assert model.award_battle_experience(True, 5, False, random.Random(1)) == 0


def test_award_ranges(model):
    """
    Test that winners get 20-30 and losers 5-10 at level 1.
    """
    rng = random.Random(7)
    for _ in range(50):
        assert 20 <= model.award_battle_experience(True, 1, True, rng) <= 30
        assert 5 <= model.award_battle_experience(False, 1, True, rng) <= 10


def test_award_level_bonus(model, mocker):
    """
    Test that each level past the first adds 10% to the award.
    """
    rng = mocker.Mock()
    rng.randint.return_value = 25
    assert model.award_battle_experience(True, 3, True, rng) == 30
    rng.randint.assert_called_with(20, 30)

    rng.randint.return_value = 5
    assert model.award_battle_experience(False, 2, True, rng) == 6
    rng.randint.assert_called_with(5, 10)


def test_level_up(model, record):
    """
    Test that a level up spends the required experience and grants points.
    """
    record = record.model_copy(update={"experience": 110})
    assert model.can_level_up(record)
    leveled = model.level_up(record)
    assert leveled.level == 2
    assert leveled.experience == 10
    assert leveled.available_attribute_points == 2


def test_level_up_without_enough_experience(model, record):
    """
    Test that nothing changes when the experience is not enough.
    """
    record = record.model_copy(update={"experience": 99})
    assert model.level_up(record) is record


def test_apply_pending_level_ups(model, record):
    """
    Test that several levels are gained at once when the experience allows it.
    """
    record = record.model_copy(update={"experience": 230})
    leveled = model.apply_pending_level_ups(record)
    assert leveled.level == 3
    assert leveled.experience == 10
    assert leveled.available_attribute_points == 4
