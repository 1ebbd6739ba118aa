"""
Tests for the ability catalog.
"""

import json
from pathlib import Path

import pytest
from abilities.catalog import AbilityCatalog
from abilities.definition import DirectAbility

DATA_DIR = Path(__file__).resolve().parents[2] / "data"


@pytest.fixture
def records():
    return [
        {"id": "strike", "name": "Strike", "damage": "physical", "cooldown": 3},
        {"id": "heal", "name": "Heal", "type": "magic", "healEffect": {"multiplier": 1}},
    ]


def test_lookup_by_id_and_name(records):
    """
    Test that abilities are found by id and by display name.
    """
    catalog = AbilityCatalog.from_records(records)
    assert len(catalog) == 2
    assert "strike" in catalog
    assert isinstance(catalog.get("strike"), DirectAbility)
    assert catalog.get_by_name("Heal").id == "heal"


def test_missing_ability_logs_warning(records, mocker):
    """
    Test that a lookup miss returns None and logs a warning.
    """
    warning = mocker.patch("abilities.catalog.log_warning")
    catalog = AbilityCatalog.from_records(records)
    assert catalog.get("meteor") is None
    assert catalog.get_by_name("Meteor") is None
    assert warning.call_count == 2


def test_duplicate_ids_are_rejected(records):
    """
    Test that two abilities cannot share an id.
    """
    with pytest.raises(ValueError, match="Duplicate"):
        AbilityCatalog.from_records(records + [records[0]])


def test_invalid_record_is_rejected(records, mocker):
    """
    Test that an invalid record stops the catalog from loading.
    """
    critical = mocker.patch("abilities.catalog.log_critical")
    records.append({"id": "broken", "name": "Broken", "healEffect": {"multiplier": -1}})
    with pytest.raises(ValueError, match="broken"):
        AbilityCatalog.from_records(records)
    critical.assert_called_once()


def test_from_file(tmp_path, records):
    """
    Test loading a catalog from a JSON file.
    """
    path = tmp_path / "abilities.json"
    path.write_text(json.dumps(records))
    catalog = AbilityCatalog.from_file(path)
    assert [ability.id for ability in catalog.all()] == ["strike", "heal"]


def test_from_missing_file(tmp_path):
    """
    Test that a missing file is reported as a ValueError.
    """
    with pytest.raises(ValueError, match="File not found"):
        AbilityCatalog.from_file(tmp_path / "missing.json")


def test_shipped_abilities_load():
    """
    Test that the abilities in the data directory are all valid, and that
    every rotation in the shipped characters refers to them.
    """
    catalog = AbilityCatalog.from_file(DATA_DIR / "abilities.json")
    assert len(catalog) > 0
    with open(DATA_DIR / "characters.json", encoding="utf-8") as f:
        characters = json.load(f)
    for character in characters:
        assert len(character["rotation"]) >= 3
        for ability_id in character["rotation"]:
            assert ability_id in catalog
