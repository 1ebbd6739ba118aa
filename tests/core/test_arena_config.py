"""
Tests for the arena configuration.
"""

import json

import pytest
from core.config import ArenaConfig
from pydantic import ValidationError


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Runs every test in an empty directory, so no arena.json is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_defaults():
    """
    Test that the defaults match the combat constants.
    """
    config = ArenaConfig.load(environ={})
    assert config.max_battle_time == 300
    assert config.damage_reduction_cap == 0.8
    assert config.min_rotation_length == 3
    assert config.log_level == "INFO"


def test_load_from_file(isolated_cwd):
    """
    Test that values are read from a JSON file.
    """
    path = isolated_cwd / "custom.json"
    path.write_text(json.dumps({"min_rotation_length": 4, "data_dir": "store"}))
    config = ArenaConfig.load(path, environ={})
    assert config.min_rotation_length == 4
    assert str(config.data_dir) == "store"


def test_default_file_is_used_when_present(isolated_cwd):
    """
    Test that arena.json in the working directory is read when no path is given.
    """
    (isolated_cwd / "arena.json").write_text(json.dumps({"max_battle_time": 60}))
    assert ArenaConfig.load(environ={}).max_battle_time == 60


def test_environment_overrides_file(isolated_cwd):
    """
    Test that ARENA_* variables win over the file.
    """
    path = isolated_cwd / "arena.json"
    path.write_text(json.dumps({"max_battle_time": 60}))
    config = ArenaConfig.load(path, environ={"ARENA_MAX_BATTLE_TIME": "120", "ARENA_LOG_LEVEL": "DEBUG"})
    assert config.max_battle_time == 120
    assert config.log_level == "DEBUG"


def test_unknown_setting_is_rejected(isolated_cwd):
    """
    Test that a file with an unknown key fails to load.
    """
    path = isolated_cwd / "arena.json"
    path.write_text(json.dumps({"max_battle_tme": 60}))
    with pytest.raises(ValueError):
        ArenaConfig.load(path, environ={})


def test_missing_file_is_rejected(isolated_cwd):
    """
    Test that an explicit path that does not exist fails to load.
    """
    with pytest.raises(ValueError, match="not found"):
        ArenaConfig.load(isolated_cwd / "missing.json", environ={})


def test_invalid_json_is_rejected(isolated_cwd):
    """
    Test that a malformed file fails to load.
    """
    path = isolated_cwd / "arena.json"
    path.write_text("{not json")
    with pytest.raises(ValueError):
        ArenaConfig.load(path, environ={})


def test_out_of_range_cap_is_rejected():
    """
    Test that a reduction cap of 100% or more is refused.
    """
    with pytest.raises(ValueError):
        ArenaConfig.load(environ={"ARENA_DAMAGE_REDUCTION_CAP": "1.5"})


def test_config_is_frozen():
    """
    Test that a loaded configuration cannot be modified.
    """
    config = ArenaConfig()
    with pytest.raises(ValidationError):
        config.max_battle_time = 10
