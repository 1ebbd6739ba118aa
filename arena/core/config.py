"""
Configuration for the arena.

The configuration is a pydantic model with defaults for every value. It can
be loaded from an optional JSON file and then overridden through ARENA_*
environment variables, e.g. ARENA_DATA_DIR=/srv/arena/data.
"""

import json
import os
from pathlib import Path
from typing import Any

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import DAMAGE_REDUCTION_CAP, MAX_BATTLE_TIME, MIN_ROTATION_LENGTH

ENV_PREFIX = "ARENA_"

DEFAULT_CONFIG_FILE = "arena.json"


class ArenaConfig(BaseModel):
    """Runtime settings shared by the battle and matchmaking services."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the JSON collections.",
    )
    max_battle_time: float = Field(
        default=MAX_BATTLE_TIME,
        gt=0,
        description="Simulated seconds after which a battle ends on time.",
    )
    damage_reduction_cap: float = Field(
        default=DAMAGE_REDUCTION_CAP,
        ge=0,
        lt=1,
        description="Upper bound for the total reduction of a single hit.",
    )
    min_rotation_length: int = Field(
        default=MIN_ROTATION_LENGTH,
        ge=0,
        description="Abilities a rotation must hold before entering a battle.",
    )
    log_level: str = Field(
        default="INFO",
        description="Name of the logging level used by the command line tool.",
    )

    @classmethod
    def load(cls, path: Path | None = None, environ: dict[str, str] | None = None) -> "ArenaConfig":
        """
        Loads the configuration from a JSON file and the environment.

        Args:
            path (Path | None):
                The JSON file to read. When None, arena.json in the current
                directory is used if it exists.
            environ (dict[str, str] | None):
                The environment to read overrides from, os.environ by default.

        Returns:
            ArenaConfig:
                The resulting configuration.

        Raises:
            ValueError:
                If the file is not valid JSON or holds unknown settings.

        """
        values: dict[str, Any] = {}
        if path is None and Path(DEFAULT_CONFIG_FILE).is_file():
            path = Path(DEFAULT_CONFIG_FILE)
        if path is not None:
            if not path.is_file():
                raise ValueError(f"Configuration file not found: {path}")
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"File {path} raised an error: {e}") from e
            if not isinstance(data, dict):
                raise ValueError(f"Expected object in {path}, got {type(data).__name__}")
            values.update(data)
        # Environment overrides win over the file.
        environ = os.environ if environ is None else environ
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]
        try:
            return cls(**values)
        except ValidationError as e:
            log_warning(
                "Invalid arena configuration.",
                {"path": str(path) if path else None, "errors": e.errors()},
            )
            raise ValueError(f"Invalid arena configuration: {e}") from e
