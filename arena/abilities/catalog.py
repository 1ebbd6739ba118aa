"""
Ability catalog for the arena.

Maps ability ids to their definitions. The catalog is built once from the
abilities collection and handed to the services that need it.
"""

import json
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from catchery import log_critical, log_warning
from core.utils import cprint
from pydantic import ValidationError

from .definition import Ability, parse_ability


class AbilityCatalog:
    """
    Read-only lookup of ability definitions by id and by name.
    """

    def __init__(self, abilities: Iterable[Ability] = ()) -> None:
        """
        Initialize the catalog.

        Args:
            abilities (Iterable[Ability]):
                The abilities to register.

        Raises:
            ValueError:
                If two abilities share the same id.

        """
        self._by_id: dict[str, Ability] = {}
        self._by_name: dict[str, Ability] = {}
        for ability in abilities:
            if ability.id in self._by_id:
                raise ValueError(f"Duplicate ability id '{ability.id}'.")
            self._by_id[ability.id] = ability
            self._by_name.setdefault(ability.name, ability)

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> "AbilityCatalog":
        """
        Builds a catalog from raw ability records.

        Args:
            records (list[dict[str, Any]]):
                The records, in the flat or in the explicit shape.

        Returns:
            AbilityCatalog:
                The catalog.

        Raises:
            ValueError:
                If a record is not a valid ability.

        """
        abilities: list[Ability] = []
        for record in records:
            try:
                abilities.append(parse_ability(record))
            except ValidationError as e:
                log_critical(
                    f"Invalid ability record '{record.get('id', '<unknown>')}'.",
                    {"record": record, "errors": e.errors()},
                )
                raise ValueError(f"Invalid ability record {record.get('id')!r}: {e}") from e
        return cls(abilities)

    @classmethod
    def from_file(cls, filepath: Path) -> "AbilityCatalog":
        """Builds a catalog from a JSON file holding a list of records."""
        return _load_json_file(filepath, cls.from_records, "abilities")

    def get(self, ability_id: str) -> Ability | None:
        """
        Gets an ability by id.

        Args:
            ability_id (str):
                The ability id.

        Returns:
            Ability | None:
                The ability, or None if it is not in the catalog.

        """
        ability = self._by_id.get(ability_id)
        if ability is None:
            log_warning(
                f"Ability '{ability_id}' not found in the catalog.",
                {"ability_id": ability_id, "known": len(self._by_id)},
            )
        return ability

    def get_by_name(self, name: str) -> Ability | None:
        """Gets an ability by display name, or None if not found."""
        ability = self._by_name.get(name)
        if ability is None:
            log_warning(
                f"Ability named '{name}' not found in the catalog.",
                {"name": name},
            )
        return ability

    def all(self) -> list[Ability]:
        return list(self._by_id.values())

    def __contains__(self, ability_id: object) -> bool:
        return ability_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)


def _load_json_file(
    filepath: Path,
    loader_func: Callable[[list[dict]], AbilityCatalog],
    description: str,
) -> AbilityCatalog:
    """Helper to load and validate JSON files"""
    try:
        cprint(
            f"  Loading {description} using {loader_func.__name__}...",
            style="bold green",
        )
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        if not filepath.is_file():
            raise ValueError(f"Not a file: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Expected list in {filepath}, got {type(data).__name__}")
        return loader_func(data)
    except (json.JSONDecodeError, FileNotFoundError, ValueError) as e:
        raise ValueError(f"File {filepath} raised an error: {e}") from e
