"""
Flat-file persistence for the arena.

Every collection (characters, battlelogs, abilities) is a JSON list stored in
its own file inside the data directory. The services only depend on the
DataStore protocol, so tests can hand them an in-memory store instead.
"""

import json
from pathlib import Path
from typing import Any, Protocol

from catchery import log_error, log_warning

from .utils import cprint

CHARACTERS = "characters"
BATTLE_LOGS = "battlelogs"
ABILITIES = "abilities"

COLLECTIONS = (CHARACTERS, BATTLE_LOGS, ABILITIES)


class DataStore(Protocol):
    """Interface of the record store used by the services."""

    def read(self, collection: str) -> list[dict[str, Any]]:
        """Returns every record of the collection, empty if it does not exist."""
        ...

    def write(self, collection: str, records: list[dict[str, Any]]) -> bool:
        """Replaces the collection, returning False when the write failed."""
        ...


class JsonFileStore:
    """
    Stores each collection as <data_dir>/<collection>.json.
    """

    def __init__(self, data_dir: Path) -> None:
        """
        Initialize the store.

        Args:
            data_dir (Path):
                The directory holding the collection files.

        """
        self.data_dir = Path(data_dir)

    def path_for(self, collection: str) -> Path:
        """Returns the file backing a collection."""
        return self.data_dir / f"{collection}.json"

    def ensure_collections(self) -> None:
        """Creates the data directory and an empty file for missing collections."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for collection in COLLECTIONS:
            path = self.path_for(collection)
            if not path.exists():
                cprint(f"  Creating empty {collection} collection...", style="bold green")
                path.write_text("[]", encoding="utf-8")

    def read(self, collection: str) -> list[dict[str, Any]]:
        """
        Reads a collection.

        Args:
            collection (str):
                The name of the collection.

        Returns:
            list[dict[str, Any]]:
                The records, or an empty list if the file is missing or unreadable.

        """
        path = self.path_for(collection)
        if not path.is_file():
            log_warning(
                f"Collection '{collection}' not found, reading it as empty.",
                {"collection": collection, "path": str(path)},
            )
            return []
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log_error(
                f"Failed to read collection '{collection}'.",
                {"collection": collection, "path": str(path)},
                exception=e,
            )
            return []
        if not isinstance(data, list):
            log_error(
                f"Collection '{collection}' does not hold a list.",
                {"collection": collection, "actual_type": type(data).__name__},
            )
            return []
        return data

    def write(self, collection: str, records: list[dict[str, Any]]) -> bool:
        """
        Writes a collection, replacing its previous content.

        Args:
            collection (str):
                The name of the collection.
            records (list[dict[str, Any]]):
                The records to store.

        Returns:
            bool:
                True if the collection was written, False otherwise.

        """
        path = self.path_for(collection)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
        except (OSError, TypeError, ValueError) as e:
            log_error(
                f"Failed to write collection '{collection}'.",
                {"collection": collection, "path": str(path)},
                exception=e,
            )
            return False
        return True


class MemoryStore:
    """
    Keeps every collection in memory. Used by tests and dry runs.
    """

    def __init__(self, collections: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {
            name: list(records) for name, records in (collections or {}).items()
        }
        self.fail_writes = False

    def read(self, collection: str) -> list[dict[str, Any]]:
        return json.loads(json.dumps(self.collections.get(collection, [])))

    def write(self, collection: str, records: list[dict[str, Any]]) -> bool:
        if self.fail_writes:
            return False
        self.collections[collection] = json.loads(json.dumps(records))
        return True
