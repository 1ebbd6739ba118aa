"""
Exceptions raised by the arena services.
"""

from typing import Any


class ArenaError(Exception):
    """Base class for every error raised by the arena."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}


class NotFoundError(ArenaError):
    """A character, ability or battle could not be found."""


class ValidationError(ArenaError):
    """A request is not valid, e.g. a rotation that is too short."""


class PersistenceError(ArenaError):
    """The store refused to write a collection."""


class ExperienceAwardError(PersistenceError):
    """A battle was saved but its experience could not be awarded."""

    def __init__(self, message: str, battle_id: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, {"battle_id": battle_id, **(context or {})})
        self.battle_id = battle_id
