"""
Core package for the arena.

Constants, configuration, logging, errors, persistence and console helpers
shared by every other package.
"""

from .config import ArenaConfig
from .constants import DamageType, NiceEnum
from .errors import (
    ArenaError,
    ExperienceAwardError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from .store import DataStore, JsonFileStore, MemoryStore

__all__ = [
    # Configuration
    "ArenaConfig",
    # Enumerations
    "DamageType",
    "NiceEnum",
    # Errors
    "ArenaError",
    "ExperienceAwardError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
    # Persistence
    "DataStore",
    "JsonFileStore",
    "MemoryStore",
]
