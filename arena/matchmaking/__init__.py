"""
Matchmaking package for the arena.
"""

from .models import (
    DequeueResult,
    MatchNotification,
    QueueEntry,
    QueueResponse,
    QueueSnapshot,
    QueueStatus,
)
from .queue import MatchmakingQueue

__all__ = [
    # Service
    "MatchmakingQueue",
    # Models
    "DequeueResult",
    "MatchNotification",
    "QueueEntry",
    "QueueResponse",
    "QueueSnapshot",
    "QueueStatus",
]
