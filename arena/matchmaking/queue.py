"""
Matchmaking queue for the arena.

Characters wait in a first-come first-served queue. As soon as a character
joins (or polls) while another eligible character is waiting, the two are
paired and their battle is fought immediately; the waiting side learns about
it through a pending notification on its next request.

The queue is in memory and not thread-safe: callers must not use it from
several threads at once.
"""

from collections.abc import Callable
from datetime import datetime, timezone

from catchery import log_error, log_info, log_warning
from combat.battle_service import BattleService
from core.errors import ExperienceAwardError

from .models import (
    DequeueResult,
    MatchNotification,
    QueueEntry,
    QueueResponse,
    QueueSnapshot,
    QueueStatus,
)

MESSAGE_MATCH_FOUND = "Match found!"
MESSAGE_STILL_SEARCHING = "Still searching for opponent..."
MESSAGE_ADDED = "Added to queue. Searching for opponent..."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MatchmakingQueue:
    """
    Pairs waiting characters and runs their battles.

    Attributes:
        battles (BattleService):
            Runs, saves and rewards the battles of paired characters.
        entries (list[QueueEntry]):
            The waiting characters, oldest first.
        pending (dict[str, MatchNotification]):
            Matches found for characters that have not been told yet.

    """

    def __init__(
        self,
        battles: BattleService,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize the MatchmakingQueue.

        Args:
            battles (BattleService):
                The service running the battles.
            clock (Callable[[], datetime]):
                Source of the queue timestamps.

        """
        self.battles = battles
        self.clock = clock
        self.entries: list[QueueEntry] = []
        self.pending: dict[str, MatchNotification] = {}

    # ============================================================================
    # QUEUE OPERATIONS
    # ============================================================================

    def join(self, character_id: str, owner_id: str) -> QueueResponse:
        """
        Checks that a player may queue a character, then enqueues it.

        Raises:
            NotFoundError:
                If the character does not exist or is not owned by the player.
            ValidationError:
                If its rotation is too short.

        """
        record = self.battles.get_owned_character(character_id, owner_id)
        self.battles.validate_rotation(record)
        return self.enqueue(character_id, owner_id)

    def enqueue(self, character_id: str, owner_id: str) -> QueueResponse:
        """
        Adds a character to the queue and tries to pair it.

        Args:
            character_id (str):
                The character joining.
            owner_id (str):
                The player owning it.

        Returns:
            QueueResponse:
                The match if one was pending or was just found, otherwise the
                position of the character in the queue.

        """
        match = self.pending.pop(character_id, None)
        if match is not None:
            return QueueResponse(message=MESSAGE_MATCH_FOUND, match=match)

        existing = self._find_entry(character_id)
        if existing is not None:
            existing.timestamp = self.clock()
            return QueueResponse(
                message=MESSAGE_STILL_SEARCHING,
                queue_position=self.position(character_id),
            )

        self.entries.append(
            QueueEntry(character_id=character_id, owner_id=owner_id, timestamp=self.clock())
        )
        match = self.pair(character_id, owner_id)
        if match is not None:
            return QueueResponse(message=MESSAGE_MATCH_FOUND, match=match)
        return QueueResponse(message=MESSAGE_ADDED, queue_position=self.position(character_id))

    def pair(self, character_id: str, owner_id: str) -> MatchNotification | None:
        """
        Looks for an opponent and, if one is found, fights the battle.

        The opponent is the oldest waiting character that is neither the same
        character nor owned by the same player. Both leave the queue; the
        opponent gets a pending notification and the caller gets its own.

        Args:
            character_id (str):
                The character looking for an opponent.
            owner_id (str):
                The player owning it.

        Returns:
            MatchNotification | None:
                The caller's match, or None if nobody eligible is waiting.

        Raises:
            ExperienceAwardError:
                If the battle was saved but not rewarded. The pairing stands
                and both characters get a pending notification.
            Exception:
                Any other failure to run or save the battle. Both characters
                are put back in the queue.

        """
        opponent = next(
            (
                entry
                for entry in self.entries
                if entry.character_id != character_id and entry.owner_id != owner_id
            ),
            None,
        )
        if opponent is None:
            return None

        previous = list(self.entries)
        self.entries = [
            entry
            for entry in self.entries
            if entry.character_id not in (character_id, opponent.character_id)
        ]
        try:
            result = self.battles.run_matchmade_battle(character_id, opponent.character_id)
        except ExperienceAwardError as e:
            # The battle is saved, so pairing again would record it twice.
            self.pending[character_id] = MatchNotification(
                opponent_id=opponent.character_id,
                battle_id=e.battle_id,
            )
            self.pending[opponent.character_id] = MatchNotification(
                opponent_id=character_id,
                battle_id=e.battle_id,
            )
            log_error(
                f"Battle {e.battle_id} between '{character_id}' and '{opponent.character_id}' "
                "was saved without experience.",
                {"character_id": character_id, "opponent_id": opponent.character_id},
                exception=e,
            )
            raise
        except Exception as e:
            self.entries = previous
            log_error(
                f"Matchmade battle between '{character_id}' and '{opponent.character_id}' failed.",
                {"character_id": character_id, "opponent_id": opponent.character_id},
                exception=e,
            )
            raise

        self.pending[opponent.character_id] = MatchNotification(
            opponent_id=character_id,
            battle_id=result.id,
        )
        log_info(
            f"Paired '{character_id}' with '{opponent.character_id}'.",
            {"battle_id": result.id, "winner": result.winner},
        )
        return MatchNotification(opponent_id=opponent.character_id, battle_id=result.id)

    def dequeue(self, character_id: str) -> DequeueResult:
        """
        Removes a character from the queue.

        A match found for the character before it left is handed back in the
        result rather than dropped, since its battle has already been fought
        and saved.

        Args:
            character_id (str):
                The character leaving.

        Returns:
            DequeueResult:
                Whether the character was waiting, and any pending match.

        """
        before = len(self.entries)
        self.entries = [entry for entry in self.entries if entry.character_id != character_id]
        match = self.pending.pop(character_id, None)
        if match is not None:
            log_warning(
                f"Character '{character_id}' left the queue with an undelivered match.",
                {"character_id": character_id, "battle_id": match.battle_id},
            )
        return DequeueResult(removed=len(self.entries) < before, match=match)

    def status(self, character_id: str, owner_id: str) -> QueueStatus:
        """
        Reports the status of a character, trying to pair it once more.

        Args:
            character_id (str):
                The character polling.
            owner_id (str):
                The player owning it.

        Returns:
            QueueStatus:
                The match if one was pending or was just found, otherwise
                whether and since when the character is waiting.

        """
        match = self.pending.pop(character_id, None)
        if match is not None:
            return QueueStatus(in_queue=False, match=match)

        entry = self._find_entry(character_id)
        if entry is None:
            return QueueStatus(in_queue=False)

        match = self.pair(character_id, owner_id)
        if match is not None:
            return QueueStatus(in_queue=False, match=match)

        return QueueStatus(
            in_queue=True,
            queue_position=self.position(character_id),
            queue_time=entry.timestamp,
        )

    # ============================================================================
    # INSPECTION
    # ============================================================================

    def position(self, character_id: str) -> int | None:
        """Returns the 1-based position of a character, None if it is not waiting."""
        for index, entry in enumerate(self.entries):
            if entry.character_id == character_id:
                return index + 1
        return None

    def snapshot(self) -> QueueSnapshot:
        return QueueSnapshot(
            queue_length=len(self.entries),
            entries=[entry.model_copy() for entry in self.entries],
        )

    def _find_entry(self, character_id: str) -> QueueEntry | None:
        return next((entry for entry in self.entries if entry.character_id == character_id), None)

    def __len__(self) -> int:
        return len(self.entries)
