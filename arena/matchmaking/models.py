"""
Matchmaking models for the arena.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MatchmakingModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QueueEntry(MatchmakingModel):
    """A character waiting for an opponent."""

    character_id: str = Field(description="The waiting character.")
    owner_id: str = Field(description="The player owning the character.")
    timestamp: datetime = Field(description="When the character joined, or last asked to join.")


class MatchNotification(MatchmakingModel):
    """What a paired character is told about its match."""

    opponent_id: str = Field(description="The character it was paired with.")
    battle_id: str = Field(description="The battle that was fought.")


class QueueResponse(MatchmakingModel):
    """Answer to a request to join the queue."""

    success: bool = Field(default=True, description="Whether the request was accepted.")
    message: str = Field(description="Human-readable status.")
    match: MatchNotification | None = Field(default=None, description="The match, once found.")
    queue_position: int | None = Field(default=None, description="1-based position while waiting.")


class DequeueResult(MatchmakingModel):
    """Answer to a request to leave the queue."""

    success: bool = Field(default=True, description="Whether the request was accepted.")
    removed: bool = Field(description="Whether the character was waiting in the queue.")
    match: MatchNotification | None = Field(
        default=None,
        description="A match found before the character left, which is still delivered.",
    )


class QueueStatus(MatchmakingModel):
    """Status of a character polling the queue."""

    in_queue: bool = Field(description="Whether the character is still waiting.")
    match: MatchNotification | None = Field(default=None, description="The match, once found.")
    queue_position: int | None = Field(default=None, description="1-based position while waiting.")
    queue_time: datetime | None = Field(default=None, description="When the character joined.")


class QueueSnapshot(MatchmakingModel):
    """Overview of the whole queue."""

    queue_length: int = Field(description="Number of waiting characters.")
    entries: list[QueueEntry] = Field(default_factory=list, description="The waiting characters, in order.")
