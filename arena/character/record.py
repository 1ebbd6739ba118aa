"""
The persisted character record.

Only the fields the arena needs are modelled; any other field found in the
characters collection (inventory, equipment, ...) is kept untouched so that
writing a record back does not lose data.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.constants import DamageType

from .stats import Attributes, StatsRecord, calculate_stats


class CharacterRecord(BaseModel):
    """A character as stored in the characters collection."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str = Field(description="Unique character id.")
    owner_id: str = Field(
        validation_alias=AliasChoices("playerId", "ownerId", "owner_id"),
        serialization_alias="playerId",
        description="Id of the player owning the character.",
    )
    name: str = Field(description="Display name.")
    attributes: Attributes | None = Field(
        default=None,
        description="Attribute distribution, used when stats are missing.",
    )
    stats: StatsRecord | None = Field(default=None, description="Derived combat stats.")
    rotation: list[str] = Field(default_factory=list, description="Ordered ability ids.")
    attack_type: DamageType = Field(
        default=DamageType.PHYSICAL,
        description="Kind of the basic attack.",
    )
    level: int = Field(default=1, ge=1, description="Character level.")
    experience: int = Field(default=0, ge=0, description="Experience towards the next level.")
    available_attribute_points: int = Field(default=0, ge=0, description="Unspent attribute points.")

    def model_post_init(self, _: Any) -> None:
        if self.stats is None:
            if self.attributes is None:
                raise ValueError(f"Character '{self.id}' has neither stats nor attributes.")
            self.stats = calculate_stats(self.attributes)

    def to_json(self) -> dict:
        """Returns the record in its persisted camelCase shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
