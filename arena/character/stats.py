"""
Character stats module for the arena.

Derives the combat stats of a character from its five attributes and holds
the immutable stats record used by the battle engine.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Attribute points a freshly created character distributes.
BASE_ATTRIBUTE_POINTS = 15

REQUIRED_ATTRIBUTES = ("strength", "agility", "stamina", "intellect", "wisdom")

# Attack speed bounds, in seconds per attack.
BASE_ATTACK_TIME = 10.0
MIN_ATTACK_TIME = 2.0


class Attributes(BaseModel):
    """The five attributes a player distributes points into."""

    model_config = ConfigDict(frozen=True)

    strength: int = Field(default=1, ge=0, description="Physical damage and reduction.")
    agility: int = Field(default=1, ge=0, description="Attack speed and critical chance.")
    stamina: int = Field(default=1, ge=0, description="Health and damage reduction.")
    intellect: int = Field(default=1, ge=0, description="Magic damage and spell critical chance.")
    wisdom: int = Field(default=1, ge=0, description="Mana, magic damage and magic reduction.")

    @property
    def total(self) -> int:
        return self.strength + self.agility + self.stamina + self.intellect + self.wisdom


class StatsRecord(BaseModel):
    """
    The derived combat stats of a character. Percentages are expressed as
    numbers between 0 and 100, attack speed in seconds per attack.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    health: int = Field(description="Maximum health.")
    mana: int = Field(description="Maximum mana.")
    min_physical_damage: float = Field(default=0, description="Lowest physical hit.")
    max_physical_damage: float = Field(default=0, description="Highest physical hit.")
    min_magic_damage: float = Field(default=0, description="Lowest magic hit.")
    max_magic_damage: float = Field(default=0, description="Highest magic hit.")
    attack_speed: float = Field(default=BASE_ATTACK_TIME, gt=0, description="Seconds between two actions.")
    critical_chance: float = Field(default=0, description="Physical critical chance in percent.")
    spell_crit_chance: float = Field(default=0, description="Spell critical chance in percent.")
    physical_damage_reduction: float = Field(default=0, description="Physical damage reduction in percent.")
    magic_damage_reduction: float = Field(default=0, description="Magic damage reduction in percent.")

    @property
    def average_magic_damage(self) -> float:
        """Returns the mean of the magic damage range."""
        return (self.min_magic_damage + self.max_magic_damage) / 2


def calculate_stats(attributes: Attributes) -> StatsRecord:
    """
    Derives the combat stats from a set of attributes.

    Args:
        attributes (Attributes):
            The attributes of the character.

    Returns:
        StatsRecord:
            The derived stats.

    """
    strength = attributes.strength
    agility = attributes.agility
    stamina = attributes.stamina
    intellect = attributes.intellect
    wisdom = attributes.wisdom
    return StatsRecord(
        # Physical.
        min_physical_damage=strength * 2,
        max_physical_damage=strength * 3 + agility,
        critical_chance=agility * 2,
        attack_speed=max(MIN_ATTACK_TIME, BASE_ATTACK_TIME - agility * 0.5),
        # Magic.
        min_magic_damage=intellect * 2,
        max_magic_damage=intellect * 2 + wisdom * 1.5,
        spell_crit_chance=intellect * 2,
        # Defensive.
        health=100 + stamina * 10,
        mana=50 + wisdom * 10,
        physical_damage_reduction=strength * 0.5 + stamina,
        magic_damage_reduction=stamina * 0.5 + wisdom,
    )


def calculate_level(attributes: Attributes) -> int:
    """Returns the level implied by the number of spent attribute points."""
    return 1 + (attributes.total - BASE_ATTRIBUTE_POINTS) // 5


def validate_attributes(attributes: dict[str, int], total_points: int = BASE_ATTRIBUTE_POINTS) -> bool:
    """
    Checks a raw attribute distribution.

    Args:
        attributes (dict[str, int]):
            The attribute values keyed by name.
        total_points (int):
            The number of points that must be spent.

    Returns:
        bool:
            True if every attribute is present, at least 1, and the points add
            up to total_points.

    """
    if not all(name in attributes for name in REQUIRED_ATTRIBUTES):
        return False
    if not all(value >= 1 for value in attributes.values()):
        return False
    return sum(attributes.values()) == total_points
