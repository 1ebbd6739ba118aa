"""
Constants and enumerations for the arena.

Defines the global combat constants, the default multipliers used when an
ability record leaves them out, and the damage type enumeration shared by
the engine, the ability definitions and the console renderer.
"""

from enum import Enum

# Simulated seconds after which a battle is decided on remaining health.
MAX_BATTLE_TIME = 300

# Upper bound for the total damage reduction of a single hit.
DAMAGE_REDUCTION_CAP = 0.8

# Minimum number of abilities a rotation must hold to enter a battle.
MIN_ROTATION_LENGTH = 3

# Offsets used to order sub-events that happen at the same instant.
FOLLOW_UP_OFFSET = 0.1
SECOND_FOLLOW_UP_OFFSET = 0.2

# Names of the fallback attacks used when no ability can be used.
BASIC_ATTACK_NAME = "Basic Attack"
BASIC_MAGIC_ATTACK_NAME = "Basic Magic Attack"

# Default multipliers.
DEFAULT_PHYSICAL_MULTIPLIER = 1.0
DEFAULT_MAGIC_MULTIPLIER = 1.5
DEFAULT_DOT_HIT_MULTIPLIER = 1.1
DEFAULT_GUARANTEED_CRIT_MULTIPLIER = 1.2
CRITICAL_MULTIPLIER = 2

# Defaults for multi-hit abilities.
DEFAULT_HIT_COUNT = 2
DEFAULT_HIT_DELAY = 0.5

# Defaults for periodic effects.
DEFAULT_EFFECT_INTERVAL = 1.0

# Defaults for buffs that scale with magic damage.
DEFAULT_SCALING_RATE = 0.2
DEFAULT_SCALING_BASE_AMOUNT = 15
DEFAULT_SCALING_MAX_AMOUNT = 35


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().capitalize()


class DamageType(str, NiceEnum):
    """Defines the two kinds of damage an attack can deal."""

    PHYSICAL = "physical"
    MAGIC = "magic"

    @property
    def verb(self) -> str:
        """Returns the verb used in the battle log for this damage type."""
        return "casts" if self is DamageType.MAGIC else "uses"

    @property
    def basic_attack_name(self) -> str:
        """Returns the name of the basic attack for this damage type."""
        if self is DamageType.MAGIC:
            return BASIC_MAGIC_ATTACK_NAME
        return BASIC_ATTACK_NAME

    @property
    def color(self) -> str:
        """Returns the color string associated with this damage type."""
        return {
            DamageType.PHYSICAL: "bold orange3",
            DamageType.MAGIC: "bold magenta",
        }.get(self, "white")

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this damage type."""
        return {
            DamageType.PHYSICAL: "⚔️",
            DamageType.MAGIC: "✨",
        }.get(self, "❔")

    def colorize(self, message: str) -> str:
        """Applies damage type color formatting to a message."""
        return f"[{self.color}]{message}[/]"
