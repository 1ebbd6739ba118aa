"""
Effect registry for the arena.

Describes every known buff and periodic effect type: its display name, its
category, the description shown to players and, for damage over time, the
message logged when it defeats a character.
"""

from enum import Enum
from typing import Any

from core.utils import format_number
from pydantic import BaseModel, Field


class EffectType(str, Enum):
    """Known buff and periodic effect types."""

    # Buffs.
    DAMAGE_INCREASE = "damageIncrease"
    PHYSICAL_REDUCTION = "physicalReduction"
    MAGIC_REDUCTION = "magicReduction"
    ATTACK_SPEED_REDUCTION = "attackSpeedReduction"
    # Damage over time.
    POISON = "poison"
    BURNING = "burning"
    # Periodic.
    MANA_DRAIN = "manaDrain"
    REGENERATION = "regeneration"
    MANA_REGEN = "manaRegen"
    # Heals.
    SELF_HEAL = "selfHeal"


class EffectCategory(str, Enum):
    """Broad families of effects."""

    BUFF = "buff"
    DOT = "dot"
    PERIODIC = "periodic"
    HEAL = "heal"
    UNKNOWN = "unknown"


class EffectDescriptor(BaseModel):
    """Display information about an effect type."""

    type: str = Field(description="The effect type tag.")
    display_name: str = Field(description="Name shown to players.")
    category: EffectCategory = Field(description="Family of the effect.")
    description: str = Field(description="Template with {placeholders} for the effect parameters.")
    defeat_message: str | None = Field(
        default=None,
        description="Template logged when the effect defeats a character.",
    )
    color: str = Field(default="white", description="Rich color used when rendering the effect.")

    def describe(self, **params: Any) -> str:
        """
        Fills the description template.

        Placeholders without a matching parameter are left as they are.

        Args:
            **params: The effect parameters, e.g. amount=10.

        Returns:
            str: The description.

        """
        text = self.description
        for key, value in params.items():
            text = text.replace(f"{{{key}}}", format_number(value))
        return text

    def defeat(self, character: str, effect: str) -> str:
        """Returns the message logged when the effect defeats `character`."""
        template = self.defeat_message or "has been defeated by {effect}!"
        return f"{character} " + template.format(effect=effect)


_REGISTRY: dict[str, EffectDescriptor] = {
    descriptor.type: descriptor
    for descriptor in (
        EffectDescriptor(
            type=EffectType.DAMAGE_INCREASE.value,
            display_name="Damage Increase",
            category=EffectCategory.BUFF,
            description="Increases damage by {amount}%",
            color="bold red",
        ),
        EffectDescriptor(
            type=EffectType.PHYSICAL_REDUCTION.value,
            display_name="Physical Reduction",
            category=EffectCategory.BUFF,
            description="Increases physical damage reduction by {amount}%",
            color="bold cyan",
        ),
        EffectDescriptor(
            type=EffectType.MAGIC_REDUCTION.value,
            display_name="Magic Reduction",
            category=EffectCategory.BUFF,
            description="Increases magic damage reduction by {amount}%",
            color="bold blue",
        ),
        EffectDescriptor(
            type=EffectType.ATTACK_SPEED_REDUCTION.value,
            display_name="Attack Speed Reduction",
            category=EffectCategory.BUFF,
            description="Reduces attack speed by {amount}%",
            color="bold yellow",
        ),
        EffectDescriptor(
            type=EffectType.POISON.value,
            display_name="Poison",
            category=EffectCategory.DOT,
            description="Takes {damage} damage every {interval} seconds",
            defeat_message="has been defeated by {effect}!",
            color="bold green",
        ),
        EffectDescriptor(
            type=EffectType.BURNING.value,
            display_name="Burning",
            category=EffectCategory.DOT,
            description="Takes {damage} damage every {interval} seconds",
            defeat_message="has been burned to ash!",
            color="bold orange_red1",
        ),
        EffectDescriptor(
            type=EffectType.MANA_DRAIN.value,
            display_name="Mana Drain",
            category=EffectCategory.PERIODIC,
            description="Drains {amount} mana every {interval} seconds",
            color="bold purple",
        ),
        EffectDescriptor(
            type=EffectType.REGENERATION.value,
            display_name="Health Regeneration",
            category=EffectCategory.PERIODIC,
            description="Regenerates {amount} health every {interval} seconds",
            color="bold green",
        ),
        EffectDescriptor(
            type=EffectType.MANA_REGEN.value,
            display_name="Mana Regeneration",
            category=EffectCategory.PERIODIC,
            description="Regenerates {amount} mana every {interval} seconds",
            color="bold blue",
        ),
        EffectDescriptor(
            type=EffectType.SELF_HEAL.value,
            display_name="Healing",
            category=EffectCategory.HEAL,
            description="Heals for magic damage + {multiplier}%",
            color="bold green",
        ),
    )
}


def is_known(effect_type: str) -> bool:
    """Checks whether the effect type is in the registry."""
    return effect_type in _REGISTRY


def get_descriptor(effect_type: str) -> EffectDescriptor:
    """
    Returns the descriptor of an effect type.

    Unknown types get a generic descriptor named after the capitalized type.

    Args:
        effect_type (str):
            The effect type tag.

    Returns:
        EffectDescriptor:
            The descriptor.

    """
    descriptor = _REGISTRY.get(effect_type)
    if descriptor is not None:
        return descriptor
    return EffectDescriptor(
        type=effect_type,
        display_name=capitalize(effect_type),
        category=EffectCategory.UNKNOWN,
        description="Unknown effect",
    )


def describe(effect_type: str, **params: Any) -> str:
    """Returns the player-facing description of an effect type."""
    return get_descriptor(effect_type).describe(**params)


def all_descriptors() -> list[EffectDescriptor]:
    return list(_REGISTRY.values())


def capitalize(text: str) -> str:
    """Upper-cases the first letter only, so 'manaDrain' becomes 'ManaDrain'."""
    return text[:1].upper() + text[1:]
