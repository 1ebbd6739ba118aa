"""
Ability definitions for the arena.

An ability is exactly one of six variants, told apart by the `kind` field:

- `direct`: a single physical or magic hit, optionally with a forced
  critical, a backlash on the caster, or an effect applied on critical.
- `buff`: a temporary modifier on the caster (or the opponent).
- `heal`: heals the caster based on its magic damage.
- `dot`: an optional hit followed by a damage over time effect.
- `periodic`: a periodic effect on the opponent, e.g. a mana drain.
- `multiAttack`: several hits spaced by a fixed delay.

Ability records stored in the old flat shape (`buffEffect`, `healEffect`,
`dotEffect`, ... on the same object) are converted by `parse_ability`.
"""

from typing import Annotated, Any, Literal, Union

from core.constants import (
    DEFAULT_DOT_HIT_MULTIPLIER,
    DEFAULT_EFFECT_INTERVAL,
    DEFAULT_GUARANTEED_CRIT_MULTIPLIER,
    DEFAULT_HIT_COUNT,
    DEFAULT_HIT_DELAY,
    DEFAULT_MAGIC_MULTIPLIER,
    DEFAULT_PHYSICAL_MULTIPLIER,
    DEFAULT_SCALING_BASE_AMOUNT,
    DEFAULT_SCALING_MAX_AMOUNT,
    DEFAULT_SCALING_RATE,
    DamageType,
)
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class AbilityModel(BaseModel):
    """Common configuration of every ability model."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ============================================================================
# EFFECT PAYLOADS
# ============================================================================


class BuffSpec(AbilityModel):
    """The buff granted by a buff ability."""

    type: str = Field(description="Buff type, e.g. damageIncrease.")
    amount: float = Field(default=0, description="Magnitude in percent.")
    duration: float = Field(gt=0, description="Duration in seconds.")
    targets_self: bool = Field(
        default=True,
        description="When False the buff is placed on the opponent.",
    )
    magic_damage_scaling: bool = Field(
        default=False,
        description="Scale the magnitude with the caster's magic damage.",
    )
    scaling_rate: float = Field(default=DEFAULT_SCALING_RATE, description="Percent per point of magic damage.")
    base_amount: float = Field(default=DEFAULT_SCALING_BASE_AMOUNT, description="Magnitude before scaling.")
    max_amount: float = Field(default=DEFAULT_SCALING_MAX_AMOUNT, description="Upper bound of the scaled magnitude.")


class HealSpec(AbilityModel):
    """The heal of a heal ability."""

    multiplier: float = Field(default=1.0, ge=0, description="Multiplier of the average magic damage.")


class DotSpec(AbilityModel):
    """The damage over time effect of a dot ability."""

    type: str = Field(description="Effect type, e.g. poison or burning.")
    damage: float = Field(ge=0, description="Damage per tick.")
    duration: float = Field(gt=0, description="Duration in seconds.")
    interval: float = Field(default=DEFAULT_EFFECT_INTERVAL, gt=0, description="Seconds between ticks.")


class PeriodicSpec(AbilityModel):
    """The periodic effect of a periodic ability."""

    type: str = Field(description="Effect type, e.g. manaDrain or regeneration.")
    amount: float = Field(default=0, ge=0, description="Amount moved per tick.")
    duration: float = Field(gt=0, description="Duration in seconds.")
    interval: float = Field(default=DEFAULT_EFFECT_INTERVAL, gt=0, description="Seconds between ticks.")
    targets_self: bool = Field(
        default=False,
        description="When True the effect is placed on the caster, e.g. a regeneration.",
    )


class MultiAttackSpec(AbilityModel):
    """How many hits a multi-attack ability deals and how far apart."""

    count: int = Field(default=DEFAULT_HIT_COUNT, ge=1, description="Number of hits.")
    delay: float = Field(default=DEFAULT_HIT_DELAY, ge=0, description="Seconds between hits.")


class CriticalEffectSpec(AbilityModel):
    """An effect applied to the target when a direct hit is critical."""

    type: str = Field(default="burning", description="Effect type applied on critical.")
    damage_percent: float = Field(ge=0, description="Tick damage in percent of the average magic damage.")
    duration: float = Field(gt=0, description="Duration in seconds.")
    interval: float = Field(default=DEFAULT_EFFECT_INTERVAL, gt=0, description="Seconds between ticks.")


# ============================================================================
# ABILITY VARIANTS
# ============================================================================


class BaseAbility(AbilityModel):
    """Fields shared by every ability variant."""

    id: str = Field(description="Unique ability id.")
    name: str = Field(description="Display name.")
    type: DamageType = Field(
        default=DamageType.PHYSICAL,
        description="School of the ability, decides between 'uses' and 'casts'.",
    )
    description: str = Field(default="", description="Text shown to players.")
    cooldown: float = Field(default=0, ge=0, description="Seconds before the ability can be used again.")
    mana_cost: float | None = Field(default=None, ge=0, description="Mana spent on use.")
    crit_bonus: float = Field(
        default=0,
        validation_alias=AliasChoices("baseCritBonus", "critBonus", "crit_bonus"),
        description="Bonus added to the critical chance of the ability's hits.",
    )

    @property
    def verb(self) -> str:
        return self.type.verb

    def can_afford(self, mana: float) -> bool:
        """Checks whether a character with `mana` can pay for the ability."""
        return not self.mana_cost or mana >= self.mana_cost


class DamagingAbility(BaseAbility):
    """An ability that may deal a hit of its own."""

    damage_type: DamageType | None = Field(
        default=None,
        validation_alias=AliasChoices("damage", "damageType", "damage_type"),
        serialization_alias="damage",
        description="Kind of the hit, None when the ability does not hit.",
    )
    damage_multiplier: float | None = Field(
        default=None,
        gt=0,
        description="Multiplier of the rolled damage, a per-variant default when missing.",
    )


class DirectAbility(DamagingAbility):
    """A single hit."""

    kind: Literal["direct"] = "direct"

    guaranteed_crit: bool = Field(default=False, description="The hit is always critical.")
    self_damage_percent: float = Field(
        default=0,
        ge=0,
        description="Percent of the damage dealt that the caster takes as backlash.",
    )
    critical_effect: CriticalEffectSpec | None = Field(
        default=None,
        description="Effect applied to the target when the hit is critical.",
    )

    @property
    def multiplier(self) -> float:
        if self.damage_multiplier is not None:
            return self.damage_multiplier
        if self.guaranteed_crit:
            return DEFAULT_GUARANTEED_CRIT_MULTIPLIER
        if self.damage_type is DamageType.MAGIC:
            return DEFAULT_MAGIC_MULTIPLIER
        return DEFAULT_PHYSICAL_MULTIPLIER


class BuffAbility(BaseAbility):
    """Grants a buff."""

    kind: Literal["buff"] = "buff"

    buff: BuffSpec = Field(
        validation_alias=AliasChoices("buff", "buffEffect"),
        description="The buff granted.",
    )


class HealAbility(BaseAbility):
    """Heals the caster."""

    kind: Literal["heal"] = "heal"

    heal: HealSpec = Field(
        validation_alias=AliasChoices("heal", "healEffect"),
        description="The heal applied.",
    )


class DotAbility(DamagingAbility):
    """An optional hit followed by a damage over time effect."""

    kind: Literal["dot"] = "dot"

    dot: DotSpec = Field(
        validation_alias=AliasChoices("dot", "dotEffect"),
        description="The damage over time effect applied.",
    )

    @property
    def multiplier(self) -> float:
        if self.damage_multiplier is not None:
            return self.damage_multiplier
        return DEFAULT_DOT_HIT_MULTIPLIER


class PeriodicAbility(BaseAbility):
    """Places a periodic effect on the opponent."""

    kind: Literal["periodic"] = "periodic"

    periodic: PeriodicSpec = Field(
        validation_alias=AliasChoices("periodic", "periodicEffect"),
        description="The periodic effect applied.",
    )


class MultiAttackAbility(DamagingAbility):
    """Several hits spaced by a fixed delay."""

    kind: Literal["multiAttack"] = "multiAttack"

    multi_attack: MultiAttackSpec = Field(
        default_factory=MultiAttackSpec,
        validation_alias=AliasChoices("multiAttack", "multi_attack"),
        description="Number of hits and delay between them.",
    )

    @property
    def hit_type(self) -> DamageType:
        return self.damage_type or DamageType.PHYSICAL

    @property
    def multiplier(self) -> float:
        if self.damage_multiplier is not None:
            return self.damage_multiplier
        return DEFAULT_PHYSICAL_MULTIPLIER


Ability = Annotated[
    Union[
        DirectAbility,
        BuffAbility,
        HealAbility,
        DotAbility,
        PeriodicAbility,
        MultiAttackAbility,
    ],
    Field(discriminator="kind"),
]

_ability_adapter: TypeAdapter[Ability] = TypeAdapter(Ability)

# Flat record keys, in the order they decide the variant.
_LEGACY_KINDS: tuple[tuple[str, str], ...] = (
    ("buffEffect", "buff"),
    ("healEffect", "heal"),
    ("dotEffect", "dot"),
    ("periodicEffect", "periodic"),
    ("guaranteedCrit", "direct"),
    ("multiAttack", "multiAttack"),
)


def infer_kind(record: dict[str, Any]) -> str:
    """
    Works out the variant of a flat ability record.

    A record may carry several effect keys; the first one found in the
    order buff, heal, dot, periodic, guaranteed critical, multi-attack wins,
    and a record with none of them is a direct ability.

    Args:
        record (dict[str, Any]):
            The flat ability record.

    Returns:
        str:
            The value of the `kind` discriminator.

    """
    for key, kind in _LEGACY_KINDS:
        if record.get(key):
            return kind
    return "direct"


def parse_ability(record: dict[str, Any]) -> Ability:
    """
    Builds an ability from a stored record.

    Args:
        record (dict[str, Any]):
            Either a record with an explicit `kind`, or a flat record.

    Returns:
        Ability:
            The validated ability variant.

    Raises:
        pydantic.ValidationError:
            If the record does not describe a valid ability.

    """
    if "kind" in record:
        return _ability_adapter.validate_python(record)
    data = dict(record)
    data["kind"] = infer_kind(record)
    if data["kind"] == "direct" and record.get("guaranteedCrit"):
        # A guaranteed critical is always a physical hit.
        data["damage"] = DamageType.PHYSICAL.value
    return _ability_adapter.validate_python(data)


def ability_to_json(ability: BaseAbility) -> dict[str, Any]:
    """Returns the ability in its persisted camelCase shape."""
    return ability.model_dump(mode="json", by_alias=True, exclude_none=True)
