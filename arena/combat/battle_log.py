"""
Battle log module for the arena.

Every line of a battle log carries a typed event next to its human-readable
message. Consumers that need numbers (health bars, statistics) read the
event fields and never parse the message text.
"""

import math
from collections.abc import Iterator
from typing import Annotated, Literal, Union

from core.constants import DamageType
from core.utils import format_number, round_time
from effects.registry import EffectType, get_descriptor
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BattleEvent(BaseModel):
    """Base class for all battle events."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def describe(self) -> str:
        """Returns the human-readable line for the event."""
        raise NotImplementedError

    def __str__(self) -> str:
        return self.describe()


class BattleStarted(BattleEvent):
    """The two combatants entered the arena."""

    kind: Literal["battleStarted"] = "battleStarted"
    character1: str = Field(description="Name of the first combatant.")
    character2: str = Field(description="Name of the second combatant.")

    def describe(self) -> str:
        return f"Battle started between {self.character1} and {self.character2}"


class ResourceSnapshot(BattleEvent):
    """Health and mana of a combatant at the start of the battle."""

    kind: Literal["resourceSnapshot"] = "resourceSnapshot"
    character: str = Field(description="Name of the combatant.")
    health: float = Field(description="Current health.")
    mana: float = Field(description="Current mana.")

    def describe(self) -> str:
        return f"{self.character}: {format_number(self.health)} health, {format_number(self.mana)} mana"


class AbilityUsed(BattleEvent):
    """A combatant used an ability that does not describe itself through a hit."""

    kind: Literal["abilityUsed"] = "abilityUsed"
    actor: str = Field(description="Name of the user.")
    ability: str = Field(description="Name of the ability.")
    verb: str = Field(default="uses", description="Either 'uses' or 'casts'.")
    effect_type: str | None = Field(default=None, description="Type of the buff granted, if any.")
    amount: float | None = Field(default=None, description="Magnitude of the buff, in percent.")
    duration: float | None = Field(default=None, description="Duration of the buff.")
    target: str | None = Field(default=None, description="Name of the character affected.")

    def describe(self) -> str:
        message = f"{self.actor} {self.verb} {self.ability}"
        if self.effect_type is None:
            return message
        amount = format_number(self.amount)
        duration = format_number(self.duration)
        if self.effect_type == EffectType.PHYSICAL_REDUCTION:
            return f"{message}, increasing physical damage reduction by {amount}% for {duration} seconds"
        if self.effect_type == EffectType.DAMAGE_INCREASE:
            return f"{message}, increasing damage by {amount}% for {duration} seconds"
        if self.effect_type == EffectType.ATTACK_SPEED_REDUCTION:
            return f"{message}, slowing {self.target}'s attack speed by {amount}% for {duration} seconds"
        return f"{message}, applying {self.effect_type} effect for {duration} seconds"


class AttackHit(BattleEvent):
    """A physical or magic hit landed."""

    kind: Literal["attackHit"] = "attackHit"
    attacker: str = Field(description="Name of the attacker.")
    target: str = Field(description="Name of the target.")
    attack: str = Field(description="Name of the attack or ability.")
    damage_type: DamageType = Field(description="Kind of damage dealt.")
    amount: int = Field(description="Damage dealt after reductions.")
    critical: bool = Field(default=False, description="Whether the hit was critical.")
    target_health: float = Field(description="Health of the target after the hit.")

    def describe(self) -> str:
        critical = " (CRITICAL)" if self.critical else ""
        return (
            f"{self.attacker} {self.damage_type.verb} {self.attack}{critical} on {self.target} "
            f"for {self.amount} {self.damage_type.value} damage"
        )


class EffectDamage(BattleEvent):
    """A damage over time effect ticked."""

    kind: Literal["effectDamage"] = "effectDamage"
    character: str = Field(description="Name of the character damaged.")
    effect: str = Field(description="Name of the effect.")
    effect_type: str = Field(description="Type of the effect.")
    amount: float = Field(description="Damage dealt.")
    health: float = Field(description="Health after the tick.")

    def describe(self) -> str:
        return f"{self.character} takes {format_number(self.amount)} damage from {self.effect}"


class Backlash(BattleEvent):
    """The caster took part of its own damage."""

    kind: Literal["backlash"] = "backlash"
    character: str = Field(description="Name of the caster.")
    ability: str = Field(description="Name of the ability.")
    amount: int = Field(description="Damage taken.")
    health: float = Field(description="Health after the backlash.")

    def describe(self) -> str:
        return f"{self.character} takes {self.amount} damage from the backlash of {self.ability}"


class Defeated(BattleEvent):
    """A character dropped to zero health or below."""

    kind: Literal["defeated"] = "defeated"
    character: str = Field(description="Name of the defeated character.")
    cause: Literal["attack", "effect", "backlash"] = Field(
        default="attack",
        description="What dealt the final blow.",
    )
    effect: str | None = Field(default=None, description="Name of the effect, for effect defeats.")
    effect_type: str | None = Field(default=None, description="Type of the effect, for effect defeats.")

    def describe(self) -> str:
        if self.cause == "backlash":
            return f"{self.character} has been defeated by their own spell!"
        if self.cause == "effect" and self.effect_type is not None:
            return get_descriptor(self.effect_type).defeat(self.character, self.effect or self.effect_type)
        return f"{self.character} has been defeated!"


class Healed(BattleEvent):
    """A heal restored health."""

    kind: Literal["healed"] = "healed"
    character: str = Field(description="Name of the character healed.")
    amount: float = Field(description="Health actually restored.")
    health: float = Field(description="Health after the heal.")

    def describe(self) -> str:
        return f"{self.character} is healed for {format_number(self.amount)} health"


class Regenerated(BattleEvent):
    """A regeneration effect ticked."""

    kind: Literal["regenerated"] = "regenerated"
    character: str = Field(description="Name of the character.")
    effect: str = Field(description="Name of the effect.")
    resource: Literal["health", "mana"] = Field(description="The resource restored.")
    amount: float = Field(description="Amount actually restored.")
    value: float = Field(description="Value of the resource after the tick.")

    def describe(self) -> str:
        return f"{self.character} regenerates {format_number(self.amount)} {self.resource} from {self.effect}"


class ManaDrained(BattleEvent):
    """Mana was drained from a character."""

    kind: Literal["manaDrained"] = "manaDrained"
    character: str = Field(description="Name of the character drained.")
    effect: str = Field(description="Name of the drain.")
    amount: float = Field(description="Mana actually drained.")
    mana: float = Field(description="Mana of the drained character afterwards.")
    caster: str | None = Field(
        default=None,
        description="Name of the caster, set when the drain is the cast itself.",
    )

    def describe(self) -> str:
        amount = format_number(self.amount)
        if self.caster is not None:
            return f"{self.caster} casts {self.effect} on {self.character}, draining {amount} mana"
        return f"{self.character} loses {amount} mana from {self.effect}"


class ManaGained(BattleEvent):
    """The source of a drain received mana."""

    kind: Literal["manaGained"] = "manaGained"
    character: str = Field(description="Name of the character receiving mana.")
    effect: str = Field(description="Name of the drain.")
    amount: float = Field(description="Mana actually gained.")
    mana: float = Field(description="Mana afterwards.")

    def describe(self) -> str:
        return f"{self.character} gains {format_number(self.amount)} mana from {self.effect}"


class BuffApplied(BattleEvent):
    """A buff was placed on a character, or refreshed."""

    kind: Literal["buffApplied"] = "buffApplied"
    character: str = Field(description="Name of the character buffed.")
    buff: str = Field(description="Name of the buff.")
    buff_type: str = Field(description="Type of the buff.")
    amount: float = Field(description="Magnitude in percent.")
    duration: float = Field(description="Duration in seconds.")
    refreshed: bool = Field(default=False, description="Whether an existing buff was refreshed.")

    def describe(self) -> str:
        duration = format_number(self.duration)
        if self.refreshed:
            return f"{self.character}'s {self.buff} is refreshed ({duration} seconds)"
        return f"{self.character} gains {self.buff} for {duration} seconds"


class EffectApplied(BattleEvent):
    """A periodic effect was placed on a character, or refreshed."""

    kind: Literal["effectApplied"] = "effectApplied"
    character: str = Field(description="Name of the character affected.")
    effect: str = Field(description="Name of the effect.")
    effect_type: str = Field(description="Type of the effect.")
    duration: float = Field(description="Duration in seconds.")
    source: str | None = Field(default=None, description="Name of the character applying it.")
    refreshed: bool = Field(default=False, description="Whether an existing effect was refreshed.")

    def describe(self) -> str:
        duration = format_number(self.duration)
        if self.refreshed:
            return f"{self.character}'s {self.effect} is refreshed ({duration} seconds)"
        return f"{self.character} is affected by {self.effect} for {duration} seconds"


class CriticalEffect(BattleEvent):
    """A critical hit set an effect on its target."""

    kind: Literal["criticalEffect"] = "criticalEffect"
    character: str = Field(description="Name of the character affected.")
    effect_type: str = Field(description="Type of the effect.")
    damage: float = Field(description="Damage per tick.")
    duration: float = Field(description="Duration in seconds.")

    def describe(self) -> str:
        damage = format_number(self.damage)
        duration = format_number(self.duration)
        if self.effect_type == EffectType.BURNING:
            return f"{self.character} is burning for {damage} damage per second for {duration} seconds!"
        name = get_descriptor(self.effect_type).display_name
        return f"{self.character} suffers {name} for {damage} damage for {duration} seconds!"


class EffectExpired(BattleEvent):
    """A buff or periodic effect ran out."""

    kind: Literal["effectExpired"] = "effectExpired"
    character: str = Field(description="Name of the character.")
    effect: str = Field(description="Name of the buff or effect.")
    category: Literal["buff", "effect"] = Field(description="Whether a buff or a periodic effect expired.")

    def describe(self) -> str:
        return f"{self.effect} {self.category} on {self.character} has expired"


class BattleEnded(BattleEvent):
    """The battle has a result."""

    kind: Literal["battleEnded"] = "battleEnded"
    reason: Literal["defeat", "timeLimit", "draw"] = Field(description="How the battle ended.")
    winner_id: str | None = Field(default=None, description="Id of the winner, None for a draw.")
    winner: str | None = Field(default=None, description="Name of the winner, None for a draw.")

    def describe(self) -> str:
        if self.reason == "defeat":
            return f"{self.winner} wins the battle!"
        if self.reason == "timeLimit":
            return f"Time limit reached! {self.winner} wins with more health remaining!"
        return "Time limit reached! Battle ended in a draw (equal health remaining)"


class FinalState(BattleEvent):
    """Health and mana of a combatant once the battle is over."""

    kind: Literal["finalState"] = "finalState"
    character: str = Field(description="Name of the combatant.")
    health: float = Field(description="Remaining health, possibly negative.")
    max_health: float = Field(description="Maximum health.")
    mana: float = Field(description="Remaining mana.")

    @property
    def health_percentage(self) -> float:
        if self.max_health <= 0:
            return 0.0
        return self.health / self.max_health * 100

    def describe(self) -> str:
        message = f"Final state - {self.character}: {math.floor(self.health)} health"
        if self.health > 0:
            message += f" ({self.health_percentage:.1f}%)"
        return message + f", {math.floor(self.mana)} mana"


AnyBattleEvent = Annotated[
    Union[
        BattleStarted,
        ResourceSnapshot,
        AbilityUsed,
        AttackHit,
        EffectDamage,
        Backlash,
        Defeated,
        Healed,
        Regenerated,
        ManaDrained,
        ManaGained,
        BuffApplied,
        EffectApplied,
        CriticalEffect,
        EffectExpired,
        BattleEnded,
        FinalState,
    ],
    Field(discriminator="kind"),
]


class BattleLogEntry(BaseModel):
    """A single line of the battle log."""

    time: float = Field(description="Simulated time, rounded to one decimal.")
    message: str = Field(description="Human-readable description.")
    event: AnyBattleEvent | None = Field(default=None, description="The structured event.")

    def __str__(self) -> str:
        return f"[{self.time:5.1f}s] {self.message}"


class BattleLog:
    """
    The ordered list of log entries of a battle.

    Entries keep the order in which they were recorded. Their times are not
    always non-decreasing, since follow-up lines are stamped slightly after
    the line that caused them.
    """

    def __init__(self) -> None:
        self.entries: list[BattleLogEntry] = []

    def record(self, time: float, event: BattleEvent) -> BattleLogEntry:
        """
        Appends an event to the log.

        Args:
            time (float):
                The simulated time of the event.
            event (BattleEvent):
                The event.

        Returns:
            BattleLogEntry:
                The new entry.

        """
        entry = BattleLogEntry(time=round_time(time), message=event.describe(), event=event)
        self.entries.append(entry)
        return entry

    def messages(self) -> list[str]:
        return [entry.message for entry in self.entries]

    def events_of(self, event_type: type[BattleEvent]) -> list[BattleEvent]:
        """Returns every recorded event of the given class, in order."""
        return [entry.event for entry in self.entries if isinstance(entry.event, event_type)]

    def __iter__(self) -> Iterator[BattleLogEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
