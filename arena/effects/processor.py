"""
Effect processor module for the arena.

Applies buffs and periodic effects to characters, makes periodic effects
tick, and removes what has expired. Every change is reported to the battle
log through the `emit` callback the processor is built with.
"""

from collections.abc import Callable

from catchery import log_warning
from character.battle_state import Buff, CharacterBattleState, PeriodicEffect
from combat.battle_log import (
    BattleEvent,
    BuffApplied,
    Defeated,
    EffectApplied,
    EffectDamage,
    EffectExpired,
    ManaDrained,
    ManaGained,
    Regenerated,
)
from core.constants import FOLLOW_UP_OFFSET

from .registry import EffectType

EmitFn = Callable[[float, BattleEvent], object]

DAMAGE_OVER_TIME_TYPES = (EffectType.POISON, EffectType.BURNING)


class EffectProcessor:
    """
    Applies, ticks and expires the buffs and periodic effects of a battle.

    Attributes:
        emit (EmitFn):
            Receives the time and the event of every change.

    """

    def __init__(self, emit: EmitFn) -> None:
        """
        Initialize the EffectProcessor.

        Args:
            emit (EmitFn):
                The log sink, usually BattleLog.record.

        """
        self.emit = emit

    # === Application ===

    def apply_buff(
        self,
        target: CharacterBattleState,
        buff: Buff,
        now: float,
    ) -> tuple[Buff, bool]:
        """
        Places a buff on a character.

        If the character already has a buff of the same type its end time is
        pushed to now + duration; the magnitude does not stack.

        Args:
            target (CharacterBattleState):
                The character receiving the buff.
            buff (Buff):
                The buff to apply.
            now (float):
                The current simulated time.

        Returns:
            tuple[Buff, bool]:
                The buff held by the character, and whether it was refreshed.

        """
        existing = target.get_buff(buff.type)
        if existing is not None:
            existing.end_time = now + buff.duration
            self.emit(
                now,
                BuffApplied(
                    character=target.name,
                    buff=existing.name,
                    buff_type=existing.type,
                    amount=existing.amount,
                    duration=buff.duration,
                    refreshed=True,
                ),
            )
            return existing, True
        buff.end_time = now + buff.duration
        target.buffs.append(buff)
        self.emit(
            now,
            BuffApplied(
                character=target.name,
                buff=buff.name,
                buff_type=buff.type,
                amount=buff.amount,
                duration=buff.duration,
            ),
        )
        return buff, False

    def apply_periodic_effect(
        self,
        source: CharacterBattleState,
        target: CharacterBattleState,
        effect: PeriodicEffect,
        now: float,
    ) -> tuple[PeriodicEffect, bool]:
        """
        Places a periodic effect on a character.

        If the character already has an effect of the same type its end time
        is pushed to now + duration and its tick timer restarts from now.

        Args:
            source (CharacterBattleState):
                The character applying the effect.
            target (CharacterBattleState):
                The character receiving the effect.
            effect (PeriodicEffect):
                The effect to apply.
            now (float):
                The current simulated time.

        Returns:
            tuple[PeriodicEffect, bool]:
                The effect held by the character, and whether it was refreshed.

        """
        existing = target.get_periodic_effect(effect.type)
        if existing is not None:
            existing.end_time = now + effect.duration
            existing.last_proc_time = now
            self.emit(
                now,
                EffectApplied(
                    character=target.name,
                    effect=existing.name,
                    effect_type=existing.type,
                    duration=effect.duration,
                    source=existing.source_name,
                    refreshed=True,
                ),
            )
            return existing, True
        effect.end_time = now + effect.duration
        effect.last_proc_time = now
        effect.source_id = source.id
        effect.source_name = source.name
        target.periodic_effects.append(effect)
        self.emit(
            now,
            EffectApplied(
                character=target.name,
                effect=effect.name,
                effect_type=effect.type,
                duration=effect.duration,
                source=source.name,
            ),
        )
        return effect, False

    # === Resources ===

    def drain_mana(
        self,
        source: CharacterBattleState,
        target: CharacterBattleState,
        amount: float,
    ) -> tuple[float, float]:
        """
        Moves mana from the target to the source.

        The target loses at most its current mana, and the source gains what
        was drained without going over its maximum.

        Returns:
            tuple[float, float]:
                The mana drained from the target and the mana gained by the source.

        """
        drained = target.spend_mana(amount)
        gained = source.restore_mana(drained)
        return drained, gained

    # === Ticking ===

    def tick(
        self,
        character: CharacterBattleState,
        opponent: CharacterBattleState,
        now: float,
    ) -> None:
        """
        Processes the effects on a character at the given time.

        Every periodic effect that is due ticks, then every periodic effect
        and buff whose end time has been reached is removed.

        Args:
            character (CharacterBattleState):
                The character carrying the effects.
            opponent (CharacterBattleState):
                The other combatant, source of drains placed on `character`.
            now (float):
                The current simulated time.

        """
        for effect in reversed(list(character.periodic_effects)):
            if effect.is_due(now):
                self._trigger(character, opponent, effect, now)
                effect.last_proc_time = now
            if now >= effect.end_time:
                character.periodic_effects.remove(effect)
                self.emit(
                    now,
                    EffectExpired(character=character.name, effect=effect.name, category="effect"),
                )

        for buff in reversed(list(character.buffs)):
            if now >= buff.end_time:
                character.buffs.remove(buff)
                self.emit(
                    now,
                    EffectExpired(character=character.name, effect=buff.name, category="buff"),
                )

    def _trigger(
        self,
        character: CharacterBattleState,
        opponent: CharacterBattleState,
        effect: PeriodicEffect,
        now: float,
    ) -> None:
        if effect.type in DAMAGE_OVER_TIME_TYPES:
            character.take_damage(effect.damage)
            self.emit(
                now,
                EffectDamage(
                    character=character.name,
                    effect=effect.name,
                    effect_type=effect.type,
                    amount=effect.damage,
                    health=character.current_health,
                ),
            )
            if not character.is_alive:
                self.emit(
                    now,
                    Defeated(
                        character=character.name,
                        cause="effect",
                        effect=effect.name,
                        effect_type=effect.type,
                    ),
                )
        elif effect.type == EffectType.MANA_DRAIN:
            source = opponent if effect.source_id in (None, opponent.id) else character
            drained, gained = self.drain_mana(source, character, effect.amount)
            if drained > 0:
                self.emit(
                    now,
                    ManaDrained(
                        character=character.name,
                        effect=effect.name,
                        amount=drained,
                        mana=character.current_mana,
                    ),
                )
                self.emit(
                    now + FOLLOW_UP_OFFSET,
                    ManaGained(
                        character=source.name,
                        effect=effect.name,
                        amount=gained,
                        mana=source.current_mana,
                    ),
                )
        elif effect.type == EffectType.REGENERATION:
            restored = character.restore_health(effect.amount)
            self.emit(
                now,
                Regenerated(
                    character=character.name,
                    effect=effect.name,
                    resource="health",
                    amount=restored,
                    value=character.current_health,
                ),
            )
        elif effect.type == EffectType.MANA_REGEN:
            restored = character.restore_mana(effect.amount)
            self.emit(
                now,
                Regenerated(
                    character=character.name,
                    effect=effect.name,
                    resource="mana",
                    amount=restored,
                    value=character.current_mana,
                ),
            )
        else:
            log_warning(
                f"Unknown periodic effect type '{effect.type}'.",
                {"effect": effect.name, "character": character.name, "time": now},
            )
