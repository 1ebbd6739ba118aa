"""
Battle engine module for the arena.

Runs an automated battle between two characters. Each combatant acts when
its next-attack time comes up, trying the next ability of its rotation and
falling back to a basic attack; after every action the periodic effects of
both combatants are processed. The battle ends when a combatant drops to
zero health or when the time limit is reached.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from abilities.catalog import AbilityCatalog
from abilities.definition import (
    Ability,
    BuffAbility,
    DirectAbility,
    DotAbility,
    HealAbility,
    MultiAttackAbility,
    PeriodicAbility,
)
from catchery import log_debug
from character.battle_state import Buff, CharacterBattleState, PeriodicEffect
from core.config import ArenaConfig
from core.constants import FOLLOW_UP_OFFSET, SECOND_FOLLOW_UP_OFFSET, DamageType
from core.utils import round_half_up
from effects.processor import EffectProcessor
from effects.registry import EffectType, capitalize

from .battle_log import (
    AbilityUsed,
    AttackHit,
    Backlash,
    BattleEnded,
    BattleEvent,
    BattleLog,
    BattleStarted,
    CriticalEffect,
    Defeated,
    FinalState,
    Healed,
    ManaDrained,
    ManaGained,
    ResourceSnapshot,
)
from .cooldowns import CooldownTracker
from .damage import (
    AttackResult,
    effective_attack_speed,
    healing,
    magic_attack,
    physical_attack,
)


@dataclass
class BattleOutcome:
    """The result of a simulation, before it is formatted for storage."""

    character1: CharacterBattleState
    character2: CharacterBattleState
    winner_id: str | None
    log: BattleLog
    rounds: int
    duration: float


class BattleEngine:
    """
    Simulates battles between two character snapshots.

    The engine keeps the state of the battle being simulated (log, effect
    processor, cooldowns, random generator), so one engine runs one battle
    at a time.
    """

    def __init__(self, catalog: AbilityCatalog, config: ArenaConfig | None = None) -> None:
        """
        Initialize the BattleEngine.

        Args:
            catalog (AbilityCatalog):
                The abilities the rotations refer to.
            config (ArenaConfig | None):
                Time limit and damage reduction cap, defaults when None.

        """
        self.catalog = catalog
        self.config = config or ArenaConfig()
        self.log = BattleLog()
        self.processor = EffectProcessor(self.emit)
        self.cooldowns: dict[str, CooldownTracker] = {}
        self.rng = random.Random()

    def emit(self, time: float, event: BattleEvent) -> None:
        self.log.record(time, event)

    # ============================================================================
    # MAIN LOOP
    # ============================================================================

    def simulate(
        self,
        character1: CharacterBattleState,
        character2: CharacterBattleState,
        rng: random.Random,
    ) -> BattleOutcome:
        """
        Runs a battle to completion.

        The snapshots are modified in place.

        Args:
            character1 (CharacterBattleState):
                The first combatant, who acts first on ties.
            character2 (CharacterBattleState):
                The second combatant.
            rng (random.Random):
                The random generator of the battle.

        Returns:
            BattleOutcome:
                The final snapshots, the winner id (None for a draw), the
                log and the number of rounds.

        Raises:
            ValueError:
                If both snapshots belong to the same character.

        """
        if character1.id == character2.id:
            raise ValueError(f"Character '{character1.id}' cannot battle itself.")

        self.log = BattleLog()
        self.processor = EffectProcessor(self.emit)
        self.cooldowns = {
            character.id: self.cooldowns.get(character.id) or CooldownTracker()
            for character in (character1, character2)
        }
        for tracker in self.cooldowns.values():
            tracker.reset_all()
        self.rng = rng

        self.emit(0, BattleStarted(character1=character1.name, character2=character2.name))
        self.emit(
            FOLLOW_UP_OFFSET,
            ResourceSnapshot(
                character=character1.name,
                health=character1.current_health,
                mana=character1.current_mana,
            ),
        )
        self.emit(
            SECOND_FOLLOW_UP_OFFSET,
            ResourceSnapshot(
                character=character2.name,
                health=character2.current_health,
                mana=character2.current_mana,
            ),
        )

        max_time = self.config.max_battle_time
        next_attack1 = 0.0
        next_attack2 = 0.0
        battle_time = 0.0
        rounds = 0
        while character1.is_alive and character2.is_alive and battle_time < max_time:
            # Ties go to the first combatant.
            if next_attack1 <= next_attack2:
                battle_time = next_attack1
                self.take_turn(character1, character2, battle_time)
                next_attack1 += effective_attack_speed(character1)
            else:
                battle_time = next_attack2
                self.take_turn(character2, character1, battle_time)
                next_attack2 += effective_attack_speed(character2)

            self.processor.tick(character1, character2, battle_time)
            self.processor.tick(character2, character1, battle_time)
            rounds += 1

        winner_id = self.determine_winner(character1, character2, battle_time)

        log_debug(
            f"Battle between {character1.name} and {character2.name} finished.",
            {
                "winner_id": winner_id,
                "rounds": rounds,
                "time": battle_time,
                "log_entries": len(self.log),
            },
        )
        return BattleOutcome(
            character1=character1,
            character2=character2,
            winner_id=winner_id,
            log=self.log,
            rounds=rounds,
            duration=battle_time,
        )

    def determine_winner(
        self,
        character1: CharacterBattleState,
        character2: CharacterBattleState,
        now: float,
    ) -> str | None:
        """
        Decides the battle and logs the outcome and the final state.

        A defeated combatant loses. If both are standing, the one with the
        higher remaining health percentage wins, and equal percentages are
        a draw.

        Args:
            character1 (CharacterBattleState):
                The first combatant.
            character2 (CharacterBattleState):
                The second combatant.
            now (float):
                The time at which the battle ended.

        Returns:
            str | None:
                The id of the winner, or None for a draw.

        """
        winner: CharacterBattleState | None
        if not character1.is_alive:
            winner, reason = character2, "defeat"
        elif not character2.is_alive:
            winner, reason = character1, "defeat"
        elif character1.health_percentage > character2.health_percentage:
            winner, reason = character1, "timeLimit"
        elif character2.health_percentage > character1.health_percentage:
            winner, reason = character2, "timeLimit"
        else:
            winner, reason = None, "draw"

        self.emit(
            now,
            BattleEnded(
                reason=reason,
                winner_id=winner.id if winner else None,
                winner=winner.name if winner else None,
            ),
        )
        for offset, character in ((FOLLOW_UP_OFFSET, character1), (SECOND_FOLLOW_UP_OFFSET, character2)):
            self.emit(
                now + offset,
                FinalState(
                    character=character.name,
                    health=character.current_health,
                    max_health=character.max_health,
                    mana=character.current_mana,
                ),
            )
        return winner.id if winner else None

    # ============================================================================
    # ACTIONS
    # ============================================================================

    def next_usable_ability(self, attacker: CharacterBattleState, now: float) -> Ability | None:
        """
        Returns the ability at the current rotation position if it can be used.

        The ability must be off cooldown, known to the catalog, and
        affordable with the attacker's current mana.

        """
        ability_id = attacker.next_ability_id
        if ability_id is None:
            return None
        if self.cooldowns[attacker.id].is_on_cooldown(ability_id, now):
            return None
        ability = self.catalog.get(ability_id)
        if ability is None:
            return None
        if not ability.can_afford(attacker.current_mana):
            return None
        return ability

    def take_turn(
        self,
        attacker: CharacterBattleState,
        defender: CharacterBattleState,
        now: float,
    ) -> None:
        """
        Performs the action of a combatant.

        The rotation only advances when the ability is used; a basic attack
        leaves the rotation where it is, so the same ability is tried again
        on the next turn.

        """
        ability = self.next_usable_ability(attacker, now)
        if ability is None:
            self.basic_attack(attacker, defender, now)
            return
        if ability.mana_cost:
            attacker.spend_mana(ability.mana_cost)
        self.cooldowns[attacker.id].set_on_cooldown(ability.id, ability.cooldown, now)
        self.use_ability(attacker, defender, ability, now)
        attacker.advance_rotation()

    def use_ability(
        self,
        attacker: CharacterBattleState,
        defender: CharacterBattleState,
        ability: Ability,
        now: float,
    ) -> None:
        """Resolves an ability according to its variant."""
        if isinstance(ability, BuffAbility):
            self._use_buff(attacker, defender, ability, now)
        elif isinstance(ability, HealAbility):
            self._use_heal(attacker, ability, now)
        elif isinstance(ability, DotAbility):
            self._use_dot(attacker, defender, ability, now)
        elif isinstance(ability, PeriodicAbility):
            self._use_periodic(attacker, defender, ability, now)
        elif isinstance(ability, MultiAttackAbility):
            self._use_multi_attack(attacker, defender, ability, now)
        elif isinstance(ability, DirectAbility):
            self._use_direct(attacker, defender, ability, now)
        else:
            raise TypeError(f"Unsupported ability variant: {type(ability).__name__}")

    def basic_attack(
        self,
        attacker: CharacterBattleState,
        defender: CharacterBattleState,
        now: float,
    ) -> AttackResult:
        """Performs the basic attack of the attacker's attack type."""
        damage_type = attacker.attack_type
        return self.hit(attacker, defender, damage_type.basic_attack_name, damage_type, 1.0, now)

    def hit(
        self,
        attacker: CharacterBattleState,
        defender: CharacterBattleState,
        attack_name: str,
        damage_type: DamageType,
        multiplier: float,
        now: float,
        guaranteed_crit: bool = False,
        crit_bonus: float = 0,
    ) -> AttackResult:
        """
        Computes a hit, applies it to the defender and logs it.

        Args:
            attacker (CharacterBattleState):
                The attacking character.
            defender (CharacterBattleState):
                The defending character.
            attack_name (str):
                The name shown in the log.
            damage_type (DamageType):
                Physical or magic.
            multiplier (float):
                Multiplier of the rolled damage.
            now (float):
                The time of the hit.
            guaranteed_crit (bool):
                Whether the hit is always critical.
            crit_bonus (float):
                Percent added to the critical chance.

        Returns:
            AttackResult:
                The hit that was applied.

        """
        attack = magic_attack if damage_type is DamageType.MAGIC else physical_attack
        result = attack(
            attacker,
            defender,
            multiplier,
            guaranteed_crit,
            self.rng,
            crit_bonus,
            self.config.damage_reduction_cap,
        )
        defender.take_damage(result.damage)
        self.emit(
            now,
            AttackHit(
                attacker=attacker.name,
                target=defender.name,
                attack=attack_name,
                damage_type=damage_type,
                amount=result.damage,
                critical=result.is_critical,
                target_health=defender.current_health,
            ),
        )
        if not defender.is_alive:
            self.emit(now, Defeated(character=defender.name))
        return result

    # === Variants ===

    def _use_buff(
        self,
        attacker: CharacterBattleState,
        defender: CharacterBattleState,
        ability: BuffAbility,
        now: float,
    ) -> None:
        spec = ability.buff
        amount = spec.amount
        if spec.magic_damage_scaling:
            scaled = spec.base_amount + round_half_up(attacker.base_stats.average_magic_damage * spec.scaling_rate)
            amount = min(spec.max_amount, scaled)
        target = attacker if spec.targets_self else defender
        self.processor.apply_buff(
            target,
            Buff(name=ability.name, type=spec.type, amount=amount, duration=spec.duration),
            now,
        )
        self.emit(
            now,
            AbilityUsed(
                actor=attacker.name,
                ability=ability.name,
                verb=ability.verb,
                effect_type=spec.type,
                amount=amount,
                duration=spec.duration,
                target=target.name,
            ),
        )

    def _use_heal(self, attacker: CharacterBattleState, ability: HealAbility, now: float) -> None:
        self.emit(now, AbilityUsed(actor=attacker.name, ability=ability.name, verb=ability.verb))
        restored = healing(attacker, ability.heal.multiplier)
        self.emit(now, Healed(character=attacker.name, amount=restored, health=attacker.current_health))

    def _use_dot(
        self,
        attacker: CharacterBattleState,
        defender: CharacterBattleState,
        ability: DotAbility,
        now: float,
    ) -> None:
        if ability.damage_type is not None:
            self.hit(
                attacker,
                defender,
                ability.name,
                ability.damage_type,
                ability.multiplier,
                now,
                crit_bonus=ability.crit_bonus,
            )
        spec = ability.dot
        self.processor.apply_periodic_effect(
            attacker,
            defender,
            PeriodicEffect(
                name=capitalize(spec.type),
                type=spec.type,
                damage=spec.damage,
                duration=spec.duration,
                interval=spec.interval,
            ),
            now,
        )

    def _use_periodic(
        self,
        attacker: CharacterBattleState,
        defender: CharacterBattleState,
        ability: PeriodicAbility,
        now: float,
    ) -> None:
        spec = ability.periodic
        target = attacker if spec.targets_self else defender
        self.processor.apply_periodic_effect(
            attacker,
            target,
            PeriodicEffect(
                name=ability.name,
                type=spec.type,
                amount=spec.amount,
                duration=spec.duration,
                interval=spec.interval,
            ),
            now,
        )
        if spec.type != EffectType.MANA_DRAIN:
            self.emit(now, AbilityUsed(actor=attacker.name, ability=ability.name, verb=ability.verb))
            return
        # The first drain happens on cast.
        drained, gained = self.processor.drain_mana(attacker, defender, spec.amount)
        self.emit(
            now,
            ManaDrained(
                character=defender.name,
                effect=ability.name,
                amount=drained,
                mana=defender.current_mana,
                caster=attacker.name,
            ),
        )
        if drained > 0:
            self.emit(
                now + FOLLOW_UP_OFFSET,
                ManaGained(
                    character=attacker.name,
                    effect=ability.name,
                    amount=gained,
                    mana=attacker.current_mana,
                ),
            )

    def _use_multi_attack(
        self,
        attacker: CharacterBattleState,
        defender: CharacterBattleState,
        ability: MultiAttackAbility,
        now: float,
    ) -> None:
        self.emit(now, AbilityUsed(actor=attacker.name, ability=ability.name, verb=ability.verb))
        spec = ability.multi_attack
        for index in range(spec.count):
            if index > 0 and not defender.is_alive:
                break
            self.hit(
                attacker,
                defender,
                f"{ability.name} (Hit {index + 1})",
                ability.hit_type,
                ability.multiplier,
                now + FOLLOW_UP_OFFSET + index * spec.delay,
                crit_bonus=ability.crit_bonus,
            )

    def _use_direct(
        self,
        attacker: CharacterBattleState,
        defender: CharacterBattleState,
        ability: DirectAbility,
        now: float,
    ) -> None:
        if ability.damage_type is None:
            self.basic_attack(attacker, defender, now)
            return
        result = self.hit(
            attacker,
            defender,
            ability.name,
            ability.damage_type,
            ability.multiplier,
            now,
            guaranteed_crit=ability.guaranteed_crit,
            crit_bonus=ability.crit_bonus,
        )

        if ability.self_damage_percent and result.damage > 0:
            backlash = round_half_up(result.damage * ability.self_damage_percent / 100)
            if backlash > 0:
                attacker.take_damage(backlash)
                self.emit(
                    now + FOLLOW_UP_OFFSET,
                    Backlash(
                        character=attacker.name,
                        ability=ability.name,
                        amount=backlash,
                        health=attacker.current_health,
                    ),
                )
                if not attacker.is_alive:
                    self.emit(
                        now + SECOND_FOLLOW_UP_OFFSET,
                        Defeated(character=attacker.name, cause="backlash"),
                    )

        spec = ability.critical_effect
        if spec is not None and result.is_critical:
            damage = round_half_up(attacker.base_stats.average_magic_damage * spec.damage_percent / 100)
            self.processor.apply_periodic_effect(
                attacker,
                defender,
                PeriodicEffect(
                    name=capitalize(spec.type),
                    type=spec.type,
                    damage=damage,
                    duration=spec.duration,
                    interval=spec.interval,
                ),
                now,
            )
            self.emit(
                now + SECOND_FOLLOW_UP_OFFSET,
                CriticalEffect(
                    character=defender.name,
                    effect_type=spec.type,
                    damage=damage,
                    duration=spec.duration,
                ),
            )
