"""
Battle playback for the console.

Renders a stored battle with rich: the two combatants, every log line colored
by what happened, and health bars that follow the fight. Values come from the
structured events attached to each log line.
"""

import io
import time
from typing import Any

from combat.battle_log import (
    AttackHit,
    Backlash,
    BattleEnded,
    BattleLogEntry,
    BuffApplied,
    CriticalEffect,
    Defeated,
    EffectApplied,
    EffectDamage,
    EffectExpired,
    FinalState,
    Healed,
    ManaDrained,
    ManaGained,
    Regenerated,
    ResourceSnapshot,
)
from combat.result import BattleResult, CharacterSummary
from core.utils import ccapture, cprint, crule, make_bar
from rich.console import Console
from rich.table import Table

# Style of the log line, by event class.
_EVENT_STYLES: dict[type, str] = {
    AttackHit: "white",
    EffectDamage: "magenta",
    Backlash: "red",
    Defeated: "bold red",
    Healed: "green",
    Regenerated: "green",
    ManaDrained: "blue",
    ManaGained: "blue",
    BuffApplied: "cyan",
    EffectApplied: "magenta",
    CriticalEffect: "bold yellow",
    EffectExpired: "dim",
    BattleEnded: "bold green",
    FinalState: "bold",
}


class ResourceTracker:
    """
    Follows the health and mana of both combatants through a battle log.

    Attributes:
        maximums (dict[str, tuple[float, float]]):
            Maximum health and mana, by character name.
        health (dict[str, float]):
            Current health, by character name.
        mana (dict[str, float]):
            Current mana, by character name.

    """

    def __init__(self, *summaries: CharacterSummary) -> None:
        self.maximums = {s.name: (float(s.stats.health), float(s.stats.mana)) for s in summaries}
        self.health = {s.name: float(s.stats.health) for s in summaries}
        self.mana = {s.name: float(s.stats.mana) for s in summaries}

    def update(self, entry: BattleLogEntry) -> None:
        """Applies the values carried by the event of a log line."""
        event = entry.event
        if isinstance(event, ResourceSnapshot):
            self.health[event.character] = event.health
            self.mana[event.character] = event.mana
        elif isinstance(event, AttackHit):
            self.health[event.target] = event.target_health
        elif isinstance(event, (EffectDamage, Backlash, Healed)):
            self.health[event.character] = event.health
        elif isinstance(event, Regenerated):
            if event.resource == "health":
                self.health[event.character] = event.value
            else:
                self.mana[event.character] = event.value
        elif isinstance(event, (ManaDrained, ManaGained)):
            self.mana[event.character] = event.mana
        elif isinstance(event, FinalState):
            self.health[event.character] = event.health
            self.mana[event.character] = event.mana

    def bars(self, name: str) -> str:
        max_health, max_mana = self.maximums[name]
        health = self.health[name]
        mana = self.mana[name]
        return (
            f"{make_bar(health, max_health, color='red')} {max(0, int(health))}/{int(max_health)}  "
            f"{make_bar(mana, max_mana, length=10, color='blue')} {int(mana)}/{int(max_mana)}"
        )


def combatants_table(result: BattleResult) -> Table:
    """Builds a table comparing the two combatants of a battle."""
    table = Table(title="Combatants", pad_edge=False)
    table.add_column("Stat", style="bold")
    table.add_column(result.character.name, style="cyan")
    table.add_column(result.opponent.name, style="magenta")

    rows: list[tuple[str, Any, Any]] = [
        ("Level", result.character.level, result.opponent.level),
        ("Health", result.character.stats.health, result.opponent.stats.health),
        ("Mana", result.character.stats.mana, result.opponent.stats.mana),
        (
            "Physical",
            f"{result.character.stats.min_physical_damage}-{result.character.stats.max_physical_damage}",
            f"{result.opponent.stats.min_physical_damage}-{result.opponent.stats.max_physical_damage}",
        ),
        (
            "Magic",
            f"{result.character.stats.min_magic_damage}-{result.character.stats.max_magic_damage}",
            f"{result.opponent.stats.min_magic_damage}-{result.opponent.stats.max_magic_damage}",
        ),
        ("Attack speed", result.character.stats.attack_speed, result.opponent.stats.attack_speed),
        ("Crit", f"{result.character.stats.critical_chance}%", f"{result.opponent.stats.critical_chance}%"),
    ]
    for label, left, right in rows:
        table.add_row(label, str(left), str(right))
    return table


def format_entry(entry: BattleLogEntry) -> str:
    """Returns the markup of a single log line."""
    style = _EVENT_STYLES.get(type(entry.event), "white")
    return f"[dim]{entry.time:6.1f}s[/] [{style}]{entry.message}[/]"


def winner_name(result: BattleResult) -> str | None:
    for summary in (result.character, result.opponent):
        if summary.id == result.winner:
            return summary.name
    return None


def play_battle(result: BattleResult, delay: float = 0.0, show_bars: bool = True) -> None:
    """
    Prints a battle line by line.

    Args:
        result (BattleResult):
            The battle to show.
        delay (float):
            Seconds to wait between lines.
        show_bars (bool):
            Whether to print the resource bars after every hit.

    """
    crule(f":crossed_swords:  {result.character.name} vs {result.opponent.name}", style="bold green")
    cprint(combatants_table(result))

    tracker = ResourceTracker(result.character, result.opponent)
    for entry in result.log:
        tracker.update(entry)
        cprint(format_entry(entry))
        if show_bars and isinstance(entry.event, (AttackHit, EffectDamage, Backlash, Healed)):
            for name in (result.character.name, result.opponent.name):
                cprint(f"         {name:<12} {tracker.bars(name)}")
        if delay:
            time.sleep(delay)

    name = winner_name(result)
    if name is None:
        crule("Draw", style="bold yellow")
    else:
        crule(f"Winner: {name}", style="bold green")
    for summary in (result.character, result.opponent):
        if summary.experience_gained:
            cprint(f"{summary.name} gains [bold]{summary.experience_gained}[/] experience.")


def render_battle(result: BattleResult, *, colour: bool = False) -> str:
    """
    Renders the battle log as text, without resource bars.

    - If `colour` is True you get ANSI escape sequences.
    - If False, output is plain text (good for logs or tests).
    """
    if colour:
        return "\n".join(ccapture(format_entry(entry)) for entry in result.log)
    tmp = Console(file=io.StringIO(), record=True, color_system=None, width=200)
    for entry in result.log:
        tmp.print(format_entry(entry))
    return tmp.export_text()
