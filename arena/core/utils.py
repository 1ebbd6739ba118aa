"""
Utilities module for the arena.

Provides common utility functions and helpers, including console printing
with rich formatting, resource bars and the rounding rules used by the
combat math.
"""

from __future__ import annotations

import math
from typing import Any

from rich.console import Console
from rich.rule import Rule

# Initialize the rich console.
_console = Console(markup=True, width=120, force_terminal=True, force_jupyter=False)


def cprint(*args: Any, **kwargs: Any) -> None:
    """
    Custom print function to handle colored output.

    Args:
        *args: Arguments to pass to the console print function.
        **kwargs: Keyword arguments to pass to the console print function.

    """
    _console.print(*args, **kwargs)


def crule(*args: Any, **kwargs: Any) -> None:
    """
    Custom print function to handle colored output with a rule.

    Args:
        *args: Arguments to pass to the Rule constructor.
        **kwargs: Keyword arguments to pass to the Rule constructor.

    """
    _console.print(Rule(*args, **kwargs))


def ccapture(content: Any) -> str:
    """
    Captures console output as a string.

    Args:
        content (Any): The content to capture.

    Returns:
        str: The captured output as a string.

    """
    with _console.capture() as capture:
        _console.print(content, markup=True, end="")
    return capture.get()


# ---- Rounding ----


def round_half_up(value: float) -> int:
    """
    Rounds to the nearest integer, with halves going up.

    The built-in round() rounds halves to the nearest even number, which
    would make 2.5 damage round to 2. Every damage, heal and scaling value
    in the arena rounds halves up instead.

    Args:
        value (float): The value to round.

    Returns:
        int: The rounded value.

    """
    return int(math.floor(value + 0.5))


def round_time(time: float) -> float:
    """Rounds a simulated time to one decimal place."""
    return round_half_up(time * 10) / 10


# ---- Bars ----


def make_bar(current: float, maximum: float, length: int = 20, color: str = "green") -> str:
    """
    Creates a textual progress bar for displaying health, mana, etc.

    Args:
        current (float): Current value.
        maximum (float): Maximum value.
        length (int): Length of the bar in characters.
        color (str): Rich color of the filled part.

    Returns:
        str: A string representing the progress bar.

    """
    if maximum <= 0:
        return f"[{color}]{'░' * length}[/]"
    ratio = max(0.0, min(1.0, current / maximum))
    filled = int(ratio * length)
    return f"[{color}]{'█' * filled}[/][dim]{'░' * (length - filled)}[/]"


def format_number(value: Any) -> str:
    """Formats a number for display, dropping the decimals of whole floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
