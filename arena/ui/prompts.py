"""
Interactive prompts for the arena console.
"""

from character.record import CharacterRecord
from core.utils import ccapture
from prompt_toolkit import ANSI, PromptSession
from prompt_toolkit.completion import WordCompleter
from rich.table import Table

# one session keeps history
session: PromptSession = PromptSession(erase_when_done=True)


def characters_table(characters: list[CharacterRecord], title: str = "Characters") -> Table:
    table = Table(title=title, pad_edge=False)
    table.add_column("#", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Player", style="magenta")
    table.add_column("Level", style="blue")
    table.add_column("Attack", style="yellow")
    table.add_column("Rotation")
    for i, character in enumerate(characters, 1):
        table.add_row(
            str(i),
            character.name,
            character.owner_id,
            str(character.level),
            character.attack_type.colorize(character.attack_type.value),
            ", ".join(character.rotation),
        )
    return table


def choose_character(
    characters: list[CharacterRecord],
    prompt: str = "Character > ",
    title: str = "Characters",
) -> CharacterRecord | None:
    """
    Asks the user to pick a character, by number or by name.

    Args:
        characters (list[CharacterRecord]):
            The characters to choose from.
        prompt (str):
            The prompt text.
        title (str):
            Title of the table listing the characters.

    Returns:
        CharacterRecord | None:
            The chosen character, or None if the user typed 0 or "back".

    """
    if not characters:
        return None
    message = "\n" + ccapture(characters_table(characters, title)) + "\n" + prompt
    completer = WordCompleter([c.name for c in characters] + ["back"], ignore_case=True)
    while True:
        answer = session.prompt(ANSI(message), completer=completer).strip().lower()
        if not answer:
            continue
        if answer.isdigit():
            index = int(answer)
            if index == 0:
                return None
            if 1 <= index <= len(characters):
                return characters[index - 1]
            continue
        if answer == "back":
            return None
        match = next((c for c in characters if c.name.lower() == answer), None)
        if match is not None:
            return match


def confirm(question: str) -> bool:
    answer = session.prompt(ANSI(f"{question} [y/N] "), completer=WordCompleter(["yes", "no"]))
    return answer.strip().lower() in ("y", "yes")
