"""
Main entry point for the Rotation Arena.

Loads the configuration, the ability catalog and the stored characters, lets
the user pick two characters and fights a direct battle between them, then
plays the battle back on the console.

Settings come from an optional arena.json and ARENA_* environment variables,
e.g. ARENA_DATA_DIR or ARENA_LOG_LEVEL.
"""

from pathlib import Path

from abilities.catalog import AbilityCatalog
from character.record import CharacterRecord
from combat.battle_service import BattleService
from core.config import ArenaConfig
from core.errors import ArenaError
from core.logging import parse_level, setup_logging
from core.store import ABILITIES, CHARACTERS, JsonFileStore
from core.utils import cprint, crule
from ui.battle_view import play_battle
from ui.prompts import choose_character, confirm


def load_characters(store: JsonFileStore) -> list[CharacterRecord]:
    """Loads every stored character, skipping the ones that fail validation."""
    characters: list[CharacterRecord] = []
    for record in store.read(CHARACTERS):
        try:
            characters.append(CharacterRecord.model_validate(record))
        except ValueError as e:
            cprint(f"[yellow]Skipping character {record.get('id')!r}: {e}[/]")
    return characters


def main() -> None:
    config = ArenaConfig.load()
    setup_logging(parse_level(config.log_level))

    crule("Rotation Arena", style="bold green")
    cprint(
        "Welcome to the Rotation Arena! Pick a character you own and an opponent: "
        "each one cycles through its ability rotation until one falls or time runs out.\n",
        style="bold blue",
    )

    # =========================================================================

    crule("Initialize Data", style="bold green")

    store = JsonFileStore(Path(config.data_dir))
    store.ensure_collections()

    cprint("Loading abilities...", style="bold green")
    catalog = AbilityCatalog.from_file(store.path_for(ABILITIES))

    cprint("Loading characters...", style="bold green")
    characters = load_characters(store)

    crule("Data Initialized", style="bold green", characters="=")
    cprint(f"{len(catalog)} abilities, {len(characters)} characters.")

    if len(characters) < 2:
        cprint("[red]At least two characters are needed for a battle.[/]")
        return

    service = BattleService(store, catalog, config)

    # =========================================================================

    while True:
        character = choose_character(characters, "Your character > ", "Choose your character")
        if character is None:
            break
        opponents = [c for c in characters if c.id != character.id]
        opponent = choose_character(opponents, "Opponent > ", "Choose an opponent")
        if opponent is None:
            continue
        try:
            result = service.challenge(character.id, opponent.id, character.owner_id)
        except ArenaError as e:
            cprint(f"[red]{e}[/]")
            continue
        play_battle(result)
        if not confirm("Fight again?"):
            break

    crule(":crossed_swords:  Goodbye", style="bold green")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        cprint("")
        crule(":crossed_swords:  Arena Closed", style="bold red")
