"""
Logging configuration module for the arena.

Provides centralized logging setup with colored output using rich, and wires
catchery's default error handler to the same root logger.
"""

import logging

from catchery import setup_catchery_logging
from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """
    Sets up logging configuration with rich colored output.

    Args:
        level (int): The logging level to set. Defaults to logging.INFO.
        log_file (str | None): Optional file that also receives catchery's
            plain text log.

    """
    # Create a rich console for logging
    console = Console(width=120, force_terminal=True, force_jupyter=False)

    # Configure the rich handler
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
        tracebacks_show_locals=True,
    )

    rich_handler.setFormatter(
        logging.Formatter(
            "%(name)s - %(levelname)s - %(message)s",
            datefmt="[%X]",
        )
    )

    # Configure the root logger
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
        force=True,
    )

    # catchery's log_* helpers go through its default handler.
    setup_catchery_logging(level=level, text_log_path=log_file)


def parse_level(name: str) -> int:
    """
    Converts a level name such as "debug" into its logging constant.

    Args:
        name (str): The level name, case insensitive.

    Returns:
        int: The logging level, logging.INFO when the name is unknown.

    """
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO
