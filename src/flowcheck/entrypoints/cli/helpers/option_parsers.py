"""Click callbacks for repeatable ``NAME=LEVEL`` and ``Name: value`` options.

Both callbacks accept either the tuple Click builds from repeated flags or a
single string (as read from an environment variable), where items may be
separated by commas or whitespace for logger levels and by newlines for
headers.
"""

import logging
import re

import click

DEFAULT_LIB_LEVELS = {"httpx": logging.WARNING, "httpcore": logging.WARNING}


def _split(value: str | list[str] | tuple[str, ...], separators: str) -> list[str]:
    chunks = [value] if isinstance(value, str) else list(value)
    return [item for chunk in chunks for item in re.split(separators, chunk) if item.strip()]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Parse ``NAME=LEVEL`` pairs into a logger name to level mapping.

    `DEFAULT_LIB_LEVELS` is the starting point; later items win.

    Raises:
        click.BadParameter: If an item is not ``NAME=LEVEL`` or LEVEL is not a
            standard logging level name.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _split(value, r"[,\s]+"):
        name, sep, level_str = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        lvl = logging.getLevelNamesMapping().get(level_str.strip().upper())
        if lvl is None:
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = lvl
    return levels


def parse_headers(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, str]:
    """Parse ``Name: value`` header lines into a dict.

    Raises:
        click.BadParameter: If a line has no colon or an empty name.
    """
    headers: dict[str, str] = {}
    for item in _split(value, r"\n"):
        name, sep, header_value = item.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected 'Name: value', got {item!r}")
        headers[name.strip()] = header_value.strip()
    return headers
