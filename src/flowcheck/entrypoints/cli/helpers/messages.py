"""Terminal message helpers for the FLOWCHECK CLI.

Status lines go to stderr so stdout can carry reports and JSON. Each line
starts with an emoji marker, or an ASCII marker when stderr cannot encode it.
"""

import click

GLYPHS = {
    "caution": ("⚠️", "[!]"),
    "success": ("✅", "[OK]"),
    "error": ("❌", "[X]"),
}


def _supports_character(character: str) -> bool:
    """Return True if *character* can be encoded on the current stderr."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    try:
        character.encode(getattr(stream, "encoding") or "ascii")
    except UnicodeEncodeError:
        return False
    return True


def glyph(kind: str) -> str:
    """Marker for *kind* (``caution``, ``success`` or ``error``)."""
    emoji, fallback = GLYPHS[kind]
    return emoji if _supports_character(emoji) else fallback


def warn(msg: str) -> None:
    """Emit a bold yellow warning line to stderr."""
    click.secho(f"{glyph('caution')}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a bold green success line to stderr."""
    click.secho(f"{glyph('success')}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a bold red error line to stderr."""
    click.secho(f"{glyph('error')}  {msg}", fg="red", bold=True, err=True)
