"""Logging setup for the FLOWCHECK command line.

Console output goes through Rich on stderr so stdout stays free for reports.
A "flight recorder" keeps the most recent records at DEBUG level in memory
and writes them to a file once something goes wrong, which gives a full trace
of the steps leading to a failed flow without a noisy console.

Typical usage
-------------
    settings = LogSettings(verbosity=1, log_path=Path("run.log"))
    handlers = configure_logging(settings)
    log_startup(logging.getLogger(__name__), settings, handlers, app_version="0.1.0")
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version
from logging.handlers import MemoryHandler
from pathlib import Path

import httpx
from rich.console import Console
from rich.logging import RichHandler

OWN_LOGGERS = "flowcheck"
DEFAULT_RECORDER_CAPACITY = 2000

FILE_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] %(levelname)s "
    "%(name)s:%(lineno)d: %(message)s"
)


@dataclass(frozen=True)
class LogSettings:
    """Everything the CLI decides about logging before a command runs.

    Attributes:
        verbosity: Steps away from WARNING; positive is chattier (``-v``),
            negative quieter (``-q``).
        debug: Console at DEBUG with timestamps and source locations.
        log_path: Flight-recorder file, or None to keep no recorder.
        recorder_capacity: Records buffered before the recorder writes anyway.
        flush_on_exit: Write the recorder buffer on exit even without a warning.
        logger_levels: Minimum level per logger name.
        redactor_mode: Redaction mode name, reported at startup.
    """

    verbosity: int = 0
    debug: bool = False
    log_path: Path | None = None
    recorder_capacity: int = DEFAULT_RECORDER_CAPACITY
    flush_on_exit: bool = False
    logger_levels: dict[str, int] = field(default_factory=dict)
    redactor_mode: str = "lenient"

    @property
    def console_level(self) -> int:
        if self.debug:
            return logging.DEBUG
        return min(logging.CRITICAL, max(logging.DEBUG, logging.WARNING - 10 * self.verbosity))


class LibraryTag(logging.Filter):
    """Set ``record.origin`` to ``[library]`` for records from other packages.

    Our own records get an empty tag. Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        top = record.name.partition(".")[0]
        record.origin = "" if top == OWN_LOGGERS else f"[{top}]"
        return True


def console_handler(level: int, *, debug: bool = False, color: bool = True) -> RichHandler:
    """Rich handler on stderr; *debug* adds timestamps, logger names and paths."""
    handler = RichHandler(
        level=level,
        console=Console(stderr=True, color_system="auto" if color else None),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug,
        enable_link_path=debug,
    )
    if debug:
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s: %(message)s"))
    else:
        handler.addFilter(LibraryTag())
        handler.setFormatter(logging.Formatter("%(origin)s %(message)s"))
    return handler


def flight_recorder(
    path: Path, *, capacity: int = DEFAULT_RECORDER_CAPACITY, flush_on_exit: bool = False
) -> MemoryHandler:
    """Buffer records in memory and write them to *path* on the first WARNING.

    The file is truncated on every run. With *flush_on_exit* whatever is still
    buffered is written when logging shuts down.
    """
    target = logging.FileHandler(path, mode="w", encoding="utf-8")
    target.setLevel(logging.DEBUG)
    target.setFormatter(logging.Formatter(FILE_FORMAT))
    return MemoryHandler(
        capacity,
        flushLevel=logging.WARNING,
        target=target,
        flushOnClose=flush_on_exit,
    )


def configure_logging(settings: LogSettings, *, color: bool = True) -> list[logging.Handler]:
    """Install the console handler (and recorder) on the root logger.

    The root logger passes everything from DEBUG up; each handler applies its
    own threshold. Per-logger levels from *settings* then cut records at the
    source, for the console and the recorder alike.

    Returns:
        list[logging.Handler]: The installed handlers.
    """
    handlers: list[logging.Handler] = [
        console_handler(settings.console_level, debug=settings.debug, color=color)
    ]
    if settings.log_path is not None:
        handlers.append(
            flight_recorder(
                settings.log_path,
                capacity=settings.recorder_capacity,
                flush_on_exit=settings.flush_on_exit,
            )
        )
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, level in settings.logger_levels.items():
        logging.getLogger(name).setLevel(level)
    return handlers


def _installed(distribution: str) -> str:
    try:
        return version(distribution)
    except PackageNotFoundError:
        return "not installed"


def log_startup(
    logger: logging.Logger,
    settings: LogSettings,
    handlers: list[logging.Handler],
    *,
    app_version: str,
) -> None:
    """One INFO summary line, then the runtime and logging setup at DEBUG."""
    logger.info(
        "FLOWCHECK %s (console %s, flight recorder %s)",
        app_version,
        logging.getLevelName(settings.console_level),
        "on" if settings.log_path is not None else "off",
    )
    logger.debug(
        "Python %s on %s %s", sys.version.split()[0], platform.system(), platform.release()
    )
    logger.debug("Process %d in %s", os.getpid(), Path.cwd())
    logger.debug(
        "Drivers: httpx %s, Playwright %s", httpx.__version__, _installed("playwright")
    )
    logger.debug("Log handlers: %s", ", ".join(type(h).__name__ for h in handlers))
    if settings.log_path is not None:
        logger.debug(
            "Flight recorder writes to %s (%d records, flush on exit: %s)",
            settings.log_path,
            settings.recorder_capacity,
            "yes" if settings.flush_on_exit else "no",
        )
    levels = {name: logging.getLevelName(lvl) for name, lvl in settings.logger_levels.items()}
    logger.debug("Logger levels: %s", levels or "defaults")
    logger.debug("Redactor mode: %s", settings.redactor_mode)
