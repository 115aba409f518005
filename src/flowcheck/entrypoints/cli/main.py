"""FLOWCHECK CLI entry point.

The ``flowcheck`` Click-Extra group owns the logging options and hosts the
flow subcommands.

Available commands
- ``flowcheck parse`` prints flows in canonical notation (or JSON).
- ``flowcheck lint`` checks that flow files parse.
- ``flowcheck run`` validates flows against the running application.

Notes
- ``--version`` reports `flowcheck.__version__` through Click-Extra.
- Logging options apply to every subcommand; reports go to stdout, logs and
  notices to stderr.

Examples
    $ flowcheck --version
    $ flowcheck lint docs/flows.md
    $ flowcheck -v run docs/flows.md --driver http --base-url http://localhost:8000
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from flowcheck import __version__
from flowcheck.interfaces.redactor import RedactorMode
from flowcheck.logging import (
    DEFAULT_RECORDER_CAPACITY,
    LogSettings,
    configure_logging,
    log_startup,
)

from .flows import lint, parse, run
from .helpers import parse_log_level


logger = logging.getLogger(__name__)


HELP = """FLOWCHECK command-line interface.

    FLOWCHECK reads user journeys written in arrow notation ("Flow: ..."
    followed by "→ step" lines), resolves the branch each journey takes, and
    replays the steps against the running application through a browser or
    HTTP driver. Every step reports passed, failed, timed out or skipped, so a
    change is only done when its flows still pass.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "louder",
    count=True,
    default=0,
    help="Show more on the console: -v adds INFO, -vv adds DEBUG.",
)
@click.option(
    "--quiet",
    "-q",
    "quieter",
    count=True,
    default=0,
    help="Show less on the console: -q keeps only ERROR, -qq only CRITICAL.",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Console at DEBUG with timestamps, logger names and source locations.",
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(user_log_dir("flowcheck", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="FLOWCHECK_LOG_PATH",
    show_default=True,
    show_envvar=True,
    help="File the flight recorder writes to.",
)
@click.option(
    "--flight-recorder-capacity",
    "recorder_capacity",
    type=click.IntRange(min=1),
    default=DEFAULT_RECORDER_CAPACITY,
    hidden=True,
    envvar="FLOWCHECK_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Records the flight recorder holds before writing.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "recorder_on",
    default=True,
    envvar="FLOWCHECK_FLIGHT_RECORDER",
    show_envvar=True,
    help=(
        "Keep recent DEBUG records in memory, whatever -v/-q say, and write "
        "them to --log-path when a warning or error is logged."
    ),
)
@click.option(
    "--force-flush/--no-force-flush",
    "flush_on_exit",
    default=False,
    envvar="FLOWCHECK_FORCE_FLUSH_FLIGHT_RECORDER",
    show_default=True,
    show_envvar=True,
    help="Also write the flight recorder to --log-path when the command ends.",
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    default=("httpx=WARNING", "httpcore=WARNING"),
    envvar="FLOWCHECK_LOGGER_LEVEL",
    show_default=True,
    show_envvar=True,
    help=(
        "Minimum level for one logger, as NAME=LEVEL. Applies to the console "
        "and the flight recorder. Repeat the option, or list several entries "
        "in FLOWCHECK_LOGGER_LEVEL separated by commas or spaces."
    ),
)
@click.option(
    "--redactor-mode",
    type=click.Choice([mode.value for mode in RedactorMode], case_sensitive=False),
    default=RedactorMode.LENIENT.value,
    envvar="FLOWCHECK_REDACTOR_MODE",
    show_envvar=True,
    show_default=True,
    help=(
        "How much of logged URLs and headers to hide. 'lenient' hides secrets "
        "such as passwords and tokens; 'strict' hides user names as well."
    ),
)
@clickx.pass_context
def flowcheck(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    louder: int,
    quieter: int,
    debug: bool,
    log_path: Path,
    recorder_capacity: int,
    recorder_on: bool,
    flush_on_exit: bool,
    logger_levels: dict[str, int],
    redactor_mode: str,
) -> None:
    """FLOWCHECK command-line interface."""
    mode = RedactorMode(redactor_mode.lower())
    settings = LogSettings(
        verbosity=louder - quieter,
        debug=debug,
        log_path=log_path if recorder_on else None,
        recorder_capacity=recorder_capacity,
        flush_on_exit=flush_on_exit,
        logger_levels=dict(logger_levels),
        redactor_mode=mode.value,
    )
    # ctx.color is None unless --color/--no-color was given
    handlers = configure_logging(settings, color=ctx.color is not False)
    ctx.ensure_object(dict)["redactor_mode"] = mode
    log_startup(logger, settings, handlers, app_version=__version__)
    ctx.call_on_close(logging.shutdown)


flowcheck.add_command(parse)
flowcheck.add_command(lint)
flowcheck.add_command(run)
