"""Fixtures and test helpers for end-to-end CLI logging tests.

Provides a test-only `log-demo` Click command that emits log messages on a
``flowcheck`` logger and a third-party logger, plus fixtures to register
that command, obtain a CliRunner, and run inside an isolated filesystem.
"""

import logging

import click
import pytest
from click.testing import CliRunner

from flowcheck.entrypoints.cli.main import flowcheck

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Emit DEBUG..CRITICAL on 'flowcheck.demo' and DEBUG..WARNING on 'some.thirdparty'."""
    logger = logging.getLogger("flowcheck.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and any Click-Extra sections."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register 'log-demo' on the top-level group for the duration of a test."""
    flowcheck.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(flowcheck, "log-demo")


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Run the test inside ``runner.isolated_filesystem()``."""
    with runner.isolated_filesystem():
        yield
