"""Functional tests for FLOWCHECK's CLI help and version output.

This suite verifies:
- The long-form `HELP` prose from `flowcheck.entrypoints.cli.main` is rendered
  on `--help` (compared after stripping ANSI and normalizing whitespace).
- The help frame appears (Usage/Options/Commands) and lists every command.
- Each subcommand documents its own options.
"""

from __future__ import annotations

import re
from textwrap import dedent
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

import flowcheck
from flowcheck.entrypoints.cli import main

if TYPE_CHECKING:
    from click.testing import Result

ANSI_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")  # strip SGR styling only


def _normalize(s: str) -> str:
    """Return `s` with leading/trailing space trimmed and internal whitespace collapsed."""
    return re.sub(r"\s+", " ", s.strip())


def _assert_help_displayed(result: Result):
    """Assert that help output contains the project HELP text and expected sections."""
    text = ANSI_RE.sub("", result.output)
    expected_message = _normalize(dedent(main.HELP))
    assert expected_message
    assert expected_message in _normalize(text), "HELP text not rendered."
    assert "Usage:" in text
    assert "Options:" in text
    assert "Commands:" in text
    for command in ("parse", "lint", "run"):
        assert re.search(rf"^\s+{command}\s", text, re.MULTILINE), f"{command} not listed."


class TestNewFlowcheckUser:
    """A new user of FLOWCHECK, unfamiliar with the tool, tries to get help."""

    @staticmethod
    @pytest.mark.parametrize("args", ([], ["-h"], ["--help"]))
    def test_flowcheck_help_output(args: list[str]):
        """Help is shown with no args, `-h` or `--help`."""
        runner = CliRunner()
        result = runner.invoke(main.flowcheck, args)

        # The user sees the long HELP message, usage, options, and commands
        _assert_help_displayed(result)

    @staticmethod
    def test_flowcheck_version_output():
        """User runs --version and sees the version string."""
        runner = CliRunner()
        result = runner.invoke(main.flowcheck, ["--version"])

        assert result.exit_code == 0
        assert flowcheck.__version__ in result.output

    @staticmethod
    @pytest.mark.parametrize(
        ("command", "options"),
        [
            ("parse", ["--json"]),
            ("lint", []),
            ("run", ["--flow", "--driver", "--base-url", "--branch", "--first-branch", "--ask"]),
        ],
    )
    def test_subcommand_help(command: str, options: list[str]):
        """Each subcommand explains itself and its options."""
        runner = CliRunner()
        result = runner.invoke(main.flowcheck, [command, "--help"])

        assert result.exit_code == 0
        text = ANSI_RE.sub("", result.output)
        assert "FILES..." in text
        for option in options:
            assert option in text
