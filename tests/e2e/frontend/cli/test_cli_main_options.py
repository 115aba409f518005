"""End-to-end CLI tests for the top-level `flowcheck` command.

These tests exercise verbosity flags, logger-level overrides, debug
formatting and the in-memory flight recorder by invoking the `log-demo`
command, and check that a dry run leaves its trace in the flight recorder.
"""

import re
from pathlib import Path

import pytest

from flowcheck.entrypoints.cli.main import flowcheck

# pylint: disable=unused-argument

LOG_PATH = "flight_recorder.log"


def assert_in_output(pattern: str, output: str) -> None:
    if not re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' not found in output:\n{output}")


def assert_not_in_output(pattern: str, output: str) -> None:
    if re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' found in output:\n{output}")


def read_log(path: str = LOG_PATH) -> str:
    return Path(path).read_text(encoding="utf-8")


@pytest.mark.parametrize(
    ("args", "shown", "hidden"),
    [
        ([], "WARNING", "INFO"),
        (["-v"], "INFO", "DEBUG"),
        (["-vv"], "DEBUG", None),
        (["-q"], "ERROR", "WARNING"),
        (["-qq"], "CRITICAL", "ERROR"),
    ],
    ids=["default", "v", "vv", "q", "qq"],
)
def test_verbosity(registered_log_demo, runner, fs, args, shown, hidden):
    """-v/-q move the console threshold one level per repetition."""
    result = runner.invoke(flowcheck, ["--log-path", LOG_PATH, *args, "log-demo"])
    assert result.exit_code == 0
    assert_in_output(shown, result.output)
    if hidden:
        assert_not_in_output(hidden, result.output)


@pytest.mark.parametrize(
    ("env", "cli_args"),
    [
        ({}, ["-vv", "-L", "some.thirdparty=INFO"]),
        ({"FLOWCHECK_LOGGER_LEVEL": "some.thirdparty=INFO"}, ["-vv"]),
    ],
    ids=["cli-flag", "env-var"],
)
def test_logger_level_silences_debug(registered_log_demo, runner, fs, env, cli_args):
    """Logger-level overrides silence third-party DEBUG while keeping INFO+."""
    result = runner.invoke(
        flowcheck, ["--log-path", LOG_PATH, *cli_args, "log-demo"], env=env
    )
    assert result.exit_code == 0
    assert_not_in_output("This is a debug-level third-party test message.", result.output)
    assert_in_output("This is an info-level third-party test message.", result.output)


def test_debug_mode_shows_paths(registered_log_demo, runner, fs):
    result = runner.invoke(flowcheck, ["--log-path", LOG_PATH, "--debug", "log-demo"])
    assert result.exit_code == 0
    assert_in_output(r"conftest\.py:\d+\b", result.output)


def test_debug_mode_is_off_by_default(registered_log_demo, runner, fs):
    result = runner.invoke(flowcheck, ["--log-path", LOG_PATH, "log-demo"])
    assert result.exit_code == 0
    assert_not_in_output(r"conftest\.py:\d+\b", result.output)


def test_flight_recorder_flush_on_warning(registered_log_demo, runner, fs):
    """Buffered DEBUG records are written once a WARNING arrives."""
    result = runner.invoke(
        flowcheck, ["--log-path", LOG_PATH, "-L", "some.thirdparty=INFO", "log-demo"]
    )
    assert result.exit_code == 0
    content = read_log()
    assert_in_output("This is a debug-level test message.", content)
    assert_not_in_output("This is a debug-level third-party test message.", content)
    assert_in_output("This is an info-level third-party test message.", content)
    assert_in_output("This is a critical-level test message.", content)
    # buffered after the last flush and never written
    assert_not_in_output("This is a final debug-level test message.", content)


@pytest.mark.parametrize(
    ("env", "cli_args"),
    [({}, ["--force-flush"]), ({"FLOWCHECK_FORCE_FLUSH_FLIGHT_RECORDER": "true"}, [])],
    ids=["cli-flag", "env-var"],
)
def test_flight_recorder_force_flush(registered_log_demo, runner, fs, env, cli_args):
    result = runner.invoke(
        flowcheck, ["--log-path", LOG_PATH, *cli_args, "log-demo"], env=env
    )
    assert result.exit_code == 0
    assert_in_output("This is a final debug-level test message.", read_log())


@pytest.mark.parametrize(
    ("env", "cli_args"),
    [({}, ["--no-flight-recorder"]), ({"FLOWCHECK_FLIGHT_RECORDER": "0"}, [])],
    ids=["cli-flag", "env-var"],
)
def test_flight_recorder_can_be_disabled(registered_log_demo, runner, fs, env, cli_args):
    result = runner.invoke(
        flowcheck, ["--log-path", LOG_PATH, *cli_args, "log-demo"], env=env
    )
    assert result.exit_code == 0
    assert not Path(LOG_PATH).exists()


def test_flight_recorder_truncates_log(registered_log_demo, runner, fs):
    """The log file is rewritten on every run, not appended to."""
    sizes = []
    for _ in range(2):
        result = runner.invoke(flowcheck, ["--log-path", LOG_PATH, "log-demo"])
        assert result.exit_code == 0
        sizes.append(len(read_log().splitlines()))
    assert sizes[0] == sizes[1]


def test_startup_logging(registered_log_demo, runner, fs):
    result = runner.invoke(
        flowcheck,
        ["--log-path", "startup.log", "--force-flush", "--redactor-mode", "strict", "log-demo"],
        env={"FLOWCHECK_LOGGER_LEVEL": "some.thirdparty=INFO"},
    )
    assert result.exit_code == 0
    content = read_log("startup.log")
    assert_in_output(
        r"FLOWCHECK \d+\.\d+\.\d+\S* \(console WARNING, flight recorder on\)", content
    )
    assert_in_output(r"Python \d+\.\d+\.\d+ on .+", content)
    assert_in_output(r"Process \d+ in .+", content)
    assert_in_output(r"Drivers: httpx \d+\.\d+\S*, Playwright .+", content)
    assert_in_output(r"Log handlers: RichHandler, MemoryHandler", content)
    assert_in_output(
        r"Flight recorder writes to startup\.log \(2000 records, flush on exit: yes\)",
        content,
    )
    assert_in_output(
        r"Logger levels: \{'httpx': 'WARNING', 'httpcore': 'WARNING', "
        r"'some.thirdparty': 'INFO'\}",
        content,
    )
    assert_in_output(r"Redactor mode: strict", content)


def test_dry_run_is_recorded(runner, fs):
    """A dry run leaves its step trace in the flight recorder."""
    Path("flows.flow").write_text(
        'Flow: Create Project\nNavigate to home page\n  → Click "Create Project" button\n',
        encoding="utf-8",
    )
    result = runner.invoke(
        flowcheck,
        ["--log-path", LOG_PATH, "--force-flush", "run", "flows.flow", "--driver", "dry-run"],
    )
    assert result.exit_code == 0, result.output
    content = read_log()
    assert_in_output(r"Loaded 1 flow\(s\) from flows\.flow", content)
    assert_in_output(r"Step 'Navigate to home page' -> passed", content)
    assert_in_output(r"Flow 'Create Project' passed", content)
