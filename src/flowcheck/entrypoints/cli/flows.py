"""FLOWCHECK flow commands: parse, lint and run.

Behavior
- Flow files are plain notation files or Markdown documents whose fenced
  code blocks hold ``Flow:`` blocks.
- Reports and JSON go to **stdout**; notices go to **stderr**.
- ``run`` exits with status 1 when any flow fails or is left unrun.

Failure modes
- Malformed notation, non-UTF-8 or unreadable files, duplicate flow names
  or unknown ``--flow`` names
  → ``ClickException`` naming the file and line.
- A branching step with no decision (no ``--branch``/``--first-branch``/
  ``--ask``) → ``ClickException`` listing the available labels.
- Missing ``FLOWCHECK_BASE_URL`` for the browser or HTTP driver →
  ``ClickException`` with guidance.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from flowcheck import config
from flowcheck.bootstrap import Driver, bootstrap
from flowcheck.domain.errors import (
    DuplicateFlowError,
    FlowNotFoundError,
    ParseError,
    ResolutionError,
)
from flowcheck.domain.outcome import OutcomeStatus
from flowcheck.interfaces.redactor import RedactorMode
from flowcheck.notation import FlowCatalog, flow_as_dict, format_flows, load_flows
from flowcheck.service_layer import (
    LabelPreference,
    ValidationReport,
    chain,
    first_branch,
    no_decision,
    prompt_for_branch,
    validate_flows,
)

from .helpers import error, parse_headers, success, warn

if TYPE_CHECKING:
    from flowcheck.domain.result import ValidationResult
    from flowcheck.service_layer import Decider

MISSING_BASE_URL_MSG = (
    "FLOWCHECK_BASE_URL is not set.\n\n"
    "The browser and http drivers need the address of the running application, e.g.:\n"
    "  export FLOWCHECK_BASE_URL='http://localhost:8000'\n"
    "  or pass --base-url http://localhost:8000\n"
    "Use --driver dry-run to walk the flows without an application."
)

UNRESOLVED_BRANCH_HINT = (
    "Choose a branch with --branch LABEL, take the first one with "
    "--first-branch, or pick interactively with --ask."
)

STATUS_STYLES = {
    OutcomeStatus.PASSED: ("PASS", "green"),
    OutcomeStatus.FAILED: ("FAIL", "red"),
    OutcomeStatus.TIMED_OUT: ("TIME", "red"),
    OutcomeStatus.SKIPPED: ("SKIP", "yellow"),
}

flow_files = click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


def _load_catalog(paths: tuple[Path, ...]) -> FlowCatalog:
    catalog = FlowCatalog()
    for path in paths:
        try:
            flows = load_flows(path)
        except ParseError as e:
            raise click.ClickException(f"{path}: {e}") from e
        except OSError as e:
            raise click.ClickException(f"{path}: cannot read file: {e.strerror or e}") from e
        for flow in flows:
            try:
                catalog.add(flow)
            except DuplicateFlowError as e:
                raise click.ClickException(f"{path}: {e}") from e
    if not catalog:
        raise click.ClickException(
            f"No flows found in {', '.join(str(p) for p in paths)}."
        )
    return catalog


def _decider(branches: tuple[str, ...], use_first: bool, ask: bool) -> Decider:
    deciders: list[Decider] = []
    if branches:
        deciders.append(LabelPreference(branches))
    if ask:
        deciders.append(prompt_for_branch)
    elif use_first:
        deciders.append(first_branch)
    if not deciders:
        return no_decision
    return deciders[0] if len(deciders) == 1 else chain(*deciders)


def _positive(ctx: click.Context, param: click.Parameter, value: float | None):  # pylint: disable=unused-argument
    if value is None:
        return value
    try:
        return config.parse_timeout(str(value))
    except config.InvalidTimeoutError as e:
        raise click.BadParameter(str(e)) from e


def _echo_result(result: ValidationResult) -> None:
    verdict = "passed" if result.passed else "failed"
    color = "green" if result.passed else "red"
    click.echo(
        f"Flow: {result.flow.name} "
        + click.style(f"[{verdict}]", fg=color, bold=True)
    )
    for recorded in result.outcomes:
        tag, tag_color = STATUS_STYLES[recorded.outcome.status]
        line = f"  {click.style(tag, fg=tag_color)}  {recorded.step.description}"
        if recorded.outcome.status is not OutcomeStatus.SKIPPED:
            line += f" ({recorded.duration_ms} ms)"
        click.echo(line)
        if recorded.outcome.reason:
            click.echo(f"        {recorded.outcome.reason}")


def _echo_report(report: ValidationReport) -> None:
    for result in report.results:
        _echo_result(result)
    for name in report.not_run:
        click.echo(f"Flow: {name} " + click.style("[not run]", fg="yellow"))


@click.command()
@flow_files
@click.option("--json", "as_json", is_flag=True, help="Print the flow trees as JSON.")
def parse(files: tuple[Path, ...], as_json: bool) -> None:
    """Print flows in canonical notation."""
    catalog = _load_catalog(files)
    if as_json:
        click.echo(
            json.dumps([flow_as_dict(flow) for flow in catalog], indent=2, ensure_ascii=False)
        )
    else:
        click.echo(format_flows(catalog), nl=False)


@click.command()
@flow_files
@click.pass_context
def lint(ctx: click.Context, files: tuple[Path, ...]) -> None:
    """Check that flow files parse and flow names are unique."""
    problems = 0
    seen: dict[str, Path] = {}
    for path in files:
        try:
            flows = load_flows(path)
        except ParseError as e:
            error(f"{path}: {e} [{e.kind.value}]")
            problems += 1
            continue
        except OSError as e:
            error(f"{path}: cannot read file: {e.strerror or e}")
            problems += 1
            continue
        if not flows:
            warn(f"{path}: no flows found")
        for flow in flows:
            if flow.name in seen:
                error(f"{path}: {DuplicateFlowError(flow.name)} (first in {seen[flow.name]})")
                problems += 1
            else:
                seen[flow.name] = path
    if problems:
        ctx.exit(1)
    success(f"{len(seen)} flow(s) in {len(files)} file(s) parse cleanly.")


@click.command()
@flow_files
@click.option(
    "--flow",
    "flow_names",
    multiple=True,
    help="Name of a flow to run (repeatable). Runs every flow when omitted.",
)
@click.option(
    "--driver",
    type=click.Choice([driver.value for driver in Driver]),
    default=Driver.BROWSER.value,
    envvar="FLOWCHECK_DRIVER",
    show_default=True,
    show_envvar=True,
    help="How steps reach the application.",
)
@click.option(
    "--base-url",
    envvar=config.BASE_URL_ENV,
    show_envvar=True,
    help="Root URL of the running application.",
)
@click.option(
    "--timeout",
    type=float,
    callback=_positive,
    envvar=config.STEP_TIMEOUT_ENV,
    show_envvar=True,
    help=f"Seconds allowed per step [default: {config.DEFAULT_STEP_TIMEOUT:g}].",
)
@click.option(
    "--branch",
    "branches",
    multiple=True,
    help="Branch label to take at branching steps (repeatable).",
)
@click.option(
    "--first-branch",
    is_flag=True,
    help="Take the first branch of steps no --branch label matches.",
)
@click.option(
    "--ask",
    is_flag=True,
    help="Prompt for the branch of steps no --branch label matches.",
)
@click.option(
    "--header",
    "headers",
    multiple=True,
    callback=parse_headers,
    help="Extra HTTP header 'Name: value' for the http driver (repeatable).",
)
@click.option(
    "--keep-going",
    is_flag=True,
    help="Run the remaining flows after a flow fails.",
)
@click.option(
    "--headless/--headed",
    default=None,
    help="Run the browser without a window (default from FLOWCHECK_HEADLESS, else headless).",
)
@click.pass_context
def run(  # pylint: disable=too-many-arguments, too-many-locals, too-many-positional-arguments
    ctx: click.Context,
    files: tuple[Path, ...],
    flow_names: tuple[str, ...],
    driver: str,
    base_url: str | None,
    timeout: float | None,
    branches: tuple[str, ...],
    first_branch: bool,  # pylint: disable=redefined-outer-name
    ask: bool,
    headers: dict[str, str],
    keep_going: bool,
    headless: bool | None,
) -> None:
    """Validate flows against the running application."""
    catalog = _load_catalog(files)
    try:
        flows = catalog.select(flow_names)
    except FlowNotFoundError as e:
        raise click.BadParameter(
            f"{e} Known flows: {', '.join(catalog.names)}", param_hint="'--flow'"
        ) from e

    mode = (ctx.obj or {}).get("redactor_mode", RedactorMode.LENIENT)
    try:
        container = bootstrap(
            Driver(driver),
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            headless=headless,
            redactor_mode=mode,
        )
    except config.BaseUrlNotSetError as e:
        raise click.ClickException(MISSING_BASE_URL_MSG) from e
    except config.InvalidTimeoutError as e:
        raise click.ClickException(str(e)) from e

    try:
        report = validate_flows(
            flows,
            _decider(branches, first_branch, ask),
            container.executor,
            container.capability_factory,
            halt_on_failure=not keep_going,
        )
    except ResolutionError as e:
        raise click.ClickException(f"{e}\n{UNRESOLVED_BRANCH_HINT}") from e

    _echo_report(report)
    if not report.passed:
        error(
            f"{len(report.failed)} of {len(report.results)} flow(s) failed"
            + (f", {len(report.not_run)} not run." if report.not_run else ".")
        )
        ctx.exit(1)
    success(f"All {len(report.results)} flow(s) passed.")
