"""Turn a branching flow into the linear path a run actually takes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from flowcheck.domain.errors import ResolutionError
from flowcheck.domain.model import Flow, Step

logger = logging.getLogger(__name__)

Decider = Callable[[Step], "str | None"]
"""Reports which branch label of a step matches the observed outcome."""


def _resolve_steps(steps: Sequence[Step], decide: Decider, path: list[Step]) -> None:
    for step in steps:
        path.append(step)
        if not step.branches:
            continue
        label = decide(step)
        branch = None
        if label is not None:
            branch = next((b for b in step.branches if b.matches(label)), None)
        if branch is None:
            raise ResolutionError(step, label)
        logger.debug("Step %r continues with branch %r", step.description, branch.label)
        _resolve_steps(branch.steps, decide, path)


def resolve(flow: Flow, decide: Decider) -> tuple[Step, ...]:
    """Return the ordered steps exercised when *decide* picks the branches.

    Each step is included as written. A step with branches is followed by the
    steps of the branch whose label *decide* returns, then the enclosing
    sequence continues. The decision function is called exactly once per
    branching step reached, in path order.

    Args:
        flow: The flow to resolve.
        decide: Decision function; returns a label of the step's branches
            (matched case-insensitively, trailing colon ignored) or None.

    Returns:
        tuple[Step, ...]: The execution path.

    Raises:
        ResolutionError: ``NO_MATCHING_BRANCH`` if *decide* returns None or a
            label that names none of the step's branches.
    """
    path: list[Step] = []
    _resolve_steps(flow.steps, decide, path)
    return tuple(path)
