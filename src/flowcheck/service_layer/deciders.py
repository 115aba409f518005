"""Ready-made decision functions for the branch resolver."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import click

from flowcheck.domain.model import Step, normalize_label


def first_branch(step: Step) -> str | None:
    """Always continue with the step's first branch."""
    return step.branches[0].label if step.branches else None


class LabelPreference:
    """Pick the first branch whose label appears in a preference list.

    Matching is case-insensitive and ignores trailing colons, so
    ``LabelPreference(["if error"])`` selects a branch written ``If error:``.
    Branches are tried in source order; None is returned when none match.
    """

    def __init__(self, labels: Iterable[str]) -> None:
        self.labels = tuple(labels)
        self._wanted = {normalize_label(label) for label in self.labels}

    def __call__(self, step: Step) -> str | None:
        for branch in step.branches:
            if normalize_label(branch.label) in self._wanted:
                return branch.label
        return None

    def __repr__(self) -> str:
        return f"LabelPreference({list(self.labels)!r})"


def no_decision(step: Step) -> str | None:  # pylint: disable=unused-argument
    """Never choose; resolving a branching flow with it fails."""
    return None


def chain(*deciders: Callable[[Step], str | None]) -> Callable[[Step], str | None]:
    """Ask each decider in turn and keep the first label returned."""

    def decide(step: Step) -> str | None:
        for decider in deciders:
            if (label := decider(step)) is not None:
                return label
        return None

    return decide


def prompt_for_branch(step: Step) -> str | None:
    """Ask the operator which branch matched what they observed."""
    if not step.branches:
        return None
    return click.prompt(
        f"Which outcome followed '{step.description}'?",
        type=click.Choice(step.labels, case_sensitive=False),
        err=True,
    )
