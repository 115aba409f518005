"""Value objects describing flows, their steps and conditional branches."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from flowcheck.domain.errors import InvalidBranchError

ASSERTION_VERBS = frozenset(
    {"verify", "check", "expect", "assert", "confirm", "ensure", "see"}
)

_FIRST_WORD = re.compile(r"[A-Za-z]+")
LABEL_PATTERN = re.compile(r"^(?P<label>[Ii][Ff]\s+\S.*?)\s*:$")


class StepKind(Enum):
    """Whether a step drives the system or checks what it shows."""

    ACTION = "action"
    ASSERTION = "assertion"

    @classmethod
    def for_description(cls, description: str) -> StepKind:
        """Classify a step description by its leading verb.

        Args:
            description: The free-text step description.

        Returns:
            StepKind: ``ASSERTION`` when the first word is one of
            ``ASSERTION_VERBS`` (case-insensitive), otherwise ``ACTION``.
        """
        match = _FIRST_WORD.match(description.strip())
        if match and match.group(0).lower() in ASSERTION_VERBS:
            return cls.ASSERTION
        return cls.ACTION


def normalize_label(label: str) -> str:
    """Canonical form of a branch label used for matching.

    Trailing colons are dropped, inner whitespace collapsed and case folded,
    so ``"If  Successful:"`` and ``"if successful"`` compare equal.
    """
    return " ".join(label.strip().rstrip(":").split()).casefold()


@dataclass(frozen=True)
class Branch:
    """A labelled conditional continuation of a step.

    Raises:
        InvalidBranchError: If the label is not an ``If <outcome>`` phrase
            (as written in the notation, minus the colon) or there are no steps.
    """

    label: str  # e.g. "If successful", without the trailing colon
    steps: tuple[Step, ...]

    def __post_init__(self) -> None:
        written = f"{self.label}:"
        match = LABEL_PATTERN.match(written)
        if not match or match.group("label") != self.label or len(written.splitlines()) != 1:
            raise InvalidBranchError(
                f"branch label must read 'If <outcome>' on one line, got {self.label!r}"
            )
        if not self.steps:
            raise InvalidBranchError(f"branch {self.label!r} has no steps")

    def matches(self, label: str) -> bool:
        """Return True if *label* names this branch (see `normalize_label`)."""
        return normalize_label(self.label) == normalize_label(label)


@dataclass(frozen=True)
class Step:
    """One action or assertion of a flow."""

    kind: StepKind
    description: str
    branches: tuple[Branch, ...] = field(default=())

    @classmethod
    def from_description(
        cls, description: str, branches: tuple[Branch, ...] = ()
    ) -> Step:
        """Build a step whose kind is derived from its description."""
        return cls(StepKind.for_description(description), description, branches)

    @property
    def labels(self) -> list[str]:
        """Labels of this step's branches in source order."""
        return [branch.label for branch in self.branches]


@dataclass(frozen=True)
class Flow:
    """A named, ordered, possibly branching user journey."""

    name: str
    steps: tuple[Step, ...]

    def walk(self) -> list[Step]:
        """Every step of the flow, depth first, including all branches."""
        found: list[Step] = []
        pending = list(reversed(self.steps))
        while pending:
            step = pending.pop()
            found.append(step)
            for branch in reversed(step.branches):
                pending.extend(reversed(branch.steps))
        return found
