"""Domain-layer error definitions."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flowcheck.domain.model import Step

# ============================================================================
#                           General domain errors
# ============================================================================


class FlowcheckError(Exception):
    """Base class for domain-layer errors."""


# ============================================================================
#                               Parse errors
# ============================================================================


class ParseErrorKind(Enum):
    """Reasons a flow file or block cannot be parsed."""

    MISSING_HEADER = "missing_header"
    BAD_NESTING = "bad_nesting"
    EMPTY_FLOW = "empty_flow"
    MALFORMED_LINE = "malformed_line"
    BAD_ENCODING = "bad_encoding"


class ParseError(FlowcheckError):
    """Raised when flow text does not follow the notation.

    Attributes:
        kind (ParseErrorKind): The structural reason for the failure.
        line (int | None): 1-based line number of the offending line, if any.
        detail (str): Human-readable description without the line prefix.
    """

    def __init__(self, kind: ParseErrorKind, detail: str, line: int | None = None):
        prefix = f"line {line}: " if line is not None else ""
        super().__init__(f"{prefix}{detail}")
        self.kind = kind
        self.detail = detail
        self.line = line


# ============================================================================
#                               Model errors
# ============================================================================


class InvalidBranchError(FlowcheckError, ValueError):
    """Raised when a branch cannot be written in the notation."""


# ============================================================================
#                             Resolution errors
# ============================================================================


class ResolutionErrorKind(Enum):
    """Reasons a flow cannot be resolved into an execution path."""

    NO_MATCHING_BRANCH = "no_matching_branch"


class ResolutionError(FlowcheckError):
    """Raised when a branching step gets no usable decision.

    Attributes:
        kind (ResolutionErrorKind): Always ``NO_MATCHING_BRANCH`` for now.
        step (Step): The step whose branches could not be chosen.
        label (str | None): The label the decision function returned.
    """

    def __init__(self, step: Step, label: str | None) -> None:
        offered = ", ".join(repr(branch.label) for branch in step.branches)
        super().__init__(
            f"No branch of step '{step.description}' matches {label!r} "
            f"(available: {offered})."
        )
        self.kind = ResolutionErrorKind.NO_MATCHING_BRANCH
        self.step = step
        self.label = label


# ============================================================================
#                       Validation state machine errors
# ============================================================================


class InvalidTransitionError(FlowcheckError):
    """Raised when a validation run is moved to a state it cannot reach."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move validation from {current} to {target}.")
        self.current = current
        self.target = target


# ============================================================================
#                              Catalog errors
# ============================================================================


class DuplicateFlowError(FlowcheckError):
    """Raised when two flows with the same name are added to one catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Flow '{name}' is defined more than once.")
        self.name = name


class FlowNotFoundError(FlowcheckError, LookupError):
    """Raised when a flow name is not present in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Flow '{name}' not found.")
        self.name = name
