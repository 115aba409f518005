"""Flow model, outcomes, results and the errors they raise."""

from .errors import (
    DuplicateFlowError,
    FlowcheckError,
    FlowNotFoundError,
    InvalidBranchError,
    InvalidTransitionError,
    ParseError,
    ParseErrorKind,
    ResolutionError,
    ResolutionErrorKind,
)
from .model import Branch, Flow, Step, StepKind
from .outcome import Outcome, OutcomeStatus
from .result import StepOutcome, ValidationResult, ValidationRun, ValidationStatus

__all__ = [
    "Branch",
    "DuplicateFlowError",
    "Flow",
    "FlowcheckError",
    "FlowNotFoundError",
    "InvalidBranchError",
    "InvalidTransitionError",
    "Outcome",
    "OutcomeStatus",
    "ParseError",
    "ParseErrorKind",
    "ResolutionError",
    "ResolutionErrorKind",
    "Step",
    "StepKind",
    "StepOutcome",
    "ValidationResult",
    "ValidationRun",
    "ValidationStatus",
]
