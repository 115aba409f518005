"""Validation results and the state machine that produces them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from flowcheck.domain.errors import InvalidTransitionError
from flowcheck.domain.model import Flow, Step
from flowcheck.domain.outcome import Outcome, OutcomeStatus


class ValidationStatus(Enum):
    """Enumeration of possible validation statuses."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ValidationStatus.PASSED, ValidationStatus.FAILED)


_ALLOWED = {
    ValidationStatus.NOT_STARTED: {ValidationStatus.RUNNING},
    ValidationStatus.RUNNING: {ValidationStatus.PASSED, ValidationStatus.FAILED},
    ValidationStatus.PASSED: set(),
    ValidationStatus.FAILED: set(),
}


@dataclass(frozen=True)
class StepOutcome:
    """The recorded outcome of one step of an execution path."""

    step: Step
    outcome: Outcome
    duration_ms: int = 0


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of executing one flow's resolved path."""

    flow: Flow
    outcomes: tuple[StepOutcome, ...]
    status: ValidationStatus

    @property
    def passed(self) -> bool:
        return self.status is ValidationStatus.PASSED

    @property
    def first_failure(self) -> StepOutcome | None:
        """The step that stopped the run, or None when nothing failed.

        Every step after it is skipped, so this is the first non-pass outcome.
        """
        return next((r for r in self.outcomes if not r.outcome.is_pass), None)


class ValidationRun:
    """Mutable recorder for a single flow execution.

    The run starts in ``NOT_STARTED``, moves to ``RUNNING`` when the first step
    is dispatched, and ends in ``PASSED`` or ``FAILED``. The first non-pass
    outcome fails the run; every step recorded afterwards must be skipped.
    """

    def __init__(self, flow: Flow) -> None:
        self.flow = flow
        self.status = ValidationStatus.NOT_STARTED
        self._outcomes: list[StepOutcome] = []

    # --- State Transitions ---

    def _move(self, target: ValidationStatus) -> None:
        if target not in _ALLOWED[self.status]:
            raise InvalidTransitionError(self.status.value, target.value)
        self.status = target

    def start(self) -> None:
        """Enter ``RUNNING``.

        Raises:
            InvalidTransitionError: If the run was already started.
        """
        self._move(ValidationStatus.RUNNING)

    def record(self, step: Step, outcome: Outcome, duration_ms: int = 0) -> None:
        """Record the outcome of the next step of the path.

        A non-pass outcome fails the run. Once failed, only skipped outcomes
        may be recorded.

        Raises:
            InvalidTransitionError: If the run is not running (or failed and
                the outcome is not ``SKIPPED``).
        """
        if self.status is ValidationStatus.FAILED:
            if outcome.status is not OutcomeStatus.SKIPPED:
                raise InvalidTransitionError(
                    self.status.value, f"record {outcome.status.value}"
                )
        elif self.status is not ValidationStatus.RUNNING:
            raise InvalidTransitionError(
                self.status.value, f"record {outcome.status.value}"
            )
        self._outcomes.append(StepOutcome(step, outcome, duration_ms))
        if self.status is ValidationStatus.RUNNING and not outcome.is_pass:
            self._move(ValidationStatus.FAILED)

    def finish(self) -> ValidationResult:
        """Close the run and freeze its result.

        A run still ``RUNNING`` (every step passed) becomes ``PASSED``.

        Raises:
            InvalidTransitionError: If the run never started.
        """
        if self.status is ValidationStatus.RUNNING:
            self._move(ValidationStatus.PASSED)
        elif not self.status.is_terminal:
            raise InvalidTransitionError(
                self.status.value, ValidationStatus.PASSED.value
            )
        return ValidationResult(self.flow, tuple(self._outcomes), self.status)

    @property
    def outcomes(self) -> tuple[StepOutcome, ...]:
        return tuple(self._outcomes)
