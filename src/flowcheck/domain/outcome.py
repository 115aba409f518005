"""Per-step outcomes reported by capabilities and recorded by the executor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

TIMEOUT_REASON = "timeout"


class OutcomeStatus(Enum):
    """Enumeration of possible step outcomes."""

    PASSED = "passed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Outcome:
    """Result of performing one action or checking one assertion."""

    status: OutcomeStatus
    reason: str | None = None

    @classmethod
    def passed(cls) -> Outcome:
        return cls(OutcomeStatus.PASSED)

    @classmethod
    def failed(cls, reason: str) -> Outcome:
        return cls(OutcomeStatus.FAILED, reason)

    @classmethod
    def timed_out(cls, reason: str = TIMEOUT_REASON) -> Outcome:
        return cls(OutcomeStatus.TIMED_OUT, reason)

    @classmethod
    def skipped(cls) -> Outcome:
        return cls(OutcomeStatus.SKIPPED)

    @property
    def is_pass(self) -> bool:
        """True only for ``PASSED``; skipped steps are not passes."""
        return self.status is OutcomeStatus.PASSED

    def __str__(self) -> str:
        if self.reason:
            return f"{self.status.value}: {self.reason}"
        return self.status.value
