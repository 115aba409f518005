"""Scripted capability: replays predetermined outcomes.

Used by tests and by the ``dry-run`` driver, which walks a flow's resolved
path without touching any real system. Every call is recorded so callers can
check which steps were dispatched and in what order.

Typical usage
-------------
    capability = ScriptedCapability({'Click "Save"': Outcome.failed("element not found")})
    capability.perform_action('Click "Save"')  # Outcome(FAILED, "element not found")
    capability.calls  # [("action", 'Click "Save"')]
"""

from __future__ import annotations

import threading
from collections.abc import Mapping

from flowcheck.domain.outcome import Outcome
from flowcheck.interfaces.capability import Capability

__all__ = ["ScriptedCapability"]

ACTION = "action"
ASSERTION = "assertion"


class ScriptedCapability(Capability):
    """Capability returning scripted outcomes keyed by step description.

    Args:
        outcomes: Outcome to return per description. Descriptions not listed
            get *default*.
        default: Outcome for unscripted descriptions (``PASSED`` by default).
        delays: Optional seconds to block per description before answering,
            handy for exercising executor timeouts. A blocked call can be
            released early with `release`.
    """

    def __init__(
        self,
        outcomes: Mapping[str, Outcome] | None = None,
        *,
        default: Outcome | None = None,
        delays: Mapping[str, float] | None = None,
    ) -> None:
        self.outcomes = dict(outcomes or {})
        self.default = default or Outcome.passed()
        self.delays = dict(delays or {})
        self.calls: list[tuple[str, str]] = []
        self.started = False
        self.stopped = False
        self.thread_names: set[str] = set()
        self._released = threading.Event()

    def start(self) -> None:
        self.thread_names.add(threading.current_thread().name)
        self.started = True

    def stop(self) -> None:
        self.thread_names.add(threading.current_thread().name)
        self.stopped = True

    def release(self) -> None:
        """Unblock any call waiting on a scripted delay."""
        self._released.set()

    def _answer(self, kind: str, description: str) -> Outcome:
        self.thread_names.add(threading.current_thread().name)
        self.calls.append((kind, description))
        if (delay := self.delays.get(description)) is not None:
            self._released.wait(delay)
        return self.outcomes.get(description, self.default)

    def perform_action(self, description: str) -> Outcome:
        return self._answer(ACTION, description)

    def check_assertion(self, description: str) -> Outcome:
        return self._answer(ASSERTION, description)

    @property
    def descriptions(self) -> list[str]:
        """Descriptions dispatched so far, in order."""
        return [description for _, description in self.calls]
