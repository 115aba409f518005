"""Sequential execution of a resolved path against a capability."""

from __future__ import annotations

import itertools
import logging
import math
import queue
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from typing import Any

from flowcheck.domain.model import Flow, Step, StepKind
from flowcheck.domain.outcome import Outcome, OutcomeStatus
from flowcheck.domain.result import ValidationResult, ValidationRun, ValidationStatus
from flowcheck.interfaces.capability import Capability

logger = logging.getLogger(__name__)

_worker_ids = itertools.count(1)


class _StepWorker:
    """A daemon thread running submitted calls one at a time.

    Daemon threads do not keep the interpreter alive, so a worker abandoned
    in a hung driver call cannot block process exit.
    """

    def __init__(self) -> None:
        self._calls: queue.SimpleQueue = queue.SimpleQueue()
        self._thread = threading.Thread(
            target=self._serve, name=f"flowcheck-step-{next(_worker_ids)}", daemon=True
        )
        self._thread.start()

    def _serve(self) -> None:
        while (item := self._calls.get()) is not None:
            future, fn, args = item
            if not future.set_running_or_notify_cancel():
                continue
            try:
                future.set_result(fn(*args))
            except BaseException as exc:  # pylint: disable=broad-except
                future.set_exception(exc)

    def submit(self, fn: Callable[..., Any], *args: str) -> Future:
        future: Future = Future()
        self._calls.put((future, fn, args))
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Let the thread exit after its current call; join it unless *wait* is False."""
        self._calls.put(None)
        if wait:
            self._thread.join()


@dataclass(frozen=True)
class _Call:
    value: Any
    failure: Outcome | None
    duration_ms: int
    abandoned: bool  # still running on the worker thread


class StepExecutor:
    """Dispatch each step of a path to a capability and record the outcomes.

    Steps run strictly one after another. All capability calls of one
    execution, including `Capability.start` and `Capability.stop`, happen on
    a single worker thread so that the caller can stop waiting after
    ``timeout`` seconds. The first non-pass outcome fails the run and every
    remaining step is recorded as skipped; capability exceptions are
    recorded as failures, never raised.

    Args:
        timeout: Seconds to wait for each capability call, or None to wait
            indefinitely.

    Note:
        A call that times out cannot be interrupted. Its worker thread is
        abandoned and the capability is not stopped; the thread is a daemon,
        so it does not hold up interpreter exit. A driver reporting a step as
        skipped fails it: only the executor skips steps.
    """

    def __init__(self, timeout: float | None = None) -> None:
        if timeout is not None and not 0 < timeout < math.inf:
            raise ValueError(f"timeout must be positive and finite, got {timeout}")
        self.timeout = timeout

    def execute(
        self, flow: Flow, path: Sequence[Step], capability: Capability
    ) -> ValidationResult:
        """Run *path* (a resolved execution path of *flow*) step by step.

        Returns:
            ValidationResult: One outcome per step of *path*, in order, and the
            final status (``PASSED`` or ``FAILED``).
        """
        run = ValidationRun(flow)
        run.start()
        if not path:
            return run.finish()

        worker = _StepWorker()
        abandoned = False
        try:
            started = self._call(worker, capability.start)
            abandoned = started.abandoned
            for step in path:
                if run.status is ValidationStatus.FAILED:
                    run.record(step, Outcome.skipped())
                elif started.failure is not None:
                    run.record(
                        step,
                        Outcome(
                            started.failure.status,
                            f"driver did not start: {started.failure.reason}",
                        ),
                    )
                else:
                    call = self._call_step(worker, capability, step)
                    abandoned = call.abandoned
                    logger.debug(
                        "Step %r -> %s (%d ms)", step.description, call.value, call.duration_ms
                    )
                    run.record(step, call.value, call.duration_ms)

            if abandoned:
                logger.warning("Driver is still busy after a timeout; not stopping it")
            else:
                stopped = self._call(worker, capability.stop)
                abandoned = stopped.abandoned
                if stopped.failure is not None:
                    logger.warning("Driver did not stop cleanly: %s", stopped.failure.reason)
        finally:
            worker.shutdown(wait=not abandoned)

        result = run.finish()
        logger.info("Flow %r %s", flow.name, result.status.value)
        return result

    def _call_step(
        self, worker: _StepWorker, capability: Capability, step: Step
    ) -> _Call:
        fn = (
            capability.check_assertion
            if step.kind is StepKind.ASSERTION
            else capability.perform_action
        )
        call = self._call(worker, fn, step.description)
        outcome = call.failure or call.value
        if not isinstance(outcome, Outcome):
            outcome = Outcome.failed(f"driver returned {outcome!r} instead of an outcome")
        elif outcome.status is OutcomeStatus.SKIPPED:
            outcome = Outcome.failed("driver skipped the step")
        return _Call(outcome, None, call.duration_ms, call.abandoned)

    def _call(self, worker: _StepWorker, fn: Callable[..., Any], *args: str) -> _Call:
        """Run ``fn(*args)`` on the worker thread and wait up to the timeout."""
        started = time.perf_counter()
        future = worker.submit(fn, *args)

        def elapsed() -> int:
            return int((time.perf_counter() - started) * 1000)

        try:
            value = future.result(timeout=self.timeout)
        except FuturesTimeoutError as exc:
            if future.done():  # the driver itself raised TimeoutError
                return _Call(None, Outcome.timed_out(str(exc) or "timeout"), elapsed(), False)
            return _Call(
                None,
                Outcome.timed_out(f"no response within {self.timeout:g}s"),
                elapsed(),
                True,
            )
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Driver raised in %s", getattr(fn, "__name__", repr(fn)))
            return _Call(None, Outcome.failed(f"{type(exc).__name__}: {exc}"), elapsed(), False)
        return _Call(value, None, elapsed(), False)
