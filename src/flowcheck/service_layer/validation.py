"""The validate-after-each-change loop: resolve and execute flows in turn."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from flowcheck.domain.model import Flow
from flowcheck.domain.result import ValidationResult
from flowcheck.interfaces.capability import Capability

from .executor import StepExecutor
from .resolver import Decider, resolve

logger = logging.getLogger(__name__)

CapabilityFactory = Callable[[], Capability]


@dataclass(frozen=True)
class ValidationReport:
    """Results of validating a batch of flows."""

    results: tuple[ValidationResult, ...]
    not_run: tuple[str, ...] = field(default=())

    @property
    def passed(self) -> bool:
        """True when every flow ran and passed."""
        return not self.not_run and all(result.passed for result in self.results)

    @property
    def failed(self) -> tuple[ValidationResult, ...]:
        return tuple(result for result in self.results if not result.passed)


def validate_flows(
    flows: Sequence[Flow],
    decide: Decider,
    executor: StepExecutor,
    capability_factory: CapabilityFactory,
    *,
    halt_on_failure: bool = True,
) -> ValidationReport:
    """Validate *flows* one after another.

    Each flow is resolved with *decide* and executed against a fresh
    capability from *capability_factory*, so flows share no driver state.
    With *halt_on_failure* the loop stops at the first failed flow and the
    remaining flow names are reported as not run: a failing journey must be
    fixed before anything else is checked.

    Every flow is resolved before the first one is executed, so an
    unresolvable flow stops the batch before the application is touched.

    Raises:
        ResolutionError: If any flow cannot be resolved. Nothing is executed.
    """
    paths = [resolve(flow, decide) for flow in flows]
    results: list[ValidationResult] = []
    for index, (flow, path) in enumerate(zip(flows, paths)):
        logger.debug("Validating flow %r (%d steps on path)", flow.name, len(path))
        result = executor.execute(flow, path, capability_factory())
        results.append(result)
        if halt_on_failure and not result.passed:
            not_run = tuple(remaining.name for remaining in flows[index + 1 :])
            if not_run:
                logger.warning(
                    "Flow %r failed; halting before %d remaining flow(s)",
                    flow.name,
                    len(not_run),
                )
            return ValidationReport(tuple(results), not_run)
    return ValidationReport(tuple(results))
