"""Interface for the drivers that actually exercise the system under test.

A capability receives step descriptions verbatim and decides on its own how to
turn them into browser interactions, HTTP requests, or anything else. The
executor only sequences calls and records the outcomes.
"""

import abc

from flowcheck.domain.outcome import Outcome


class Capability(abc.ABC):
    """Performs actions and checks assertions described in natural language.

    Implementations must report problems through the returned `Outcome`
    (``FAILED`` or ``TIMED_OUT``) rather than by raising. `start` and `stop`
    are called by the executor on the same thread as every step call, which
    lets thread-affine drivers keep their resources in one place.
    """

    def start(self) -> None:
        """Acquire resources before the first step. Default: nothing to do."""

    def stop(self) -> None:
        """Release resources after the last step. Default: nothing to do."""

    @abc.abstractmethod
    def perform_action(self, description: str) -> Outcome:
        """Carry out an action step.

        Args:
            description: The step text, e.g. ``Click "Save"``.

        Returns:
            Outcome: ``PASSED`` if the action happened, ``FAILED`` with a
            reason otherwise, ``TIMED_OUT`` if the driver gave up waiting.
        """

    @abc.abstractmethod
    def check_assertion(self, description: str) -> Outcome:
        """Check an assertion step.

        Args:
            description: The step text, e.g. ``Verify "Demo" appears``.

        Returns:
            Outcome: ``PASSED`` if the assertion holds, ``FAILED`` with a
            reason otherwise, ``TIMED_OUT`` if the driver gave up waiting.
        """
