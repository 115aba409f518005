"""The interpreter exits promptly after a step times out.

A timed-out driver call keeps running on its worker thread; the process must
still finish as soon as the report is done.
"""

import os
import subprocess
import sys
import time
from pathlib import Path
from textwrap import dedent

import flowcheck

SCRIPT = dedent(
    """\
    from flowcheck.adapters.capabilities import ScriptedCapability
    from flowcheck.domain.outcome import OutcomeStatus
    from flowcheck.notation import parse_flow
    from flowcheck.service_layer import StepExecutor, first_branch, resolve

    flow = parse_flow("Flow: Hang\\n  → Click a\\n  → Click b\\n")
    capability = ScriptedCapability(delays={"Click a": 30})
    result = StepExecutor(timeout=0.3).execute(flow, resolve(flow, first_branch), capability)
    assert result.outcomes[0].outcome.status is OutcomeStatus.TIMED_OUT
    assert result.outcomes[1].outcome.status is OutcomeStatus.SKIPPED
    print("reported")
    """
)


def test_process_exits_after_step_timeout():
    src = str(Path(flowcheck.__file__).resolve().parents[1])
    paths = [src, *filter(None, [os.environ.get("PYTHONPATH")])]
    env = {**os.environ, "PYTHONPATH": os.pathsep.join(paths)}
    started = time.monotonic()
    completed = subprocess.run(
        [sys.executable, "-c", SCRIPT],
        env=env,
        capture_output=True,
        text=True,
        timeout=25,
        check=False,
    )
    elapsed = time.monotonic() - started
    assert completed.returncode == 0, completed.stderr
    assert "reported" in completed.stdout
    assert elapsed < 10, f"process took {elapsed:.1f}s to exit after a 0.3s timeout"
