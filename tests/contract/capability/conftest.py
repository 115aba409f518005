"""Fixtures for capability contract tests."""

from collections.abc import Iterable

import httpx
import pytest

from flowcheck.adapters.capabilities import HttpCapability, ScriptedCapability
from flowcheck.interfaces.capability import Capability


def _echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"path": request.url.path, "ok": True})


@pytest.fixture(params=["scripted", "http"])
def capability(request: pytest.FixtureRequest) -> Iterable[Capability]:
    """Return a fresh, unstarted Capability for the requested driver.

    Supported params:
      - `"scripted"` → ScriptedCapability (the dry-run driver)
      - `"http"` → HttpCapability over an ``httpx.MockTransport``

    The browser driver needs a real Chromium and is covered by the
    integration suite instead.
    """
    match request.param:
        case "scripted":
            cap: Capability = ScriptedCapability()
        case "http":
            cap = HttpCapability("http://testserver", transport=httpx.MockTransport(_echo))
        case _:
            raise ValueError(f"unknown capability type: {request.param}")
    yield cap
    cap.stop()
