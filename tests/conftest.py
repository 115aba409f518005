"""Global pytest fixtures for FLOWCHECK.

Also marks every test with the name of the top-level directory it lives in
(``unit``, ``contract``, ``integration``, ``functional`` or ``e2e``), unless
the test already carries that marker, so ``pytest -m unit`` selects by tier.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from flowcheck.domain.model import Branch, Flow, Step
from flowcheck.notation import parse_flow

# pylint: disable=unused-argument, redefined-outer-name

TESTS_ROOT = Path(__file__).parent.resolve()
TIER_MARKERS = ("unit", "contract", "integration", "functional", "e2e")


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add the default tier mark to items according to their directory."""
    for item in items:
        try:
            relative = item.path.resolve().relative_to(TESTS_ROOT)
        except ValueError:
            continue
        tier = relative.parts[0]
        if tier not in TIER_MARKERS:
            continue
        if not any(marker.name == tier for marker in item.iter_markers()):
            item.add_marker(getattr(pytest.mark, tier))


CREATE_PROJECT_TEXT = (
    "Flow: Create Project\n"
    "Navigate to home page\n"
    '  → Click "Create Project" button\n'
    "  → Verify project page appears\n"
)

SAVE_PROJECT_TEXT = """\
Flow: Save Project
  → Navigate to /projects/new
  → Fill in "Name" with "Demo"
  → Click "Save"
    If successful:
      → Verify "Demo" appears
      → Verify URL contains "/projects/"
    If error:
      → Verify "Name is required" appears
  → Click "Logout"
"""


@pytest.fixture
def create_project_text() -> str:
    """A flat three-step flow whose first step has no arrow."""
    return CREATE_PROJECT_TEXT


@pytest.fixture
def save_project_text() -> str:
    """A flow whose third step branches on success or error."""
    return SAVE_PROJECT_TEXT


@pytest.fixture
def create_project_flow() -> Flow:
    return parse_flow(CREATE_PROJECT_TEXT)


@pytest.fixture
def save_project_flow() -> Flow:
    return parse_flow(SAVE_PROJECT_TEXT)


@pytest.fixture
def branching_step() -> Step:
    """A step with two branches, built without the parser."""
    return Step.from_description(
        'Click "Save"',
        (
            Branch("If successful", (Step.from_description('Verify "Demo" appears'),)),
            Branch(
                "If error",
                (
                    Step.from_description('Verify "Name is required" appears'),
                    Step.from_description('Click "Dismiss"'),
                ),
            ),
        ),
    )


@pytest.fixture
def write_flow_file(tmp_path: Path):
    """Factory writing *text* to a file under ``tmp_path`` and returning its path."""

    def write(text: str, name: str = "flows.flow") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return write
