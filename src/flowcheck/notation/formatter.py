"""Render flows back into the canonical arrow notation."""

from __future__ import annotations

from collections.abc import Iterable

from flowcheck.domain.model import Flow, Step

from .parser import ARROW, HEADER_PREFIX

INDENT = "  "


def _render_steps(steps: Iterable[Step], depth: int, out: list[str]) -> None:
    for step in steps:
        out.append(f"{INDENT * depth}{ARROW} {step.description}")
        for branch in step.branches:
            out.append(f"{INDENT * (depth + 1)}{branch.label}:")
            _render_steps(branch.steps, depth + 2, out)


def format_flow(flow: Flow) -> str:
    """Serialize a flow so that ``parse_flow(format_flow(flow)) == flow``.

    Every step is written with an arrow, two spaces deeper than its parent
    label; labels sit two spaces deeper than their step.
    """
    out = [f"{HEADER_PREFIX} {flow.name}"]
    _render_steps(flow.steps, 1, out)
    return "\n".join(out) + "\n"


def format_flows(flows: Iterable[Flow]) -> str:
    """Serialize several flows separated by blank lines."""
    return "\n".join(format_flow(flow) for flow in flows)


def _step_dict(step: Step) -> dict[str, object]:
    node: dict[str, object] = {"kind": step.kind.value, "description": step.description}
    if step.branches:
        node["branches"] = [
            {"label": branch.label, "steps": [_step_dict(s) for s in branch.steps]}
            for branch in step.branches
        ]
    return node


def flow_as_dict(flow: Flow) -> dict[str, object]:
    """Plain-data view of a flow, ready for ``json.dumps``."""
    return {"name": flow.name, "steps": [_step_dict(step) for step in flow.steps]}
