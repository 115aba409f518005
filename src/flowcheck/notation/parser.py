"""Parser for the arrow notation used to write user flows.

A flow block looks like this:

    Flow: Create Project
    Navigate to home page
      → Click "Create Project" button
      → Fill in "Name" with "Demo"
      → Click "Save"
        If successful:
          → Verify "Demo" appears
        If error:
          → Verify "Name is required" appears

Rules
-----
- The first non-blank line is the header ``Flow: <name>``.
- Step lines start with ``→`` (or ``->``). The first line of a sequence may
  also be a bare description ("Navigate to home page" above).
- The first step after a sequence's lead fixes the indentation of the rest of
  that sequence. It may sit at the lead's level or deeper.
- ``If <outcome>:`` lines, indented deeper than a step, open branches of that
  step. Sibling labels share one indentation and their bodies are indented
  deeper still. A body ends when indentation returns to the label's level.
- Indentation is counted in spaces; tabs are rejected.

Parsing is a pure transformation: no I/O, no logging.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from flowcheck.domain.errors import ParseError, ParseErrorKind
from flowcheck.domain.model import LABEL_PATTERN, Branch, Flow, Step

HEADER_PREFIX = "Flow:"
ARROW = "→"
ASCII_ARROW = "->"
ARROWS = (ARROW, ASCII_ARROW)


class _LineKind(Enum):
    ARROW = "arrow"
    BARE = "bare"
    LABEL = "label"


@dataclass(frozen=True)
class _Line:
    number: int
    indent: int
    kind: _LineKind
    text: str


def _classify(number: int, raw: str) -> _Line:
    stripped = raw.strip()
    leading = raw[: len(raw) - len(raw.lstrip())]
    if "\t" in leading:
        raise ParseError(
            ParseErrorKind.MALFORMED_LINE, "indent with spaces, not tabs", number
        )
    if stripped.startswith(HEADER_PREFIX):
        raise ParseError(
            ParseErrorKind.MALFORMED_LINE,
            "unexpected flow header inside a flow body",
            number,
        )
    for arrow in ARROWS:
        if stripped.startswith(arrow):
            description = stripped[len(arrow) :].strip()
            if not description:
                raise ParseError(
                    ParseErrorKind.MALFORMED_LINE, "arrow without a description", number
                )
            return _Line(number, len(leading), _LineKind.ARROW, description)
    if match := LABEL_PATTERN.match(stripped):
        return _Line(number, len(leading), _LineKind.LABEL, match.group("label"))
    return _Line(number, len(leading), _LineKind.BARE, stripped)


class _BodyParser:
    """Recursive-descent parser over the classified body lines of one flow."""

    def __init__(self, lines: list[_Line]) -> None:
        self._lines = lines
        self._pos = 0

    def _peek(self) -> _Line | None:
        if self._pos < len(self._lines):
            return self._lines[self._pos]
        return None

    def parse(self) -> tuple[Step, ...]:
        steps = self._sequence(parent_indent=-1)
        # parent_indent=-1 accepts every line, so nothing can be left over
        assert self._peek() is None
        return steps

    def _sequence(self, parent_indent: int) -> tuple[Step, ...]:
        lead = self._lines[self._pos]
        if lead.kind is _LineKind.LABEL:
            raise ParseError(
                ParseErrorKind.BAD_NESTING,
                f"'{lead.text}:' has no step to branch from",
                lead.number,
            )
        self._pos += 1
        steps = [self._step(lead)]
        step_indent: int | None = None

        while (line := self._peek()) is not None and line.indent > parent_indent:
            if line.kind is _LineKind.LABEL:
                raise ParseError(
                    ParseErrorKind.BAD_NESTING,
                    f"'{line.text}:' must be indented deeper than the step it belongs to",
                    line.number,
                )
            if step_indent is None:
                if line.indent < lead.indent:
                    raise ParseError(
                        ParseErrorKind.BAD_NESTING,
                        "line dedents past the start of its sequence",
                        line.number,
                    )
                step_indent = line.indent
            elif line.indent != step_indent:
                raise ParseError(
                    ParseErrorKind.BAD_NESTING,
                    f"expected indentation of {step_indent} spaces, found {line.indent}",
                    line.number,
                )
            if line.kind is _LineKind.BARE:
                raise ParseError(
                    ParseErrorKind.MALFORMED_LINE,
                    f"step must start with '{ARROW}': {line.text!r}",
                    line.number,
                )
            self._pos += 1
            steps.append(self._step(line))

        return tuple(steps)

    def _step(self, line: _Line) -> Step:
        branches: list[Branch] = []
        label_indent: int | None = None

        while (
            (label := self._peek()) is not None
            and label.kind is _LineKind.LABEL
            and label.indent > line.indent
        ):
            if label_indent is None:
                label_indent = label.indent
            elif label.indent != label_indent:
                raise ParseError(
                    ParseErrorKind.BAD_NESTING,
                    f"'{label.text}:' is not aligned with its sibling branches",
                    label.number,
                )
            self._pos += 1
            body = self._peek()
            if body is None or body.indent <= label.indent:
                raise ParseError(
                    ParseErrorKind.BAD_NESTING,
                    f"'{label.text}:' has no nested steps",
                    label.number,
                )
            branches.append(Branch(label.text, self._sequence(label.indent)))

        return Step.from_description(line.text, tuple(branches))


def parse_flow(text: str, *, first_line: int = 1) -> Flow:
    """Parse one flow block into a `Flow`.

    Args:
        text: The block text, starting with its ``Flow:`` header. Leading blank
            lines are allowed.
        first_line: Line number of the block's first line inside a larger
            document, used for error messages.

    Returns:
        Flow: The parsed flow.

    Raises:
        ParseError: ``MISSING_HEADER`` if the first non-blank line is not a
            ``Flow: <name>`` header, ``EMPTY_FLOW`` if no step follows it,
            ``BAD_NESTING`` for indentation that matches no open sequence or
            label, ``MALFORMED_LINE`` for tabs, empty arrows, bare
            continuation lines or a second header.
    """
    numbered = list(enumerate(text.splitlines(), start=first_line))
    header_at = next((i for i, (_, raw) in enumerate(numbered) if raw.strip()), None)
    if header_at is None:
        raise ParseError(ParseErrorKind.MISSING_HEADER, "no flow header found")

    number, raw = numbered[header_at]
    header = raw.strip()
    if not header.startswith(HEADER_PREFIX):
        raise ParseError(
            ParseErrorKind.MISSING_HEADER,
            f"expected '{HEADER_PREFIX} <name>', found {header!r}",
            number,
        )
    if not (name := header[len(HEADER_PREFIX) :].strip()):
        raise ParseError(ParseErrorKind.MISSING_HEADER, "flow header has no name", number)

    lines = [_classify(n, body) for n, body in numbered[header_at + 1 :] if body.strip()]
    if not lines:
        raise ParseError(
            ParseErrorKind.EMPTY_FLOW, f"flow '{name}' has no steps", number
        )
    return Flow(name, _BodyParser(lines).parse())
