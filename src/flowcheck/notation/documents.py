"""Loading flows from documents that hold more than one flow block.

Flows usually live in plain notation files (one or many ``Flow:`` blocks) or
inside fenced code blocks of Markdown guides. This module splits such
documents into blocks, parses each block, and indexes the result by flow name.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from flowcheck.domain.errors import (
    DuplicateFlowError,
    FlowNotFoundError,
    ParseError,
    ParseErrorKind,
)
from flowcheck.domain.model import Flow

from .parser import HEADER_PREFIX, parse_flow

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})
FENCE_PATTERN = re.compile(r"^\s*(?P<fence>`{3,}|~{3,})")


@dataclass(frozen=True)
class FlowBlock:
    """Raw text of one flow block and the document line it starts on."""

    first_line: int
    text: str


def split_blocks(text: str, *, first_line: int = 1) -> list[FlowBlock]:
    """Cut a notation document at every ``Flow:`` header.

    Args:
        text: Document text.
        first_line: Line number of the text's first line in its document.

    Returns:
        list[FlowBlock]: One block per header, in document order. Empty when
        the text is blank.

    Raises:
        ParseError: ``MISSING_HEADER`` if non-blank text precedes the first
            header.
    """
    blocks: list[FlowBlock] = []
    current: list[str] = []
    start = first_line
    for number, raw in enumerate(text.splitlines(), start=first_line):
        if raw.strip().startswith(HEADER_PREFIX):
            if current:
                blocks.append(FlowBlock(start, "\n".join(current)))
            current, start = [raw], number
        elif current:
            current.append(raw)
        elif raw.strip():
            raise ParseError(
                ParseErrorKind.MISSING_HEADER,
                f"expected '{HEADER_PREFIX} <name>', found {raw.strip()!r}",
                number,
            )
    if current:
        blocks.append(FlowBlock(start, "\n".join(current)))
    return blocks


def parse_flows(text: str) -> list[Flow]:
    """Parse every flow block of a plain notation document."""
    return [parse_flow(block.text, first_line=block.first_line) for block in split_blocks(text)]


def _closes(line: str, fence: str) -> bool:
    stripped = line.strip()
    return len(stripped) >= len(fence) and set(stripped) == {fence[0]}


def extract_markdown_blocks(text: str) -> list[FlowBlock]:
    """Return the flow blocks found in fenced code blocks of a Markdown text.

    Fences opened with backticks or tildes are recognised; a fence closes on a
    line made of the same character, at least as long. Code blocks whose first
    non-blank line is not a ``Flow:`` header are ignored. An unterminated fence
    runs to the end of the document, as in CommonMark.
    """
    blocks: list[FlowBlock] = []
    lines = text.splitlines()
    index = 0
    while index < len(lines):
        opening = FENCE_PATTERN.match(lines[index])
        index += 1
        if not opening:
            continue
        fence = opening.group("fence")
        body_start = index
        while index < len(lines) and not _closes(lines[index], fence):
            index += 1
        body = lines[body_start:index]
        index += 1  # skip the closing fence
        first = next((line for line in body if line.strip()), "")
        if first.strip().startswith(HEADER_PREFIX):
            blocks.extend(split_blocks("\n".join(body), first_line=body_start + 1))
    return blocks


def load_flows(path: Path) -> list[Flow]:
    """Read and parse all flows of a file.

    Markdown files (``.md``/``.markdown``) contribute the flow blocks of their
    fenced code blocks; any other file is parsed as plain notation.

    Raises:
        ParseError: If any block is malformed, or ``BAD_ENCODING`` when the
            file is not UTF-8 text.
        OSError: If the file cannot be read.
    """
    raw = path.read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(
            ParseErrorKind.BAD_ENCODING,
            f"not valid UTF-8 (byte 0x{raw[e.start]:02x})",
            raw.count(b"\n", 0, e.start) + 1,
        ) from e
    if path.suffix.lower() in MARKDOWN_SUFFIXES:
        blocks = extract_markdown_blocks(text)
    else:
        blocks = split_blocks(text)
    flows = [parse_flow(block.text, first_line=block.first_line) for block in blocks]
    logger.debug("Loaded %d flow(s) from %s", len(flows), path)
    return flows


class FlowCatalog:
    """Ordered collection of flows indexed by name."""

    def __init__(self, flows: Iterable[Flow] = ()) -> None:
        self._flows: dict[str, Flow] = {}
        for flow in flows:
            self.add(flow)

    @classmethod
    def from_paths(cls, paths: Iterable[Path]) -> FlowCatalog:
        """Build a catalog from every flow found in *paths*.

        Raises:
            DuplicateFlowError: If two files (or blocks) define the same name.
            ParseError: If a file holds a malformed block.
        """
        catalog = cls()
        for path in paths:
            for flow in load_flows(path):
                catalog.add(flow)
        return catalog

    def add(self, flow: Flow) -> None:
        """Add a flow.

        Raises:
            DuplicateFlowError: If a flow with the same name is present.
        """
        if flow.name in self._flows:
            raise DuplicateFlowError(flow.name)
        self._flows[flow.name] = flow

    def get(self, name: str) -> Flow:
        """Return the flow called *name*.

        Raises:
            FlowNotFoundError: If no such flow exists.
        """
        try:
            return self._flows[name]
        except KeyError as e:
            raise FlowNotFoundError(name) from e

    def select(self, names: Sequence[str]) -> list[Flow]:
        """Return the named flows in the requested order, or all flows if empty."""
        if not names:
            return list(self._flows.values())
        return [self.get(name) for name in names]

    @property
    def names(self) -> list[str]:
        return list(self._flows)

    def __iter__(self) -> Iterator[Flow]:
        return iter(self._flows.values())

    def __len__(self) -> int:
        return len(self._flows)

    def __contains__(self, name: object) -> bool:
        return name in self._flows
