"""Flow notation: parsing, formatting and document loading."""

from .documents import (
    FlowBlock,
    FlowCatalog,
    extract_markdown_blocks,
    load_flows,
    parse_flows,
    split_blocks,
)
from .formatter import flow_as_dict, format_flow, format_flows
from .parser import parse_flow

__all__ = [
    "FlowBlock",
    "FlowCatalog",
    "extract_markdown_blocks",
    "flow_as_dict",
    "format_flow",
    "format_flows",
    "load_flows",
    "parse_flow",
    "parse_flows",
    "split_blocks",
]
