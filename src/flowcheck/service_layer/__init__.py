"""Resolution, execution and the validation loop built on top of them."""

from .deciders import (
    LabelPreference,
    chain,
    first_branch,
    no_decision,
    prompt_for_branch,
)
from .executor import StepExecutor
from .resolver import Decider, resolve
from .validation import ValidationReport, validate_flows

__all__ = [
    "Decider",
    "LabelPreference",
    "StepExecutor",
    "ValidationReport",
    "chain",
    "first_branch",
    "no_decision",
    "prompt_for_branch",
    "resolve",
    "validate_flows",
]
