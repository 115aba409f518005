"""Abstract collaborators the core depends on."""

from .capability import Capability
from .redactor import Redactor, RedactorMode

__all__ = ["Capability", "Redactor", "RedactorMode"]
