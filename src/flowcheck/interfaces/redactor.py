"""Interfaces for redacting sensitive values.

This module defines the Redactor interface and the RedactorMode enumeration
used to keep secrets (passwords, tokens, API keys) out of logs when HTTP
requests and target URLs are reported.
"""

import abc
from enum import Enum

# pylint: disable=too-few-public-methods


class RedactorMode(Enum):
    """Enumeration for redactor modes.

    Modes:
    - LENIENT: redact passwords/tokens but keep usernames/ids visible.
    - STRICT: redact passwords/tokens and also usernames/ids.
    """

    LENIENT = "lenient"
    STRICT = "strict"


class Redactor(abc.ABC):
    """Interface for sanitizing sensitive information from strings."""

    _mode: RedactorMode

    @abc.abstractmethod
    def sanitize(self, text: str) -> str:
        """Return a display-safe copy of *text*.

        Args:
            text: A URL, header line or free-form text.

        Returns:
            The text with sensitive values replaced by a placeholder.
        """

    @property
    def mode(self) -> RedactorMode:
        """Return the redaction mode."""
        return self._mode
