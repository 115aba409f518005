"""Small phrase vocabulary shared by the capability adapters.

Step descriptions are free text. Adapters recognise a handful of phrasings by
their leading verb and pull out quoted arguments and routes; anything else is
reported as an unsupported step.
"""

from __future__ import annotations

import re

QUOTED_PATTERN = re.compile(r"[\"“”]([^\"“”]*)[\"“”]")
ROUTE_PATTERN = re.compile(r"(?<![\w/])(https?://\S+|/[\w\-./%?=&~]*)")
STATUS_PATTERN = re.compile(r"\b([1-5]\d\d)\b")
HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")
REQUEST_PATTERN = re.compile(
    rf"\b(?P<method>{'|'.join(HTTP_METHODS)})\s+(?P<target>https?://\S+|/\S*)"
    r"(?:\s+with\s+(?:body\s+)?(?P<body>.+))?"
)
HOME_WORDS = ("home page", "homepage", "landing page", "start page")


def quoted(description: str) -> list[str]:
    """All double-quoted arguments of a description, straight or curly quotes."""
    return QUOTED_PATTERN.findall(description)


def unquoted(description: str) -> str:
    """The description with quoted arguments removed, lower-cased."""
    return QUOTED_PATTERN.sub(" ", description).lower()


def first_word(description: str) -> str:
    """The lower-cased leading word, or an empty string."""
    words = description.strip().split(maxsplit=1)
    return words[0].lower().strip(":,") if words else ""


def route(description: str) -> str | None:
    """The first route (``/path`` or absolute URL) outside quotes, if any.

    Descriptions that mention the home page map to ``/``.
    """
    bare = QUOTED_PATTERN.sub(" ", description)
    if match := ROUTE_PATTERN.search(bare):
        return match.group(1).rstrip(".,;")
    if any(word in bare.lower() for word in HOME_WORDS):
        return "/"
    return None


def status_code(description: str) -> int | None:
    """The first three-digit HTTP status code in a description."""
    if match := STATUS_PATTERN.search(QUOTED_PATTERN.sub(" ", description)):
        return int(match.group(1))
    return None


def unsupported(description: str) -> str:
    """Standard failure reason for descriptions no adapter understands."""
    return f"unsupported step: {description}"
