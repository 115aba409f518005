"""Regex-based redactor for sanitizing secrets before they reach the logs.

Masks sensitive values found in target URLs (``user:pass@``), query strings,
``Authorization``-style header lines, bearer tokens and free-form
``key: value`` fragments. Strict mode also hides user names.
"""

import re

from flowcheck.interfaces import redactor
from flowcheck.interfaces.redactor import RedactorMode

# pylint: disable=too-few-public-methods

PLACEHOLDER = "***"
SECRET_KEYWORDS = [
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "api_key",
    "access_token",
    "refresh_token",
    "id_token",
    "session",
    "cookie",
    "authorization",
    "signature",
]
USER_KEYWORDS = ["user", "username", "login", "email"]
AUTH_SCHEMES = r"(?:Bearer|Basic|Token)"


def _alternation(keywords: list[str]) -> str:
    # "api_key" also matches "api-key" and "apikey"
    return "|".join(kw.replace("_", "[-_]?") for kw in keywords)


def _patterns(keywords: list[str]) -> tuple[re.Pattern[str], re.Pattern[str]]:
    words = _alternation(keywords)
    query = re.compile(rf"([?&;](?:{words})=)[^&#\s;]*", re.IGNORECASE)
    key_value = re.compile(
        rf"(\b(?:{words})\s*:\s*)(?:{AUTH_SCHEMES}\s+)?\S+", re.IGNORECASE
    )
    return query, key_value


LENIENT_PATTERNS = _patterns(SECRET_KEYWORDS)
STRICT_PATTERNS = _patterns(SECRET_KEYWORDS + USER_KEYWORDS)
BEARER_PATTERN = re.compile(rf"\b({AUTH_SCHEMES})\s+[\w\-.~+/=]+", re.IGNORECASE)
URL_CREDENTIALS_PATTERN = re.compile(r"(?<=://)([^:@/\s]+):([^@/\s]*)@")


class Redactor(redactor.Redactor):
    """Redactor implementation using regex-based sanitization."""

    def __init__(self, mode: RedactorMode = RedactorMode.LENIENT) -> None:
        self._mode = mode

    def _credentials(self, match: re.Match[str]) -> str:
        user, password = match.group(1), match.group(2)
        if self._mode is RedactorMode.STRICT:
            user = PLACEHOLDER
        return f"{user}:{PLACEHOLDER if password else ''}@"

    def sanitize(self, text: str) -> str:
        query, key_value = (
            STRICT_PATTERNS if self._mode is RedactorMode.STRICT else LENIENT_PATTERNS
        )

        # 1) scheme://user:pass@ -> scheme://user:***@ (strict: ***:***@)
        sanitized = URL_CREDENTIALS_PATTERN.sub(self._credentials, str(text))

        # 2) "Authorization: Bearer abc", "token: abc" -> "Authorization: ***"
        sanitized = key_value.sub(rf"\1{PLACEHOLDER}", sanitized)

        # 3) stray "Bearer abc" outside a header line
        sanitized = BEARER_PATTERN.sub(rf"\1 {PLACEHOLDER}", sanitized)

        # 4) ?token=abc&... -> ?token=***&...
        return query.sub(rf"\1{PLACEHOLDER}", sanitized)
