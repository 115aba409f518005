"""Configuration utilities for FLOWCHECK.

This module centralizes the environment variables the drivers read and their
defaults. The CLI exposes the same settings as options.
"""

import math
import os

BASE_URL_ENV = "FLOWCHECK_BASE_URL"
STEP_TIMEOUT_ENV = "FLOWCHECK_STEP_TIMEOUT"
HEADLESS_ENV = "FLOWCHECK_HEADLESS"

DEFAULT_STEP_TIMEOUT = 30.0
FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class BaseUrlNotSetError(Exception):
    """Raised when the FLOWCHECK_BASE_URL environment variable is not set."""


class InvalidTimeoutError(ValueError):
    """Raised when a step timeout is not a positive, finite number of seconds."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"Step timeout must be a positive, finite number of seconds, got {raw!r}.")
        self.raw = raw


def get_base_url() -> str:
    """Get the base URL of the system under test from the environment.

    Returns:
        The value of the `FLOWCHECK_BASE_URL` environment variable.

    Raises:
        BaseUrlNotSetError: If `FLOWCHECK_BASE_URL` is not set.
    """
    if not (url := os.environ.get(BASE_URL_ENV)):
        raise BaseUrlNotSetError
    return url


def parse_timeout(raw: str) -> float:
    """Parse a timeout in seconds.

    Raises:
        InvalidTimeoutError: If *raw* is not a positive, finite number.
    """
    try:
        value = float(raw)
    except ValueError as e:
        raise InvalidTimeoutError(raw) from e
    if not math.isfinite(value) or value <= 0:
        raise InvalidTimeoutError(raw)
    return value


def get_step_timeout() -> float:
    """Per-step timeout from `FLOWCHECK_STEP_TIMEOUT`, default 30 seconds."""
    if raw := os.environ.get(STEP_TIMEOUT_ENV):
        return parse_timeout(raw)
    return DEFAULT_STEP_TIMEOUT


def get_headless() -> bool:
    """Whether the browser driver runs headless; `FLOWCHECK_HEADLESS=0` disables it."""
    return os.environ.get(HEADLESS_ENV, "1").strip().lower() not in FALSE_VALUES
