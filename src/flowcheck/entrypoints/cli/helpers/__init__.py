"""CLI helpers for FLOWCHECK.

Option callbacks for logger levels and HTTP headers, and message emitters
that write to stderr with emoji→ASCII fallbacks.
"""

from .messages import error, success, warn
from .option_parsers import parse_headers, parse_log_level

__all__ = ["error", "parse_headers", "parse_log_level", "success", "warn"]
