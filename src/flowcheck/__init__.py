"""FLOWCHECK

Validates application changes against real user flows. Flows are written in a
small arrow notation, resolved into the path actually exercised, and executed
step by step against a browser or an HTTP API.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
