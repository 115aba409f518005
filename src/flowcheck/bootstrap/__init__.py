"""Application wiring."""

from .bootstrap import AppContainer, Driver, bootstrap, build_capability_factory

__all__ = ["AppContainer", "Driver", "bootstrap", "build_capability_factory"]
