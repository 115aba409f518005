"""Concrete capabilities: browser (Playwright), HTTP (httpx) and scripted."""

from .browser import BrowserCapability
from .http import HttpCapability
from .scripted import ScriptedCapability

__all__ = ["BrowserCapability", "HttpCapability", "ScriptedCapability"]
