"""Wire the executor and a capability factory for a named driver."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from flowcheck import config
from flowcheck.adapters.capabilities import (
    BrowserCapability,
    HttpCapability,
    ScriptedCapability,
)
from flowcheck.adapters.redactor import Redactor as RegexRedactor
from flowcheck.interfaces.capability import Capability
from flowcheck.interfaces.redactor import Redactor, RedactorMode
from flowcheck.service_layer.executor import StepExecutor
from flowcheck.service_layer.validation import CapabilityFactory

EXECUTOR_GRACE = 5.0


class Driver(Enum):
    """Names of the capability adapters selectable from the CLI."""

    BROWSER = "browser"
    HTTP = "http"
    DRY_RUN = "dry-run"

    @property
    def needs_base_url(self) -> bool:
        return self is not Driver.DRY_RUN


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring constants."""

    executor: StepExecutor
    capability_factory: CapabilityFactory
    driver: Driver


def build_capability_factory(
    driver: Driver,
    *,
    base_url: str | None,
    headers: Mapping[str, str] | None = None,
    timeout: float = config.DEFAULT_STEP_TIMEOUT,
    headless: bool = True,
    redactor: Redactor | None = None,
) -> CapabilityFactory:
    """Return a factory producing a fresh capability per flow.

    Raises:
        config.BaseUrlNotSetError: If the driver needs a base URL and none is
            given.
    """
    redactor = redactor or RegexRedactor()
    if driver.needs_base_url and not base_url:
        raise config.BaseUrlNotSetError

    def factory() -> Capability:
        match driver:
            case Driver.BROWSER:
                assert base_url is not None
                return BrowserCapability(
                    base_url, headless=headless, timeout=timeout, redactor=redactor
                )
            case Driver.HTTP:
                assert base_url is not None
                return HttpCapability(
                    base_url, headers=headers, timeout=timeout, redactor=redactor
                )
            case Driver.DRY_RUN:
                return ScriptedCapability()
            case _:  # pragma: no cover
                raise ValueError(f"unknown driver: {driver}")

    return factory


def bootstrap(  # pylint: disable=too-many-arguments
    driver: Driver,
    *,
    base_url: str | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: float | None = None,
    headless: bool | None = None,
    redactor_mode: RedactorMode = RedactorMode.LENIENT,
) -> AppContainer:
    """Build the executor and capability factory, filling gaps from the environment.

    Arguments left as None fall back to `flowcheck.config`. The executor waits
    `EXECUTOR_GRACE` seconds longer than the driver's own timeout, so the
    driver normally gives up (and reports why) before the executor would.

    Raises:
        config.BaseUrlNotSetError: If the driver needs a base URL and neither
            the argument nor `FLOWCHECK_BASE_URL` provides one.
        config.InvalidTimeoutError: If `FLOWCHECK_STEP_TIMEOUT` is malformed.
    """
    if base_url is None and driver.needs_base_url:
        base_url = config.get_base_url()
    if timeout is None:
        timeout = config.get_step_timeout()
    if headless is None:
        headless = config.get_headless()

    factory = build_capability_factory(
        driver,
        base_url=base_url,
        headers=headers,
        timeout=timeout,
        headless=headless,
        redactor=RegexRedactor(redactor_mode),
    )
    return AppContainer(
        executor=StepExecutor(timeout=timeout + EXECUTOR_GRACE),
        capability_factory=factory,
        driver=driver,
    )
