"""HTTP capability for backend flows, built on httpx.

Actions send one request each and remember the response; assertions inspect
the most recent response.

Actions
- ``POST /api/projects with {"name": "Demo"}`` (any of GET, POST, PUT, PATCH,
  DELETE, HEAD, OPTIONS followed by a route or absolute URL; a ``with`` body
  is sent as JSON when it parses as JSON, otherwise as text)

Assertions
- ``Expect 201`` / ``Verify status is 404`` (any three-digit status code)
- ``Verify response contains "Demo"``
- ``Verify field "data.id" exists`` / ``Verify field "name" equals "Demo"``
  (dotted paths, numeric parts index lists)

A request that reaches the server always passes; status codes are checked by
assertions. httpx timeouts report ``TIMED_OUT``, other transport errors
``FAILED``. URLs and headers are logged through a `Redactor`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from flowcheck.adapters.redactor import Redactor as RegexRedactor
from flowcheck.domain.outcome import Outcome
from flowcheck.interfaces.capability import Capability
from flowcheck.interfaces.redactor import Redactor

from . import phrases

logger = logging.getLogger(__name__)

_MISSING = object()


def _lookup(data: Any, path: str) -> Any:
    """Follow a dotted *path* through dicts and lists; `_MISSING` if absent."""
    current = data
    for part in path.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return _MISSING
    return current


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


class HttpCapability(Capability):
    """Capability issuing HTTP requests against a base URL.

    Args:
        base_url: Root URL that relative routes are joined to.
        headers: Headers sent with every request (e.g. ``Authorization``).
        timeout: httpx timeout in seconds for each request.
        redactor: Sanitizes URLs and headers before they are logged.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in
            tests.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float = 10.0,
        redactor: Redactor | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.headers = dict(headers or {})
        self.timeout = timeout
        self.redactor = redactor or RegexRedactor()
        self._transport = transport
        self._client: httpx.Client | None = None
        self.last_response: httpx.Response | None = None

    # --- Lifecycle ---

    def start(self) -> None:
        if self._client is not None:
            return
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        logger.debug(
            "HTTP driver ready: base_url=%s, headers=%s",
            self.redactor.sanitize(self.base_url),
            [self.redactor.sanitize(f"{k}: {v}") for k, v in self.headers.items()],
        )

    def stop(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self.start()
        assert self._client is not None
        return self._client

    # --- Steps ---

    def perform_action(self, description: str) -> Outcome:
        if not (match := phrases.REQUEST_PATTERN.search(description)):
            return Outcome.failed(phrases.unsupported(description))

        method, target = match.group("method"), match.group("target")
        kwargs: dict[str, Any] = {}
        if body := match.group("body"):
            try:
                kwargs["json"] = json.loads(body)
            except ValueError:
                kwargs["content"] = body.strip().strip("\"“”")

        try:
            response = self.client.request(method, target, **kwargs)
        except httpx.TimeoutException as exc:
            return Outcome.timed_out(f"{method} {target} timed out: {exc}")
        except httpx.HTTPError as exc:
            return Outcome.failed(f"{method} {target} failed: {exc}")

        logger.debug(
            "%s %s -> %d",
            method,
            self.redactor.sanitize(str(response.request.url)),
            response.status_code,
        )
        self.last_response = response
        return Outcome.passed()

    def check_assertion(self, description: str) -> Outcome:
        response = self.last_response
        if response is None:
            return Outcome.failed("no request has been sent yet")

        words = phrases.unquoted(description)
        args = phrases.quoted(description)

        if "contains" in words and args:
            if args[0] in response.text:
                return Outcome.passed()
            return Outcome.failed(f"response does not contain {args[0]!r}")

        if "field" in words and args:
            return self._check_field(response, args, words)

        if (expected := phrases.status_code(description)) is not None:
            if response.status_code == expected:
                return Outcome.passed()
            return Outcome.failed(
                f"expected status {expected}, got {response.status_code}"
            )

        return Outcome.failed(phrases.unsupported(description))

    @staticmethod
    def _check_field(response: httpx.Response, args: list[str], words: str) -> Outcome:
        try:
            data = response.json()
        except ValueError:
            return Outcome.failed("response is not JSON")

        value = _lookup(data, args[0])
        if value is _MISSING:
            return Outcome.failed(f"field {args[0]!r} not found in response")
        if len(args) > 1 and ("equal" in words or " is " in f" {words} "):
            if _as_text(value) == args[1]:
                return Outcome.passed()
            return Outcome.failed(f"field {args[0]!r} is {_as_text(value)!r}, not {args[1]!r}")
        return Outcome.passed()
