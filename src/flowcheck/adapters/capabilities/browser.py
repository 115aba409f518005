"""Browser capability for web flows, built on Playwright's sync API.

Actions
- ``Navigate to /projects`` / ``Go to the home page`` / ``Open https://...``
- ``Click "Create Project" button`` (``button``/``link`` pick the ARIA role,
  otherwise the element is found by its text)
- ``Fill in "Name" with "Demo"`` / ``Type "Demo" into "Name"``
- ``Select "Admin" from "Role"``
- ``Press "Enter"``

Assertions
- ``Verify "Demo" appears`` (``not``/``disappears`` check it is hidden)
- ``Verify URL contains "/projects"`` / ``Verify redirect to /projects/1``
- ``Verify title contains "Projects"``

Playwright objects are created in `start` and must be used from the same
thread; the executor guarantees that. Playwright timeouts report
``TIMED_OUT``, other Playwright errors ``FAILED``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from urllib.parse import urljoin

from playwright.sync_api import Browser, Page, Playwright, sync_playwright
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from flowcheck.adapters.redactor import Redactor as RegexRedactor
from flowcheck.domain.outcome import Outcome
from flowcheck.interfaces.capability import Capability
from flowcheck.interfaces.redactor import Redactor

from . import phrases

logger = logging.getLogger(__name__)

NAVIGATE_VERBS = frozenset({"navigate", "go", "open", "visit"})
FILL_VERBS = frozenset({"fill", "enter", "type"})
NEGATIONS = (" not ", "disappear", "hidden", "gone")


class BrowserCapability(Capability):
    """Capability driving a Chromium page through Playwright.

    Args:
        base_url: Root URL that relative routes are joined to.
        headless: Launch the browser without a window.
        timeout: Playwright default timeout in seconds for each interaction.
        redactor: Sanitizes URLs before they are logged.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headless: bool = True,
        timeout: float = 10.0,
        redactor: Redactor | None = None,
    ) -> None:
        self.base_url = base_url
        self.headless = headless
        self.timeout = timeout
        self.redactor = redactor or RegexRedactor()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._page: Page | None = None

    # --- Lifecycle ---

    def start(self) -> None:
        if self._page is not None:
            return
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(headless=self.headless)
        context = self._browser.new_context(base_url=self.base_url, ignore_https_errors=True)
        self._page = context.new_page()
        self._page.set_default_timeout(self.timeout * 1000)
        logger.debug(
            "Browser driver ready: base_url=%s, headless=%s",
            self.redactor.sanitize(self.base_url),
            self.headless,
        )

    def stop(self) -> None:
        if self._browser is not None:
            self._browser.close()
        if self._playwright is not None:
            self._playwright.stop()
        self._page = self._browser = self._playwright = None

    @property
    def page(self) -> Page:
        if self._page is None:
            self.start()
        assert self._page is not None
        return self._page

    # --- Steps ---

    def perform_action(self, description: str) -> Outcome:
        verb = phrases.first_word(description)
        args = phrases.quoted(description)
        words = phrases.unquoted(description)

        if verb in NAVIGATE_VERBS:
            return self._guard(description, lambda: self._navigate(description))
        if verb == "click" and args:
            return self._guard(description, lambda: self._click(args[0], words))
        if verb in FILL_VERBS and len(args) >= 2:
            # "Fill in <field> with <value>" vs "Type <value> into <field>"
            field, value = (args[1], args[0]) if verb == "type" else (args[0], args[1])
            return self._guard(description, lambda: self._fill(field, value))
        if verb == "select" and len(args) >= 2:
            return self._guard(
                description,
                lambda: self.page.get_by_label(args[1]).select_option(label=args[0]),
            )
        if verb == "press" and args:
            return self._guard(description, lambda: self.page.keyboard.press(args[0]))
        return Outcome.failed(phrases.unsupported(description))

    def check_assertion(self, description: str) -> Outcome:
        args = phrases.quoted(description)
        words = f" {phrases.unquoted(description)} "

        if "url" in words or "redirect" in words:
            expected = args[0] if args else phrases.route(description)
            if expected is None:
                return Outcome.failed(phrases.unsupported(description))
            return self._expect_text("URL", self.page.url, expected)
        if "title" in words and args:
            return self._guard(
                description, lambda: self._expect_text("title", self.page.title(), args[0])
            )
        if args:
            state = "hidden" if any(word in words for word in NEGATIONS) else "visible"
            return self._guard(
                description,
                lambda: self.page.get_by_text(args[0]).first.wait_for(state=state),
            )
        return Outcome.failed(phrases.unsupported(description))

    # --- Helpers ---

    def _guard(self, description: str, interaction: Callable[[], object]) -> Outcome:
        try:
            result = interaction()
        except PlaywrightTimeoutError as exc:
            return Outcome.timed_out(f"{description}: {exc.message}")
        except PlaywrightError as exc:
            return Outcome.failed(f"{description}: {exc.message}")
        if isinstance(result, Outcome):
            return result
        return Outcome.passed()

    def _navigate(self, description: str) -> Outcome:
        if (target := phrases.route(description)) is None:
            return Outcome.failed(f"no route to navigate to in: {description}")
        url = urljoin(self.base_url, target)
        response = self.page.goto(url, wait_until="domcontentloaded")
        logger.debug("Navigated to %s", self.redactor.sanitize(url))
        if response is not None and response.status >= 400:
            return Outcome.failed(f"{target} returned HTTP {response.status}")
        return Outcome.passed()

    def _click(self, text: str, words: str) -> None:
        if "button" in words:
            locator = self.page.get_by_role("button", name=text)
        elif "link" in words:
            locator = self.page.get_by_role("link", name=text)
        else:
            locator = self.page.get_by_text(text)
        locator.first.click()

    def _fill(self, field: str, value: str) -> None:
        by_label = self.page.get_by_label(field)
        if by_label.count():
            by_label.first.fill(value)
        else:
            self.page.get_by_placeholder(field).first.fill(value)

    @staticmethod
    def _expect_text(what: str, actual: str, expected: str) -> Outcome:
        if expected in actual:
            return Outcome.passed()
        return Outcome.failed(f"{what} {actual!r} does not contain {expected!r}")
