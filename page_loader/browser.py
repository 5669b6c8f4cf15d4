"""
================================================================================
Browsing Capability
================================================================================

The boundary between page objects and whatever actually drives a browser.

Components:
    - BrowsingCapability: abstract contract (navigate, find_all, document
      properties, element actions, bounded waits)
    - PlaywrightBrowser: implementation over playwright.sync_api
    - BrowserManager: Playwright/browser lifecycle, one isolated session per
      new_session() call

A session is single-threaded: one navigation, lookup or action at a time.
Parallel tests each take their own session from the manager and never share
proxies or page objects across sessions.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, FrozenSet, List, Optional, TypeVar

from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    ElementHandle,
    Error as PlaywrightError,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    sync_playwright,
)

from .actions import Action, ActionKind
from .exceptions import (
    ElementNotInteractableError,
    InvalidLocatorError,
    NavigationError,
    StaleElementError,
)
from .locator import Locator, Strategy
from .waits import wait_until as _wait_until


T = TypeVar("T")


class BrowsingCapability(ABC):
    """Abstract contract every browsing backend implements."""

    #: Locator strategies this backend can run
    supported_strategies: FrozenSet[Strategy] = frozenset(Strategy)

    @abstractmethod
    def navigate(self, target: str) -> None:
        """Load ``target``. Raises NavigationError on failure."""

    @abstractmethod
    def find_all(self, locator: Locator, scope: Any = None) -> List[Any]:
        """Matches of ``locator`` under ``scope`` (None = document) in document order."""

    @abstractmethod
    def current_document_property(self, name: str) -> Optional[str]:
        """Read a document-level property such as ``title`` or ``url``."""

    @abstractmethod
    def invoke(self, handle: Any, action: Action) -> Any:
        """
        Apply ``action`` to ``handle``.

        Raises:
            StaleElementError: Handle is no longer attached to the document
            ElementNotInteractableError: Element cannot take the action
        """

    def wait_until(
        self,
        predicate: Callable[[], T],
        timeout: float,
        poll_interval: float,
        description: str = "condition",
    ) -> T:
        """Block until ``predicate`` is truthy; WaitTimeoutError past ``timeout``."""
        return _wait_until(
            predicate,
            timeout=timeout,
            poll_interval=poll_interval,
            description=description,
        )


# =============================================================================
# Playwright Backend
# =============================================================================

def _quote(value: str) -> str:
    """Double-quote a string for use inside a CSS attribute or pseudo selector."""
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def to_selector(locator: Locator) -> str:
    """
    Translate a Locator into a Playwright selector string.

    Raises:
        InvalidLocatorError: For class names containing whitespace
            (compound class names are not a single class)
    """
    strategy, value = locator.strategy, locator.value
    if strategy is Strategy.ID:
        return f"[id={_quote(value)}]"
    if strategy is Strategy.NAME:
        return f"[name={_quote(value)}]"
    if strategy is Strategy.CSS:
        return value
    if strategy is Strategy.XPATH:
        return f"xpath={value}"
    if strategy is Strategy.TAG:
        return value
    if strategy is Strategy.CLASS_NAME:
        if any(ch.isspace() for ch in value.strip()):
            raise InvalidLocatorError(
                f"Compound class names are not supported: {value!r}; use a css locator"
            )
        return f"[class~={_quote(value.strip())}]"
    if strategy is Strategy.LINK_TEXT:
        return f"a:text-is({_quote(value)})"
    raise InvalidLocatorError(f"Unsupported strategy: {strategy!r}")


_STALE_MARKERS = (
    "not attached",
    "detached",
    "disposed",
    "execution context was destroyed",
)


class PlaywrightBrowser(BrowsingCapability):
    """
    Browsing capability backed by a synchronous Playwright page.

    Element handles are Playwright ElementHandles: they point at a concrete
    DOM node and go stale once the node is removed, the same way WebDriver
    element references do.

    Usage:
        with BrowserManager() as manager:
            browser = manager.new_session()
            PageLoader(browser, base_url="http://localhost:3000").load(LoginPage)
    """

    def __init__(self, page: Page, action_timeout_ms: int = 5000):
        """
        Args:
            page: Playwright sync Page this session drives
            action_timeout_ms: Upper bound for a single click/type
        """
        self.page = page
        self.action_timeout_ms = action_timeout_ms

    def navigate(self, target: str) -> None:
        try:
            response = self.page.goto(target, wait_until="load")
        except PlaywrightError as e:
            raise NavigationError(f"Navigation to {target} failed: {e}") from e

        if response is not None and not response.ok:
            raise NavigationError(
                f"Navigation to {target} returned HTTP {response.status}"
            )
        logger.debug(f"Navigated to: {target}")

    def find_all(self, locator: Locator, scope: Any = None) -> List[ElementHandle]:
        selector = to_selector(locator)
        root = self.page if scope is None else scope
        try:
            return root.query_selector_all(selector)
        except PlaywrightError as e:
            message = str(e).lower()
            if scope is not None and any(m in message for m in _STALE_MARKERS):
                raise StaleElementError(
                    f"Search scope went stale while looking up {locator}: {e}"
                ) from e
            raise InvalidLocatorError(f"Backend rejected locator {locator}: {e}") from e

    def current_document_property(self, name: str) -> Optional[str]:
        try:
            if name == "title":
                return self.page.title()
            if name == "url":
                return self.page.url
            return self.page.evaluate(
                "name => { const v = document[name]; return v == null ? null : String(v); }",
                name,
            )
        except PlaywrightError as e:
            # usually a redirect replaced the document mid-read
            raise NavigationError(f"Could not read document {name}: {e}") from e

    def invoke(self, handle: ElementHandle, action: Action) -> Any:
        try:
            if not handle.evaluate("e => e.isConnected"):
                raise StaleElementError(
                    f"Element is no longer attached to the document ({action})"
                )
            return self._apply(handle, action)
        except PlaywrightTimeoutError as e:
            raise ElementNotInteractableError(f"{action} timed out: {e}") from e
        except PlaywrightError as e:
            if any(m in str(e).lower() for m in _STALE_MARKERS):
                raise StaleElementError(f"{action} hit a stale element: {e}") from e
            raise ElementNotInteractableError(f"{action} failed: {e}") from e

    def _apply(self, handle: ElementHandle, action: Action) -> Any:
        timeout = self.action_timeout_ms
        kind = action.kind
        if kind is ActionKind.SEND_KEYS:
            return handle.type(action.args[0], timeout=timeout)
        if kind is ActionKind.CLICK:
            return handle.click(timeout=timeout)
        if kind is ActionKind.CLEAR:
            return handle.fill("", timeout=timeout)
        if kind is ActionKind.SUBMIT:
            return handle.evaluate(
                "e => { const f = e.form || e;"
                " f.requestSubmit ? f.requestSubmit() : f.submit(); }"
            )
        if kind is ActionKind.READ_TEXT:
            return handle.inner_text()
        if kind is ActionKind.GET_ATTRIBUTE:
            # typed text lives in the value property, not the attribute
            if action.args[0] == "value":
                return handle.evaluate(
                    "e => e.value == null ? e.getAttribute('value') : String(e.value)"
                )
            return handle.get_attribute(action.args[0])
        if kind is ActionKind.IS_DISPLAYED:
            return handle.is_visible()
        raise ElementNotInteractableError(f"Unsupported action: {action}")


# =============================================================================
# Browser Lifecycle
# =============================================================================

class BrowserManager:
    """
    Manages the Playwright driver and browser for UI sessions.

    Features:
        - Single browser instance for performance
        - Isolated context per session for test independence
        - Configurable browser settings

    Usage:
        with BrowserManager(headless=True) as manager:
            browser = manager.new_session()
            browser.navigate("https://example.com")
    """

    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": ["--ignore-certificate-errors"],
    }

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        headless: bool = True,
        browser_type: str = "chromium",
        action_timeout_ms: int = 5000,
    ):
        """
        Initialize browser manager.

        Args:
            headless: Run browser in headless mode
            browser_type: Browser to use - 'chromium', 'firefox', 'webkit'
            action_timeout_ms: Passed to each PlaywrightBrowser session
        """
        self.headless = headless
        self.browser_type = browser_type
        self.action_timeout_ms = action_timeout_ms

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    def __enter__(self) -> "BrowserManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = sync_playwright().start()

        if self.browser_type == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.browser_type == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.headless,
        }

        try:
            self._browser = browser_launcher.launch(**launch_options)
        except PlaywrightError:
            self._playwright.stop()
            self._playwright = None
            raise
        logger.debug(
            f"Browser started: {self.browser_type} "
            f"(headless={self.headless})"
        )

    def close(self) -> None:
        """Close all contexts and browser."""
        for context in self._contexts:
            try:
                context.close()
            except PlaywrightError as e:
                logger.warning(f"Failed to close browser context: {e}")
        self._contexts.clear()

        if self._browser:
            self._browser.close()
            self._browser = None

        if self._playwright:
            self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    def new_context(self, **options: Any) -> BrowserContext:
        """
        Create new browser context.

        Each context is isolated - separate cookies, localStorage, etc.
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context = self._browser.new_context(**{**self.DEFAULT_CONTEXT_OPTIONS, **options})
        self._contexts.append(context)
        return context

    def new_session(self, **context_options: Any) -> PlaywrightBrowser:
        """
        Create an isolated browsing session (own context, own page).

        Args:
            **context_options: Options for the new context

        Returns:
            PlaywrightBrowser bound to a fresh page
        """
        page = self.new_context(**context_options).new_page()
        return PlaywrightBrowser(page, action_timeout_ms=self.action_timeout_ms)

    def close_session(self, session: PlaywrightBrowser) -> None:
        """Close a session's context and stop tracking it."""
        context = session.page.context
        if context in self._contexts:
            self._contexts.remove(context)
        try:
            context.close()
        except PlaywrightError as e:
            logger.warning(f"Failed to close browser context: {e}")

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "BrowsingCapability",
    "PlaywrightBrowser",
    "BrowserManager",
    "to_selector",
]
