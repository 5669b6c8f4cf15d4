"""
================================================================================
Deferred Element Proxy
================================================================================

Stand-ins for page elements that look the element up at time of use.

Uncached proxies re-resolve on every call: slower, but they never hand an
action a handle the page has since replaced. Cached proxies keep the first
resolved handle until ``invalidate()``; if the page swaps the element out
underneath them, the next action fails with StaleElementError and the
caller decides whether to invalidate and retry.

Components:
    - ElementProxy: single element, optionally cached, optionally scoped
    - ElementListProxy: every current match of a locator
    - UnboundElement: placeholder on page objects not built by the loader

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Union

import allure
from loguru import logger

from . import actions
from .actions import Action, ActionKind
from .exceptions import ElementNotFoundError, PageNotLoadedError
from .locator import Locator, find_elements
from .waits import WaitConfig

if TYPE_CHECKING:
    from .browser import BrowsingCapability


class ElementProxy:
    """
    Lazily resolved reference to one element.

    Usage:
        email = ElementProxy(browser, Locator.by_name("email"))
        email.send_keys("a@b.com")      # resolves now
        email.send_keys("more")         # resolves again
    """

    def __init__(
        self,
        browser: "BrowsingCapability",
        locator: Locator,
        scope: Any = None,
        cached: bool = False,
        name: Optional[str] = None,
        index: int = 0,
    ):
        """
        Args:
            browser: Browsing capability the element lives in
            locator: How to find the element
            scope: None (document root), an element handle, or another proxy
            cached: Keep the first resolved handle until invalidate()
            name: Field name, used in logs and error messages
            index: Which match to take; 0 is the first in document order
        """
        self.browser = browser
        self.locator = locator
        self.scope = scope
        self.cached = cached
        self.name = name
        self.index = index
        self._handle: Any = None

    def __repr__(self) -> str:
        label = f"{self.name}: " if self.name else ""
        extra = ", cached" if self.cached else ""
        if self.index:
            extra += f", index={self.index}"
        return f"<ElementProxy {label}{self.locator}{extra}>"

    @property
    def description(self) -> str:
        return self.name or str(self.locator)

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(self) -> Any:
        """
        Return a handle for the element.

        Cached proxies return the remembered handle without checking that it
        is still attached; everything else performs exactly one lookup.

        Raises:
            ElementNotFoundError: When the lookup has no match at ``index``
        """
        if self.cached and self._handle is not None:
            return self._handle

        handles = find_elements(self.browser, self.locator, self.scope)
        if len(handles) <= self.index:
            scope_desc = "document" if self.scope is None else repr(self.scope)
            raise ElementNotFoundError(
                f"No element for '{self.description}' ({self.locator}) "
                f"in {scope_desc}; found {len(handles)} match(es)"
            )

        handle = handles[self.index]
        if self.cached:
            self._handle = handle
        return handle

    def resolve_all(self) -> List[Any]:
        """Every current match, never cached."""
        return find_elements(self.browser, self.locator, self.scope)

    def invalidate(self) -> None:
        """Forget a cached handle so the next use resolves afresh."""
        if self._handle is not None:
            logger.debug(f"Invalidated cached handle for {self!r}")
        self._handle = None

    def is_present(self) -> bool:
        """True if the element can be found right now."""
        try:
            return len(self.resolve_all()) > self.index
        except ElementNotFoundError:
            # scope proxy itself is missing
            return False

    # =========================================================================
    # Actions
    # =========================================================================

    def invoke(self, action: Action) -> Any:
        """
        Resolve, then apply ``action`` to the resolved handle.

        Staleness and interactability errors from the browsing capability
        propagate as-is; nothing here retries.
        """
        handle = self.resolve()
        with allure.step(f"{self._format_action(action)} -> {self.description}"):
            logger.debug(f"{self._format_action(action)} on {self!r}")
            return self.browser.invoke(handle, action)

    def _format_action(self, action: Action) -> str:
        if action.kind is ActionKind.SEND_KEYS and "password" in self.description.lower():
            return f"{action.kind.value}('{'*' * len(action.args[0])}')"
        return str(action)

    def send_keys(self, text: str) -> Any:
        return self.invoke(actions.send_keys(text))

    def click(self) -> Any:
        return self.invoke(actions.click())

    def clear(self) -> Any:
        return self.invoke(actions.clear())

    def submit(self) -> Any:
        return self.invoke(actions.submit())

    @property
    def text(self) -> str:
        return self.invoke(actions.read_text())

    def get_attribute(self, name: str) -> Optional[str]:
        return self.invoke(actions.get_attribute(name))

    def is_displayed(self) -> bool:
        return bool(self.invoke(actions.is_displayed()))

    # =========================================================================
    # Chaining & Waits
    # =========================================================================

    def find(self, locator: Locator, cached: bool = False) -> "ElementProxy":
        """Child proxy whose lookups are rooted at this element."""
        return ElementProxy(self.browser, locator, scope=self, cached=cached)

    def find_all(self, locator: Locator) -> "ElementListProxy":
        """List proxy whose lookups are rooted at this element."""
        return ElementListProxy(self.browser, locator, scope=self)

    def wait_until_present(self, config: Optional[WaitConfig] = None) -> "ElementProxy":
        """
        Block until the element can be found, polling through the browser.

        Raises:
            WaitTimeoutError: If it never shows up within ``config.timeout``
        """
        config = config or WaitConfig()
        self.browser.wait_until(
            self.is_present,
            timeout=config.timeout,
            poll_interval=config.poll_interval,
            description=f"{self.description} present",
        )
        return self


class ElementListProxy:
    """
    Lazily resolved list of elements.

    Each access re-runs the lookup, so ``len()`` and iteration always reflect
    the document as it is now.
    """

    def __init__(
        self,
        browser: "BrowsingCapability",
        locator: Locator,
        scope: Any = None,
        name: Optional[str] = None,
    ):
        self.browser = browser
        self.locator = locator
        self.scope = scope
        self.name = name

    def __repr__(self) -> str:
        label = f"{self.name}: " if self.name else ""
        return f"<ElementListProxy {label}{self.locator}>"

    def resolve_all(self) -> List[Any]:
        return find_elements(self.browser, self.locator, self.scope)

    def __len__(self) -> int:
        return len(self.resolve_all())

    def __getitem__(self, index: Union[int, slice]) -> Union[ElementProxy, List[ElementProxy]]:
        """
        Proxy pinned to one position, or a list of them for a slice.

        Negative indexes and slices are resolved against the current match
        count (one lookup). Non-negative indexes are checked lazily: the
        returned proxy raises ElementNotFoundError when used if nothing
        sits at that position by then.
        """
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        if not isinstance(index, int):
            raise TypeError(
                f"element list indices must be integers or slices, not {type(index).__name__}"
            )
        if index < 0:
            index += len(self)
        if index < 0:
            raise IndexError("element list index out of range")
        return ElementProxy(
            self.browser,
            self.locator,
            scope=self.scope,
            name=f"{self.name or self.locator}[{index}]",
            index=index,
        )

    def __iter__(self) -> Iterator[ElementProxy]:
        for i in range(len(self)):
            yield self[i]

    def texts(self) -> List[str]:
        """Visible text of every current match."""
        read = actions.read_text()
        return [self.browser.invoke(handle, read) for handle in self.resolve_all()]


class UnboundElement:
    """
    Placeholder for a declared field on a page object that was not loaded.

    Any use fails immediately with PageNotLoadedError.
    """

    def __init__(self, field_name: str, page_name: str):
        self._field_name = field_name
        self._page_name = page_name

    def __repr__(self) -> str:
        return f"<UnboundElement {self._page_name}.{self._field_name}>"

    def _fail(self) -> PageNotLoadedError:
        return PageNotLoadedError(
            f"{self._page_name}.{self._field_name} is not bound; "
            f"create page objects with PageLoader.load()"
        )

    def __getattr__(self, item: str) -> Any:
        # copy/pickle look up dunders; let them see a plain missing attribute
        if item.startswith("__") and item.endswith("__"):
            raise AttributeError(item)
        raise self._fail()

    def __len__(self) -> int:
        raise self._fail()

    def __iter__(self):
        raise self._fail()


__all__ = [
    "ElementProxy",
    "ElementListProxy",
    "UnboundElement",
]
