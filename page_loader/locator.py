"""
================================================================================
Locator Resolution
================================================================================

Declarative locators and the single lookup primitive every proxy uses.

A Locator is an immutable (strategy, value) pair. Strategy names follow the
WebDriver ``By`` vocabulary so locators read the same across backends.

Usage:
    >>> Locator.by_name("email")
    Locator(strategy=<Strategy.NAME: 'name'>, value='email')
    >>> Locator.parse("css=input[type=submit]")
    Locator(strategy=<Strategy.CSS: 'css selector'>, value='input[type=submit]')

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Union

from loguru import logger

from .exceptions import InvalidLocatorError

if TYPE_CHECKING:
    from .browser import BrowsingCapability


class Strategy(str, Enum):
    """Supported locator strategies."""

    ID = "id"
    NAME = "name"
    CSS = "css selector"
    XPATH = "xpath"
    TAG = "tag name"
    CLASS_NAME = "class name"
    LINK_TEXT = "link text"


# Shorthand accepted by Locator.parse and YAML descriptors
STRATEGY_ALIASES = {
    "id": Strategy.ID,
    "name": Strategy.NAME,
    "css": Strategy.CSS,
    "css selector": Strategy.CSS,
    "xpath": Strategy.XPATH,
    "tag": Strategy.TAG,
    "tag name": Strategy.TAG,
    "class": Strategy.CLASS_NAME,
    "class name": Strategy.CLASS_NAME,
    "link": Strategy.LINK_TEXT,
    "link_text": Strategy.LINK_TEXT,
    "link text": Strategy.LINK_TEXT,
}


def coerce_strategy(strategy: Union[str, Strategy]) -> Strategy:
    """Map a strategy name or alias onto the Strategy enum."""
    if isinstance(strategy, Strategy):
        return strategy
    try:
        return STRATEGY_ALIASES[str(strategy).strip().lower()]
    except KeyError:
        raise InvalidLocatorError(
            f"Unknown locator strategy: {strategy!r}. "
            f"Expected one of: {', '.join(s.value for s in Strategy)}"
        ) from None


@dataclass(frozen=True)
class Locator:
    """
    Immutable (strategy, value) pair identifying elements within a scope.

    Attributes:
        strategy: How to search (id, name, css selector, ...)
        value: The expression for that strategy; never empty
    """

    strategy: Strategy
    value: str

    def __post_init__(self):
        object.__setattr__(self, "strategy", coerce_strategy(self.strategy))
        if not isinstance(self.value, str) or not self.value.strip():
            raise InvalidLocatorError(
                f"Locator value must be a non-empty string, got {self.value!r}"
            )

    def __str__(self) -> str:
        return f"{self.strategy.value}={self.value}"

    @classmethod
    def by_id(cls, value: str) -> "Locator":
        return cls(Strategy.ID, value)

    @classmethod
    def by_name(cls, value: str) -> "Locator":
        return cls(Strategy.NAME, value)

    @classmethod
    def by_css(cls, value: str) -> "Locator":
        return cls(Strategy.CSS, value)

    @classmethod
    def by_xpath(cls, value: str) -> "Locator":
        return cls(Strategy.XPATH, value)

    @classmethod
    def by_tag(cls, value: str) -> "Locator":
        return cls(Strategy.TAG, value)

    @classmethod
    def by_class(cls, value: str) -> "Locator":
        return cls(Strategy.CLASS_NAME, value)

    @classmethod
    def by_link_text(cls, value: str) -> "Locator":
        return cls(Strategy.LINK_TEXT, value)

    @classmethod
    def parse(cls, expression: str) -> "Locator":
        """
        Parse ``strategy=value`` shorthand (e.g. ``"css=#login .submit"``).

        Only the first ``=`` separates strategy from value, so attribute
        selectors such as ``css=input[type=submit]`` survive intact.

        Raises:
            InvalidLocatorError: When the expression has no strategy prefix
        """
        if not isinstance(expression, str) or "=" not in expression:
            raise InvalidLocatorError(
                f"Locator expression must look like 'strategy=value', got {expression!r}"
            )
        strategy, value = expression.split("=", 1)
        return cls(coerce_strategy(strategy), value)


def find_elements(
    browser: "BrowsingCapability",
    locator: Locator,
    scope: Any = None,
) -> List[Any]:
    """
    Run a locator against a search scope.

    Args:
        browser: Browsing capability for the current session
        locator: What to look for
        scope: None for the document root, an element handle, or an
            ElementProxy (resolved here, once, before the lookup)

    Returns:
        Matching element handles in document order; possibly empty

    Raises:
        InvalidLocatorError: When the backend does not support the strategy
            or rejects the expression
        ElementNotFoundError: When a proxy scope resolves to nothing
    """
    if locator.strategy not in browser.supported_strategies:
        raise InvalidLocatorError(
            f"Strategy '{locator.strategy.value}' is not supported by "
            f"{type(browser).__name__}"
        )

    # Local import: element_proxy depends on this module.
    from .element_proxy import ElementProxy

    if isinstance(scope, ElementProxy):
        scope = scope.resolve()

    handles = list(browser.find_all(locator, scope))
    logger.debug(
        f"Resolved {locator} -> {len(handles)} match(es)"
        f"{' (scoped)' if scope is not None else ''}"
    )
    return handles


__all__ = [
    "Strategy",
    "Locator",
    "coerce_strategy",
    "find_elements",
]
