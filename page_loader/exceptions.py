"""
================================================================================
Page Loader Exceptions
================================================================================

Exception hierarchy shared by locator resolution, element proxies, the page
loader and the browsing backends.

Every error carries an optional ``stage`` so a failed page load reports
where it stopped (navigating, verifying, binding).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Optional


class PageLoaderError(Exception):
    """Base exception for all page loader errors."""

    def __init__(self, message: str = "", stage: Any = None):
        super().__init__(message)
        self.stage = stage


class InvalidLocatorError(PageLoaderError, ValueError):
    """Malformed locator, or a strategy the active backend cannot run."""
    pass


class InvalidPageDescriptorError(PageLoaderError, ValueError):
    """Page descriptor is inconsistent (unknown scope, cycle, bad field name)."""
    pass


class ElementNotFoundError(PageLoaderError):
    """Locator matched zero elements at resolution time."""
    pass


class StaleElementError(PageLoaderError):
    """A previously resolved handle is no longer attached to the document."""
    pass


class ElementNotInteractableError(PageLoaderError):
    """Element exists but cannot receive the requested action."""
    pass


class NavigationError(PageLoaderError):
    """Browsing capability failed to navigate to the target."""
    pass


class PageNotLoadedError(PageLoaderError):
    """Page object was used without going through ``PageLoader.load``."""
    pass


class ConfigurationError(PageLoaderError):
    """Raised when configuration loading or access fails."""
    pass


class VerificationFailedError(PageLoaderError):
    """
    Load verification did not hold after navigation.

    Attributes:
        page: Name of the page object type being loaded
        expected: Expected document state, as described by the predicate
        actual: Document state actually observed
    """

    def __init__(
        self,
        page: str,
        expected: Any,
        actual: Any,
        stage: Any = None,
    ):
        self.page = page
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Page '{page}' failed verification: "
            f"expected {expected!r}, observed {actual!r}",
            stage=stage,
        )


class WaitTimeoutError(PageLoaderError, TimeoutError):
    """Raised when a bounded wait exceeds its deadline."""

    def __init__(
        self,
        message: str,
        last_error: Optional[str] = None,
        stage: Any = None,
    ):
        super().__init__(message, stage=stage)
        self.last_error = last_error


__all__ = [
    "PageLoaderError",
    "InvalidLocatorError",
    "InvalidPageDescriptorError",
    "ElementNotFoundError",
    "StaleElementError",
    "ElementNotInteractableError",
    "NavigationError",
    "PageNotLoadedError",
    "ConfigurationError",
    "VerificationFailedError",
    "WaitTimeoutError",
]
