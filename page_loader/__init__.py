"""
================================================================================
Page Loader
================================================================================

Declarative page objects: navigate, verify, then bind lazily resolved
element proxies, in one call.

Components:
    - locator: Locator value objects and lookup
    - element_proxy: Deferred element proxies (cached / uncached / scoped)
    - page_loader: PageDescriptor, PageObject, PageLoader
    - browser: Browsing capability contract and the Playwright backend
    - waits: Bounded polling waits
    - descriptors: YAML page descriptors

Author: Automation Team
License: MIT
================================================================================
"""

from . import actions
from .browser import BrowserManager, BrowsingCapability, PlaywrightBrowser
from .config import ConfigLoader, get_config, init_logger
from .descriptors import descriptor_from_dict, load_descriptors
from .element_proxy import ElementListProxy, ElementProxy, UnboundElement
from .exceptions import (
    ConfigurationError,
    ElementNotFoundError,
    ElementNotInteractableError,
    InvalidLocatorError,
    InvalidPageDescriptorError,
    NavigationError,
    PageLoaderError,
    PageNotLoadedError,
    StaleElementError,
    VerificationFailedError,
    WaitTimeoutError,
)
from .locator import Locator, Strategy, find_elements
from .page_loader import (
    DocumentPropertyContains,
    DocumentPropertyEquals,
    ElementPresent,
    FieldSpec,
    LoadStage,
    PageDescriptor,
    PageLoader,
    PageObject,
    TitleContains,
    TitleEquals,
    UrlContains,
    Verification,
)
from .waits import WaitConfig, get_wait_config, wait_until

__version__ = "1.0.0"

__all__ = [
    "actions",
    "BrowserManager",
    "BrowsingCapability",
    "PlaywrightBrowser",
    "ConfigLoader",
    "get_config",
    "init_logger",
    "descriptor_from_dict",
    "load_descriptors",
    "ElementListProxy",
    "ElementProxy",
    "UnboundElement",
    "ConfigurationError",
    "ElementNotFoundError",
    "ElementNotInteractableError",
    "InvalidLocatorError",
    "InvalidPageDescriptorError",
    "NavigationError",
    "PageLoaderError",
    "PageNotLoadedError",
    "StaleElementError",
    "VerificationFailedError",
    "WaitTimeoutError",
    "Locator",
    "Strategy",
    "find_elements",
    "DocumentPropertyContains",
    "DocumentPropertyEquals",
    "ElementPresent",
    "FieldSpec",
    "LoadStage",
    "PageDescriptor",
    "PageLoader",
    "PageObject",
    "TitleContains",
    "TitleEquals",
    "UrlContains",
    "Verification",
    "WaitConfig",
    "get_wait_config",
    "wait_until",
]
