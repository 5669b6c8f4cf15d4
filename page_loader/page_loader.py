"""
================================================================================
Declarative Page Loader
================================================================================

Turns a page descriptor plus a browsing session into a verified page object.

Every load runs the same sequence:

    START -> NAVIGATING -> VERIFYING -> BINDING -> READY
                 |             |           |
                 +-------------+-----------+--> FAILED (error raised)

The verification predicate runs exactly once, after navigation and before
any field is bound. Binding only builds proxies; elements are looked up
when a field is first used. A failed load raises and never hands back an
object.

Usage:
    class LoginPage(PageObject):
        DESCRIPTOR = PageDescriptor(
            target="/login",
            verification=TitleEquals("Login"),
            fields={
                "email": Locator.by_name("email"),
                "password": Locator.by_name("password"),
                "submit": Locator.by_css("input[type=submit]"),
            },
        )

        def login(self, email: str, password: str) -> None:
            self.email.send_keys(email)
            self.password.send_keys(password)
            self.submit.click()

    page = PageLoader(browser, base_url="http://localhost:3000").load(LoginPage)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    ClassVar,
    Dict,
    List,
    Mapping,
    Optional,
    Type,
    TypeVar,
    Union,
)

import allure
from loguru import logger

from .browser import BrowsingCapability
from .element_proxy import ElementListProxy, ElementProxy, UnboundElement
from .exceptions import (
    InvalidPageDescriptorError,
    PageLoaderError,
    PageNotLoadedError,
    VerificationFailedError,
)
from .locator import Locator, find_elements


P = TypeVar("P", bound="PageObject")


class LoadStage(str, Enum):
    """States of a single load attempt."""

    START = "start"
    NAVIGATING = "navigating"
    VERIFYING = "verifying"
    BINDING = "binding"
    READY = "ready"
    FAILED = "failed"


# =============================================================================
# Verification Predicates
# =============================================================================

class Verification(ABC):
    """
    Condition the document must satisfy right after navigation.

    Subclasses split the check into ``observe`` (read the document once) and
    ``holds`` (judge the observation) so a failure can report both what was
    expected and what was seen.
    """

    @property
    @abstractmethod
    def expected(self) -> str:
        """Human-readable description of the expected state."""

    @abstractmethod
    def observe(self, browser: BrowsingCapability) -> Any:
        """Read the relevant document state."""

    @abstractmethod
    def holds(self, observed: Any) -> bool:
        """Whether the observed state satisfies the condition."""


@dataclass(frozen=True)
class DocumentPropertyEquals(Verification):
    """Document property ``name`` must equal ``value`` exactly."""

    name: str
    value: str

    @property
    def expected(self) -> str:
        return f"{self.name} == {self.value!r}"

    def observe(self, browser: BrowsingCapability) -> Any:
        return browser.current_document_property(self.name)

    def holds(self, observed: Any) -> bool:
        return observed == self.value


class TitleEquals(DocumentPropertyEquals):
    def __init__(self, title: str):
        super().__init__("title", title)


@dataclass(frozen=True)
class DocumentPropertyContains(Verification):
    """Document property ``name`` must contain ``fragment``."""

    name: str
    fragment: str

    @property
    def expected(self) -> str:
        return f"{self.name} contains {self.fragment!r}"

    def observe(self, browser: BrowsingCapability) -> Any:
        return browser.current_document_property(self.name)

    def holds(self, observed: Any) -> bool:
        return observed is not None and self.fragment in observed


class TitleContains(DocumentPropertyContains):
    def __init__(self, fragment: str):
        super().__init__("title", fragment)


class UrlContains(DocumentPropertyContains):
    def __init__(self, fragment: str):
        super().__init__("url", fragment)


@dataclass(frozen=True)
class ElementPresent(Verification):
    """At least one element matching ``locator`` exists in the document."""

    locator: Locator

    @property
    def expected(self) -> str:
        return f"element {self.locator} present"

    def observe(self, browser: BrowsingCapability) -> Any:
        return len(find_elements(browser, self.locator))

    def holds(self, observed: Any) -> bool:
        return observed > 0


# =============================================================================
# Descriptors
# =============================================================================

@dataclass(frozen=True)
class FieldSpec:
    """
    How one page object field is bound.

    Attributes:
        locator: Where the element is
        cached: Keep the first resolved handle (faster, may go stale)
        scope: Name of another field to search within instead of the document
        many: Bind a list of every match instead of a single element
    """

    locator: Locator
    cached: bool = False
    scope: Optional[str] = None
    many: bool = False

    def __post_init__(self):
        if not isinstance(self.locator, Locator):
            raise InvalidPageDescriptorError(
                f"FieldSpec.locator must be a Locator, got {self.locator!r}"
            )
        if self.many and self.cached:
            raise InvalidPageDescriptorError("List fields cannot be cached")


@dataclass(frozen=True)
class PageDescriptor:
    """
    Static description of one page object type.

    Attributes:
        target: Absolute URI, or a path joined onto the loader's base URL
        verification: Checked once after navigation; None always passes
        fields: Field name -> FieldSpec (a bare Locator is promoted)
        name: Label used in logs and errors
    """

    target: str
    verification: Optional[Verification] = None
    fields: Mapping[str, Union[FieldSpec, Locator]] = field(default_factory=dict)
    name: str = ""

    def __post_init__(self):
        if not isinstance(self.target, str) or not self.target.strip():
            raise InvalidPageDescriptorError("Page descriptor needs a non-empty target")
        if self.verification is not None and not isinstance(self.verification, Verification):
            raise InvalidPageDescriptorError(
                f"verification must be a Verification, got {self.verification!r}"
            )

        normalized: Dict[str, FieldSpec] = {}
        for field_name, spec in dict(self.fields).items():
            if (
                not isinstance(field_name, str)
                or not field_name.isidentifier()
                or field_name.startswith("_")
            ):
                raise InvalidPageDescriptorError(f"Invalid field name: {field_name!r}")
            if isinstance(spec, Locator):
                spec = FieldSpec(spec)
            elif not isinstance(spec, FieldSpec):
                raise InvalidPageDescriptorError(
                    f"Field '{field_name}' must be a Locator or FieldSpec, got {spec!r}"
                )
            normalized[field_name] = spec
        object.__setattr__(self, "fields", normalized)

        self._check_scopes()

    def _check_scopes(self) -> None:
        for field_name, spec in self.fields.items():
            if spec.scope is None:
                continue
            if spec.scope == field_name:
                raise InvalidPageDescriptorError(f"Field '{field_name}' is scoped to itself")
            parent = self.fields.get(spec.scope)
            if parent is None:
                raise InvalidPageDescriptorError(
                    f"Field '{field_name}' is scoped to unknown field '{spec.scope}'"
                )
            if parent.many:
                raise InvalidPageDescriptorError(
                    f"Field '{field_name}' cannot be scoped to list field '{spec.scope}'"
                )
        self.binding_order()

    def binding_order(self) -> List[str]:
        """Field names ordered so every scope is bound before its children."""
        order: List[str] = []
        visiting: List[str] = []

        def visit(name: str) -> None:
            if name in order:
                return
            if name in visiting:
                cycle = " -> ".join(visiting[visiting.index(name):] + [name])
                raise InvalidPageDescriptorError(f"Scope cycle: {cycle}")
            visiting.append(name)
            parent = self.fields[name].scope
            if parent is not None:
                visit(parent)
            visiting.pop()
            order.append(name)

        for name in self.fields:
            visit(name)
        return order


# =============================================================================
# Page Objects
# =============================================================================

class PageObject:
    """
    Base class for page objects built by PageLoader.

    Declared fields are reachable as attributes. Constructing a page object
    directly leaves every field unbound: using one raises PageNotLoadedError.
    """

    DESCRIPTOR: ClassVar[Optional[PageDescriptor]] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        descriptor = cls.__dict__.get("DESCRIPTOR")
        if descriptor is not None:
            cls._check_field_names(descriptor)

    @classmethod
    def _check_field_names(cls, descriptor: PageDescriptor) -> None:
        clashes = [name for name in descriptor.fields if hasattr(cls, name)]
        if clashes:
            raise InvalidPageDescriptorError(
                f"{cls.__name__} fields shadow class attributes: {', '.join(clashes)}"
            )

    def __init__(self, descriptor: Optional[PageDescriptor] = None):
        self._descriptor = descriptor or type(self).DESCRIPTOR
        self._browser: Optional[BrowsingCapability] = None
        if descriptor is not None:
            type(self)._check_field_names(descriptor)
        if self._descriptor is not None:
            for name in self._descriptor.fields:
                setattr(self, name, UnboundElement(name, self.page_name))

    def __repr__(self) -> str:
        state = "loaded" if self.is_loaded else "unbound"
        return f"<{self.page_name} {state}>"

    @property
    def page_name(self) -> str:
        if self._descriptor is not None and self._descriptor.name:
            return self._descriptor.name
        return type(self).__name__

    @property
    def descriptor(self) -> Optional[PageDescriptor]:
        return self._descriptor

    @property
    def is_loaded(self) -> bool:
        return self._browser is not None

    @property
    def browser(self) -> BrowsingCapability:
        if self._browser is None:
            raise PageNotLoadedError(
                f"{self.page_name} is not bound to a browser; use PageLoader.load()"
            )
        return self._browser

    @property
    def title(self) -> Optional[str]:
        return self.browser.current_document_property("title")

    @property
    def current_url(self) -> Optional[str]:
        return self.browser.current_document_property("url")

    def _bind(
        self,
        browser: BrowsingCapability,
        elements: Dict[str, Union[ElementProxy, ElementListProxy]],
    ) -> None:
        for name, proxy in elements.items():
            setattr(self, name, proxy)
        self._browser = browser


# =============================================================================
# Loader
# =============================================================================

class PageLoader:
    """
    Single entry point that produces verified page objects.

    Re-loading the same page always runs a fresh navigate/verify/bind cycle;
    nothing is cached between calls.
    """

    def __init__(self, browser: BrowsingCapability, base_url: str = ""):
        """
        Args:
            browser: Browsing capability for this session
            base_url: Prefix for descriptor targets that are plain paths
        """
        self.browser = browser
        self.base_url = base_url.rstrip("/")

    def resolve_target(self, target: str) -> str:
        """Absolute URIs pass through; paths are joined onto base_url."""
        if "://" in target or target.startswith(("about:", "data:")):
            return target
        if not self.base_url:
            return target
        return f"{self.base_url}/{target.lstrip('/')}"

    def load(
        self,
        page: Union[Type[P], PageDescriptor],
        descriptor: Optional[PageDescriptor] = None,
    ) -> P:
        """
        Navigate, verify and bind a page object.

        Args:
            page: PageObject subclass, or a bare PageDescriptor (yields a
                plain PageObject)
            descriptor: Override for the class's DESCRIPTOR

        Returns:
            A page object that passed verification

        Raises:
            NavigationError: Navigation failed (stage=NAVIGATING)
            VerificationFailedError: Predicate did not hold (stage=VERIFYING)
            InvalidPageDescriptorError: No descriptor available
            PageLoaderError: Any other backend failure, wrapped with its stage
        """
        if isinstance(page, PageDescriptor):
            page_type: Type[PageObject] = PageObject
            descriptor = descriptor or page
        else:
            page_type = page
            descriptor = descriptor or page_type.DESCRIPTOR
        if descriptor is None:
            raise InvalidPageDescriptorError(
                f"{page_type.__name__} has no DESCRIPTOR and none was passed"
            )

        instance = page_type(descriptor)
        page_name = instance.page_name
        stage = LoadStage.START
        logger.debug(f"[{page_name}] {stage.value}")

        with allure.step(f"Load page {page_name}"):
            try:
                stage = LoadStage.NAVIGATING
                target = self.resolve_target(descriptor.target)
                logger.debug(f"[{page_name}] {stage.value} -> {target}")
                self.browser.navigate(target)

                stage = LoadStage.VERIFYING
                self._verify(page_name, descriptor)

                stage = LoadStage.BINDING
                instance._bind(self.browser, self._build_elements(descriptor))
            except PageLoaderError as e:
                if e.stage is None:
                    e.stage = stage
                logger.error(
                    f"[{page_name}] {LoadStage.FAILED.value} during {stage.value}: {e}"
                )
                raise
            except Exception as e:
                logger.error(
                    f"[{page_name}] {LoadStage.FAILED.value} during {stage.value}: "
                    f"{type(e).__name__}: {e}"
                )
                raise PageLoaderError(
                    f"Loading {page_name} failed during {stage.value}: {type(e).__name__}: {e}",
                    stage=stage,
                ) from e

        logger.info(f"[{page_name}] {LoadStage.READY.value}")
        return instance

    def _verify(self, page_name: str, descriptor: PageDescriptor) -> None:
        verification = descriptor.verification
        if verification is None:
            logger.debug(f"[{page_name}] no verification declared")
            return

        observed = verification.observe(self.browser)
        if not verification.holds(observed):
            raise VerificationFailedError(
                page=page_name,
                expected=verification.expected,
                actual=observed,
                stage=LoadStage.VERIFYING,
            )
        logger.debug(f"[{page_name}] verified: {verification.expected}")

    def _build_elements(
        self,
        descriptor: PageDescriptor,
    ) -> Dict[str, Union[ElementProxy, ElementListProxy]]:
        elements: Dict[str, Union[ElementProxy, ElementListProxy]] = {}
        for name in descriptor.binding_order():
            spec = descriptor.fields[name]
            scope = elements[spec.scope] if spec.scope is not None else None
            if spec.many:
                elements[name] = ElementListProxy(
                    self.browser, spec.locator, scope=scope, name=name
                )
            else:
                elements[name] = ElementProxy(
                    self.browser, spec.locator, scope=scope, cached=spec.cached, name=name
                )
        return elements


__all__ = [
    "LoadStage",
    "Verification",
    "DocumentPropertyEquals",
    "DocumentPropertyContains",
    "TitleEquals",
    "TitleContains",
    "UrlContains",
    "ElementPresent",
    "FieldSpec",
    "PageDescriptor",
    "PageObject",
    "PageLoader",
]
