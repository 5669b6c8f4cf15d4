"""
In-memory browsing capability for unit tests.

Documents are small trees of FakeNode objects. Nodes can be removed or
replaced between calls to reproduce stale references, and every call the
page loader makes is recorded so tests can assert on order.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from page_loader.actions import Action, ActionKind
from page_loader.browser import BrowsingCapability
from page_loader.exceptions import (
    ElementNotInteractableError,
    InvalidLocatorError,
    NavigationError,
    StaleElementError,
)
from page_loader.locator import Locator, Strategy


# tag#id.class[attr=value] - one compound selector, no combinators
_CSS_PATTERN = re.compile(r"^([a-zA-Z][\w-]*)?((?:#[\w-]+|\.[\w-]+|\[[\w-]+(?:=[^\]]+)?\])*)$")
_CSS_PART = re.compile(r"#([\w-]+)|\.([\w-]+)|\[([\w-]+)(?:=([^\]]+))?\]")


class FakeNode:
    """One element in a fake document."""

    def __init__(
        self,
        tag: str,
        attrs: Optional[Dict[str, str]] = None,
        text: str = "",
        children: Tuple["FakeNode", ...] = (),
        hidden: bool = False,
    ):
        self.tag = tag
        self.attrs = dict(attrs or {})
        self.text = text
        self.hidden = hidden
        self.value = ""
        self.parent: Optional["FakeNode"] = None
        self.children: List["FakeNode"] = []
        self.on_click: Optional[Callable[["FakeNode"], None]] = None
        for child in children:
            self.append(child)

    def __repr__(self) -> str:
        attrs = " ".join(f'{k}="{v}"' for k, v in self.attrs.items())
        return f"<{self.tag}{' ' + attrs if attrs else ''}>"

    def append(self, child: "FakeNode") -> "FakeNode":
        child.parent = self
        self.children.append(child)
        return child

    def remove(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def replace_with(self, other: "FakeNode") -> "FakeNode":
        parent = self.parent
        index = parent.children.index(self)
        self.remove()
        other.parent = parent
        parent.children.insert(index, other)
        return other

    @property
    def attached(self) -> bool:
        node = self
        while node.parent is not None:
            node = node.parent
        return node.tag == "#document"

    def descendants(self) -> Iterator["FakeNode"]:
        for child in self.children:
            yield child
            yield from child.descendants()

    def matches(self, locator: Locator) -> bool:
        strategy, value = locator.strategy, locator.value
        if strategy is Strategy.ID:
            return self.attrs.get("id") == value
        if strategy is Strategy.NAME:
            return self.attrs.get("name") == value
        if strategy is Strategy.TAG:
            return self.tag == value
        if strategy is Strategy.CLASS_NAME:
            return value in self.attrs.get("class", "").split()
        if strategy is Strategy.LINK_TEXT:
            return self.tag == "a" and self.text == value
        if strategy is Strategy.CSS:
            return self._matches_css(value)
        return False

    def _matches_css(self, selector: str) -> bool:
        match = _CSS_PATTERN.match(selector.strip())
        if not match:
            raise InvalidLocatorError(f"Fake browser cannot parse css {selector!r}")
        tag, rest = match.groups()
        if tag and tag != self.tag:
            return False
        for id_, cls, attr, attr_value in _CSS_PART.findall(rest):
            if id_ and self.attrs.get("id") != id_:
                return False
            if cls and cls not in self.attrs.get("class", "").split():
                return False
            if attr:
                if attr not in self.attrs:
                    return False
                if attr_value and self.attrs[attr] != attr_value.strip("'\""):
                    return False
        return True


def document(*children: FakeNode) -> FakeNode:
    return FakeNode("#document", children=children)


class FakeBrowser(BrowsingCapability):
    """
    Browsing capability over FakeNode documents.

    ``pages`` maps a target to (title, document factory). XPath is not
    supported, which gives tests a strategy the backend rejects.
    """

    supported_strategies = frozenset(s for s in Strategy if s is not Strategy.XPATH)

    def __init__(self, pages: Dict[str, Tuple[str, Callable[[], FakeNode]]]):
        self.pages = pages
        self.document: FakeNode = document()
        self.title = ""
        self.url = "about:blank"
        self.calls: List[Tuple[Any, ...]] = []
        self.actions: List[Tuple[FakeNode, Action]] = []

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def navigate(self, target: str) -> None:
        self.calls.append(("navigate", target))
        if target not in self.pages:
            raise NavigationError(f"No page at {target}")
        self.title, factory = self.pages[target]
        self.document = factory()
        self.url = target

    def find_all(self, locator: Locator, scope: Any = None) -> List[FakeNode]:
        self.calls.append(("find_all", locator, scope))
        root = self.document if scope is None else scope
        if scope is not None and not scope.attached:
            raise StaleElementError(f"Scope {scope!r} is detached")
        return [node for node in root.descendants() if node.matches(locator)]

    def current_document_property(self, name: str) -> Optional[str]:
        self.calls.append(("property", name))
        if name == "title":
            return self.title
        if name == "url":
            return self.url
        return self.document.attrs.get(name)

    def invoke(self, handle: FakeNode, action: Action) -> Any:
        self.calls.append(("invoke", handle, action))
        if not handle.attached:
            raise StaleElementError(f"{handle!r} is no longer attached")

        kind = action.kind
        if kind in (ActionKind.SEND_KEYS, ActionKind.CLICK, ActionKind.CLEAR) and (
            handle.hidden or "disabled" in handle.attrs
        ):
            raise ElementNotInteractableError(f"{handle!r} cannot take {action}")

        self.actions.append((handle, action))
        if kind is ActionKind.SEND_KEYS:
            handle.value += action.args[0]
        elif kind is ActionKind.CLEAR:
            handle.value = ""
        elif kind is ActionKind.CLICK:
            if handle.on_click is not None:
                handle.on_click(handle)
        elif kind is ActionKind.READ_TEXT:
            return handle.text
        elif kind is ActionKind.GET_ATTRIBUTE:
            if action.args[0] == "value":
                return handle.value
            return handle.attrs.get(action.args[0])
        elif kind is ActionKind.IS_DISPLAYED:
            return not handle.hidden
        return None
