"""
Unit test fixtures: an in-memory browsing session with a few small pages.
"""

import pytest

from page_loader import PageLoader
from testsuites.unit.fake_browser import FakeBrowser, FakeNode, document


def login_document() -> FakeNode:
    return document(
        FakeNode("form", {"id": "login"}, children=(
            FakeNode("input", {"name": "email", "type": "text"}),
            FakeNode("input", {"name": "password", "type": "password"}),
            FakeNode("input", {"type": "submit", "value": "Sign in"}),
        )),
        FakeNode("a", {"href": "/forgot"}, text="Forgot password?"),
    )


def search_document() -> FakeNode:
    return document(
        FakeNode("header", {"id": "top"}, children=(
            FakeNode("input", {"name": "q", "class": "header-search"}),
        )),
        FakeNode("main", {"id": "content"}, children=(
            FakeNode("input", {"name": "q", "class": "main-search"}),
            FakeNode("ul", {"id": "results"}, children=(
                FakeNode("li", text="one"),
                FakeNode("li", text="two"),
                FakeNode("li", text="three"),
            )),
        )),
    )


@pytest.fixture
def fake_browser() -> FakeBrowser:
    return FakeBrowser({
        "/login": ("Login", login_document),
        "/search": ("Search", search_document),
        "/blank": ("", document),
    })


@pytest.fixture
def loader(fake_browser: FakeBrowser) -> PageLoader:
    return PageLoader(fake_browser)
