import pytest
from playwright.sync_api import Error as PlaywrightError

from page_loader import (
    BrowserManager,
    LoadStage,
    NavigationError,
    PageDescriptor,
    PageLoader,
    PageLoaderError,
    PlaywrightBrowser,
    TitleEquals,
)


class StubContext:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class StubPage:
    """Just enough of a Playwright page for navigation and document reads."""

    def __init__(self, title_error=None):
        self.url = "about:blank"
        self.context = StubContext()
        self.title_error = title_error

    def goto(self, url, wait_until=None):
        self.url = url
        return None

    def title(self):
        if self.title_error is not None:
            raise self.title_error
        return "Login"


def test_document_read_failure_becomes_navigation_error():
    page = StubPage(title_error=PlaywrightError("Execution context was destroyed"))
    loader = PageLoader(PlaywrightBrowser(page))

    with pytest.raises(NavigationError) as exc_info:
        loader.load(PageDescriptor(target="file:///tmp/login.html", verification=TitleEquals("Login")))

    error = exc_info.value
    assert isinstance(error, PageLoaderError)
    assert error.stage is LoadStage.VERIFYING
    assert isinstance(error.__cause__, PlaywrightError)


def test_document_properties_read_from_page():
    browser = PlaywrightBrowser(StubPage())
    browser.navigate("file:///tmp/login.html")

    assert browser.current_document_property("title") == "Login"
    assert browser.current_document_property("url") == "file:///tmp/login.html"


def test_close_session_forgets_its_context():
    manager = BrowserManager()
    page = StubPage()
    manager._contexts.append(page.context)
    session = PlaywrightBrowser(page)

    manager.close_session(session)

    assert page.context.closed is True
    assert manager._contexts == []
