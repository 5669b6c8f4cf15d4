"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for driving a real browser through the Playwright backend.

Key Features:
- One browser per test session, one isolated context per test
- A small static site written to a temp directory (no server needed)
- Screenshot capture on failure

UI tests are skipped when no Playwright browser is installed
(`playwright install chromium`).

================================================================================
"""

from pathlib import Path
from typing import Generator

import allure
import pytest
from loguru import logger
from playwright.sync_api import Error as PlaywrightError

from page_loader import BrowserManager, PageLoader, PlaywrightBrowser, get_config


LOGIN_HTML = """<!DOCTYPE html>
<html>
<head><title>Login</title></head>
<body>
  <form id="login" action="welcome.html" method="get">
    <input name="email" type="email">
    <input name="password" type="password">
    <input type="submit" value="Sign in">
  </form>
  <a href="forgot.html">Forgot password?</a>
</body>
</html>
"""

WELCOME_HTML = """<!DOCTYPE html>
<html>
<head><title>Welcome</title></head>
<body>
  <h1>Welcome</h1>
  <ul>
    <li class="message">You have 2 new messages</li>
    <li class="message">Your profile is complete</li>
  </ul>
  <script>
    const email = new URLSearchParams(location.search).get("email");
    if (email) {
      document.querySelector("h1").textContent = "Welcome, " + email;
    }
  </script>
</body>
</html>
"""


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def browser_manager() -> Generator[BrowserManager, None, None]:
    """
    Session-scoped browser manager fixture.

    Provides a single browser for all tests in the session,
    reducing browser launch overhead.
    """
    manager = BrowserManager(
        headless=get_config("ui.headless", True),
        browser_type=get_config("ui.browser", "chromium"),
        action_timeout_ms=get_config("ui.action_timeout_ms", 5000),
    )
    try:
        manager.start()
    except PlaywrightError as e:
        pytest.skip(f"Playwright browser unavailable: {e}")
    yield manager
    manager.close()


@pytest.fixture(scope="function")
def browser_session(browser_manager: BrowserManager) -> Generator[PlaywrightBrowser, None, None]:
    """
    Function-scoped browsing session.

    Each test gets its own context and page, providing isolation.
    """
    session = browser_manager.new_session()
    yield session
    browser_manager.close_session(session)


# ================================================================================
# Sample Site
# ================================================================================

@pytest.fixture(scope="session")
def sample_site(tmp_path_factory) -> Path:
    """Static login flow served straight from disk."""
    site = tmp_path_factory.mktemp("site")
    (site / "login.html").write_text(LOGIN_HTML, encoding="utf-8")
    (site / "welcome.html").write_text(WELCOME_HTML, encoding="utf-8")
    return site


@pytest.fixture
def loader(browser_session: PlaywrightBrowser, sample_site: Path) -> PageLoader:
    return PageLoader(browser_session, base_url=sample_site.as_uri())


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Hook to capture screenshots on test failure.

    Takes a screenshot when a UI test fails and attaches it to the
    Allure report.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and report.failed:
        session = getattr(item, "funcargs", {}).get("browser_session")
        if session is not None:
            try:
                allure.attach(
                    session.page.screenshot(full_page=True),
                    name="failure_screenshot",
                    attachment_type=allure.attachment_type.PNG,
                )
            except PlaywrightError as e:
                logger.warning(f"Failed to capture screenshot on failure: {e}")
