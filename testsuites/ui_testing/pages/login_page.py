"""
================================================================================
Login Page Objects
================================================================================

Declarative page objects for the sample login flow served by the UI test
fixtures: a login form at /login.html that submits to /welcome.html.

Fields are bound by PageLoader; nothing here looks elements up eagerly.

================================================================================
"""

from __future__ import annotations

import os
from typing import Optional

import allure

from page_loader import FieldSpec, Locator, PageDescriptor, PageObject, TitleEquals, UrlContains


class LoginPage(PageObject):
    """Login form page."""

    DESCRIPTOR = PageDescriptor(
        target="/login.html",
        verification=TitleEquals("Login"),
        fields={
            "form": FieldSpec(Locator.by_id("login"), cached=True),
            "email": FieldSpec(Locator.by_name("email"), scope="form"),
            "password": FieldSpec(Locator.by_name("password"), scope="form"),
            "submit": Locator.by_css("input[type=submit]"),
            "forgot_password": Locator.by_link_text("Forgot password?"),
        },
    )

    @allure.step("Login (email={email})")
    def login(self, email: Optional[str] = None, password: Optional[str] = None) -> None:
        """
        Fill in the form and submit it.

        Args:
            email: Defaults to the `UI_EMAIL` env var (demo-safe).
            password: Defaults to the `UI_PASSWORD` env var (demo-safe).
        """
        if email is None:
            email = os.getenv("UI_EMAIL", "demo@example.com")
        if password is None:
            password = os.getenv("UI_PASSWORD", "demo_password")

        self.email.clear()
        self.email.send_keys(email)
        self.password.clear()
        self.password.send_keys(password)
        self.submit.click()

    def wait_for_welcome(self) -> None:
        self.browser.wait_until(
            lambda: "welcome" in (self.current_url or ""),
            timeout=10,
            poll_interval=0.1,
            description="welcome page after login",
        )


class WelcomePage(PageObject):
    DESCRIPTOR = PageDescriptor(
        target="/welcome.html",
        verification=UrlContains("welcome"),
        fields={
            "greeting": Locator.by_tag("h1"),
            "messages": FieldSpec(Locator.by_css("li.message"), many=True),
        },
    )
