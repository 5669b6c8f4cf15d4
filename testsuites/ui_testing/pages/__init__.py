"""
================================================================================
Page Objects
================================================================================

Declarative page objects for the sample pages used by the UI suite.

Each page class declares:
    - Navigation target
    - Load verification
    - Element fields (resolved lazily after PageLoader.load)

Author: Automation Team
License: MIT
================================================================================
"""

from .login_page import LoginPage, WelcomePage

__all__ = [
    "LoginPage",
    "WelcomePage",
]
