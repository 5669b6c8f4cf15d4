"""
Test suites package.

Kept importable so shared test helpers (the in-memory browsing fake, page
objects used by UI tests) can be imported by module path.
"""
