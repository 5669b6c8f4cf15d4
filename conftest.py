"""
Repository-level pytest configuration.

Why this exists:
  - Provide safe defaults for local runs (no real endpoints embedded)
  - Keep the configuration singleton from leaking between tests
  - Configure loguru once for the whole run
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from page_loader.config import ConfigLoader, init_logger


def pytest_configure(config):
    """Set up the loguru sinks once, from config/config.yaml."""
    init_logger()


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _safe_env_defaults() -> Generator[None, None, None]:
    """Set local defaults if not already provided by the user/CI."""
    defaults = {
        "UI_BASE_URL": "http://localhost:3000",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield


@pytest.fixture(autouse=True)
def _fresh_config() -> Generator[None, None, None]:
    """Each test starts from a freshly loaded configuration."""
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
