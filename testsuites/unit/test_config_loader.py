import pytest
import yaml
from loguru import logger

from page_loader.config import ConfigLoader, get_config, init_logger
from page_loader.exceptions import ConfigurationError


def test_env_override_and_defaults(monkeypatch, tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.dump({"ui": {"browser": "firefox", "action_timeout_ms": 2000}}),
        encoding="utf-8",
    )

    loader = ConfigLoader(config_path=config_path)
    assert loader.get("ui.browser") == "firefox"
    assert loader.get("ui.slow_mo", 0) == 0

    ConfigLoader.reset()
    monkeypatch.setenv("UI_BROWSER", "webkit")
    monkeypatch.setenv("UI_ACTION_TIMEOUT_MS", "750")
    loader = ConfigLoader(config_path=config_path)
    assert loader.get("ui.browser") == "webkit"
    assert loader.get("ui.action_timeout_ms", 5000) == 750


def test_env_booleans_follow_default_type(monkeypatch, tmp_path):
    monkeypatch.setenv("UI_HEADLESS", "false")
    loader = ConfigLoader(config_path=tmp_path / "missing.yaml")
    assert loader.get("ui.headless", True) is False


def test_invalid_yaml_raises_configuration_error(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("ui: [unclosed", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigLoader(config_path=config_path)


def test_repository_config_is_loaded_by_default():
    assert get_config("waits.page_load.timeout") == 30.0
    assert get_config("logging.level") == "INFO"


def test_init_logger_writes_configured_file_sink(tmp_path):
    log_file = tmp_path / "logs" / "page_loader.log"
    try:
        init_logger(level="debug", log_file=str(log_file), force=True)
        logger.debug("resolved email field")
    finally:
        init_logger(force=True)

    content = log_file.read_text(encoding="utf-8")
    assert "DEBUG" in content
    assert "resolved email field" in content
