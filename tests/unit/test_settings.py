import logging

import pytest

from nutrient_dws.config import Settings, get_logger, get_settings, setup_logging


class TestSettings:
    def test_default_values(self, monkeypatch):
        monkeypatch.delenv("NUTRIENT_API_KEY", raising=False)
        settings = Settings(_env_file=None)

        assert settings.api_key is None
        assert settings.base_url == "https://api.nutrient.io"
        assert settings.timeout_seconds == 60
        assert settings.max_retries == 0
        assert settings.retry_delay == 1.0
        assert settings.debug is False

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("NUTRIENT_API_KEY", "env_key")
        monkeypatch.setenv("NUTRIENT_MAX_RETRIES", "3")
        monkeypatch.setenv("NUTRIENT_BASE_URL", "https://dws.internal")

        settings = get_settings()

        assert settings.api_key == "env_key"
        assert settings.max_retries == 3
        assert settings.base_url == "https://dws.internal"


class TestLogging:
    @pytest.fixture(autouse=True)
    def reset_logger(self):
        logger = logging.getLogger("nutrient_dws")
        handlers, level = list(logger.handlers), logger.level
        yield
        logger.handlers = handlers
        logger.setLevel(level)

    def test_setup_logging_adds_handler_once(self):
        logger = logging.getLogger("nutrient_dws")
        logger.handlers = []

        setup_logging("debug")
        setup_logging("debug")

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_debug_setting_overrides_level(self):
        logger = logging.getLogger("nutrient_dws")
        Settings(_env_file=None, debug=True, log_level="ERROR").setup_logging()
        assert logger.level == logging.DEBUG

    def test_module_loggers_are_namespaced(self):
        assert get_logger("client").name == "nutrient_dws.client"
