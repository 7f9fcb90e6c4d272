"""
Configuration management for the client.
"""

import logging
from typing import Optional

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

DEFAULT_BASE_URL = "https://api.nutrient.io"
BUILD_ENDPOINT = "/build"


class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", env_prefix="NUTRIENT_", extra="ignore")

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 60
    max_retries: int = 0
    retry_delay: float = 1.0
    debug: bool = False
    log_level: str = "INFO"

    def setup_logging(self) -> None:
        """Configure logging for the client."""
        level_name = "DEBUG" if self.debug else self.log_level
        setup_logging(level_name)


def get_settings() -> Settings:
    return Settings()


def setup_logging(log_level: str = "INFO") -> None:
    """Attach a stream handler to the package logger once."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger("nutrient_dws")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name."""
    return logging.getLogger(f"nutrient_dws.{name}")
