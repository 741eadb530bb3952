"""Configuration manager for settings stored as JSON."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError, FileSystemError, InvalidConfigError
from .logging import get_logger
from .paths import CONFIG_PATH

logger = get_logger(__name__)

ENV_OVERRIDES = {
    "MAILWRIGHT_SMTP_HOST": "smtp.host",
    "MAILWRIGHT_SMTP_PORT": "smtp.port",
    "MAILWRIGHT_SMTP_USERNAME": "smtp.username",
    "MAILWRIGHT_SMTP_PASSWORD": "smtp.password",
    "MAILWRIGHT_LOG_LEVEL": "logging.log_level",
}


class SMTPConfig(BaseModel):
    """Pydantic model for the SMTP transport."""

    host: str = "localhost"
    port: int = 587
    username: str = ""
    password: str = ""
    use_tls: bool = False  # implicit TLS (port 465)
    start_tls: bool = True
    timeout: float = 60.0  # in seconds
    max_retries: int = 3


class LoggingConfig(BaseModel):
    """Pydantic model for logging settings."""

    log_level: str = "INFO"
    log_dir: Optional[str] = None
    max_file_size: int = 5_242_880  # 5 MB
    backup_count: int = 5
    mask_strategy: Literal["full", "partial"] = "full"


class AppConfig(BaseModel):
    """Pydantic model for overall application configuration."""

    version: str = "0.1.0"
    smtp: SMTPConfig = Field(default_factory=SMTPConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Loads application configuration from a JSON file and the environment."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        environ: Optional[Dict[str, str]] = None,
    ):
        self.path = Path(config_path) if config_path else CONFIG_PATH
        self._environ = os.environ if environ is None else environ
        self.config = self._load_config()
        logger.debug(f"Configuration loaded from {self.path}")

    def _load_config(self) -> AppConfig:
        """Load configuration from file, or defaults if not present."""

        data: Dict[str, Any] = {}

        if self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse config file: {e}")
                raise InvalidConfigError(
                    f"Configuration file is not valid JSON: {str(e)}"
                ) from e
            except OSError as e:
                raise FileSystemError(
                    f"Failed to read configuration file: {self.path}"
                ) from e
        else:
            logger.info("No config file found, using default configuration.")

        if not isinstance(data, dict):
            raise InvalidConfigError("Configuration file must contain a JSON object")

        self._apply_env_overrides(data)

        try:
            return AppConfig(**data)
        except ValidationError as e:
            logger.error(f"Failed to validate config: {e}")
            raise InvalidConfigError(
                f"Configuration data does not match expected schema: {str(e)}"
            ) from e

    def _apply_env_overrides(self, data: Dict[str, Any]) -> None:
        """Overlay MAILWRIGHT_* environment variables onto raw config data."""

        for var, key_path in ENV_OVERRIDES.items():
            value = self._environ.get(var)
            if value is None:
                continue

            section, key = key_path.split(".")
            data.setdefault(section, {})[key] = value
            logger.debug(f"Config key '{key_path}' overridden from {var}")

    def get_config(self, key_path: str, default: Any = None) -> Any:
        """Get a configuration value using dot-separated key path."""

        obj: Any = self.config
        for key in key_path.split("."):
            if not hasattr(obj, key):
                return default
            obj = getattr(obj, key)
        return obj

    def init_logging(self):
        """Apply the logging section to the mailwright logging system."""

        from .logging import init_logging

        settings = self.config.logging
        try:
            return init_logging(
                settings.log_level,
                log_dir=Path(settings.log_dir) if settings.log_dir else None,
                max_file_size=settings.max_file_size,
                backup_count=settings.backup_count,
                mask_strategy=settings.mask_strategy,
            )
        except AttributeError as e:
            raise ConfigurationError(
                f"Invalid logging level: {settings.log_level}"
            ) from e
