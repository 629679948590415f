"""
Configuration models for opskit.

Uses Pydantic for validation and type safety. Every field can be overridden
from the environment with ``SECTION__FIELD`` (e.g. ``PROCESS__TIMEOUT_SECONDS=30``).
"""
from typing import Literal, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml
from pathlib import Path
import os
import re

from opskit.constants import (
    DEFAULT_PG_CONNECT_TIMEOUT,
    DEFAULT_REDIS_CONNECT_TIMEOUT,
    DEFAULT_REDIS_SOCKET_TIMEOUT,
    DEFAULT_SCRIPT_RUNNER,
)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


class DatabaseConfig(BaseSettings):
    """PostgreSQL connection settings."""
    model_config = SettingsConfigDict(extra="ignore")

    connect_timeout_seconds: int = Field(default=DEFAULT_PG_CONNECT_TIMEOUT, ge=1, le=300)


class RedisConfig(BaseSettings):
    """Redis connection settings."""
    model_config = SettingsConfigDict(extra="ignore")

    socket_connect_timeout_seconds: float = Field(default=DEFAULT_REDIS_CONNECT_TIMEOUT, gt=0, le=300)
    socket_timeout_seconds: float = Field(default=DEFAULT_REDIS_SOCKET_TIMEOUT, gt=0, le=300)


class ProcessConfig(BaseSettings):
    """Script runner settings."""
    model_config = SettingsConfigDict(extra="ignore")

    # Prefix placed before the script name ("npm run build")
    script_runner: str = DEFAULT_SCRIPT_RUNNER
    # None blocks until the process exits
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    # Overrides the platform default npm global bin directory
    npm_global_bin: Optional[str] = None


class MonitoringConfig(BaseSettings):
    """Logging configuration."""
    model_config = SettingsConfigDict(extra="ignore")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_format: Literal["json", "text"] = "json"
    log_file: Optional[str] = None


class Config(BaseSettings):
    """Main configuration class."""
    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        extra="ignore",
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    process: ProcessConfig = Field(default_factory=ProcessConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    environment: str = "dev"

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings):
        # Environment variables win over values read from YAML
        return (env_settings, init_settings, file_secret_settings)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """Load configuration from YAML file."""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path, "r") as f:
            raw_content = f.read()

        # Regex to find ${VAR} or $VAR
        pattern = re.compile(r'\$\{([^}]+)\}|\$([a-zA-Z_][a-zA-Z0-9_]*)')

        def replace_match(match):
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, match.group(0))  # Return original if not found

        expanded_content = pattern.sub(replace_match, raw_content)
        config_dict = yaml.safe_load(expanded_content) or {}

        return cls(**config_dict)


def load_config(config_path: str | Path | None = None) -> Config:
    """
    Load and validate configuration.

    Args:
        config_path: Path to config.yaml file. If None, uses opskit/config/config.yaml

    Returns:
        Validated Config object

    Raises:
        FileNotFoundError: If config file not found
        pydantic.ValidationError: If configuration validation fails
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    return Config.from_yaml(config_path)


# Global config instance (loaded on first use)
_config_instance: Config | None = None


def get_config() -> Config:
    """Get or load the global configuration."""
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def set_config(config: Config | None) -> None:
    """Replace the global configuration. ``None`` forces a reload on next use."""
    global _config_instance
    _config_instance = config
