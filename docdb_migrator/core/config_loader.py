"""Configuration management for the migration runner."""

import asyncio
import os
import re
from pathlib import Path
from typing import Any

import structlog
import yaml
from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import DEFAULT_ROOT_MARKER, MIGRATION_EXTENSION, QUALIFIER_DELIMITER
from .exceptions import ConfigurationError

logger = structlog.get_logger()

DEFAULT_CONFIG_FILE = "config/migrator.yml"
USER_CONFIG_FILE = Path.home() / ".config" / "docdb-migrator" / "migrator.yml"

# Environment variable -> config field, applied last so the environment always wins
ENV_OVERRIDES: dict[str, str] = {
    "MIGRATIONS_ROOT": "migrations_root",
    "MIGRATIONS_ROOT_MARKER": "root_marker",
    "STRICT_STRATEGY_SELECTION": "strict_strategy_selection",
    "MIGRATION_RUN_TIMEOUT": "run_timeout",
    "LOG_LEVEL": "log_level",
    "LOG_DIR": "log_dir",
}


class MigratorConfig(BaseSettings):
    """Main configuration for migration runs."""

    migrations_root: Path = Field(default=Path(DEFAULT_ROOT_MARKER), alias="MIGRATIONS_ROOT")
    root_marker: str | None = Field(default=DEFAULT_ROOT_MARKER, alias="MIGRATIONS_ROOT_MARKER")
    file_extension: str = MIGRATION_EXTENSION
    qualifier_delimiter: str = QUALIFIER_DELIMITER
    strict_strategy_selection: bool = Field(default=False, alias="STRICT_STRATEGY_SELECTION")
    run_timeout: float | None = Field(
        default=None, alias="MIGRATION_RUN_TIMEOUT", description="Overall run deadline in seconds"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: Path | None = Field(default=None, alias="LOG_DIR")
    config_file: str = Field(default=DEFAULT_CONFIG_FILE, alias="DOCDB_MIGRATOR_CONFIG")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        validate_assignment=True,
    )

    @field_validator("file_extension")
    @classmethod
    def _extension_has_dot(cls, value: str) -> str:
        if not value.startswith(".") or len(value) < 2:
            raise ValueError("file_extension must look like '.js'")
        return value

    @field_validator("qualifier_delimiter")
    @classmethod
    def _delimiter_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("qualifier_delimiter must not be empty")
        return value

    @field_validator("run_timeout")
    @classmethod
    def _timeout_positive(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("run_timeout must be positive")
        return value


def load_config(config_path: str | None = None) -> MigratorConfig:
    """Load configuration from multiple sources (synchronous interface).

    Args:
        config_path: Optional path to YAML config file

    Returns:
        Loaded configuration

    Note:
        Cannot be called from a running event loop; use load_config_async() there.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(load_config_async(config_path))
    raise RuntimeError(
        "load_config() cannot be called from within an async context. "
        "Use 'await load_config_async()' instead."
    )


async def load_config_async(config_path: str | None = None) -> MigratorConfig:
    """Load configuration from multiple sources (async interface).

    Precedence, lowest first: defaults, user config file, project config file,
    environment variables (including ``.env``).

    Args:
        config_path: Optional path to YAML config file

    Returns:
        Loaded configuration

    Raises:
        ConfigurationError: If a config file or value is invalid
    """
    load_dotenv()

    try:
        config = MigratorConfig()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid migrator configuration: {e}") from e

    await _load_config_file(config, USER_CONFIG_FILE)

    project_config_path = Path(
        config_path or os.getenv("DOCDB_MIGRATOR_CONFIG", DEFAULT_CONFIG_FILE)
    )
    await _load_config_file(config, project_config_path)
    config.config_file = str(project_config_path)

    _apply_env_overrides(config)

    logger.debug(
        "Configuration loaded",
        config_file=config.config_file,
        migrations_root=str(config.migrations_root),
        strict_strategy_selection=config.strict_strategy_selection,
    )
    return config


async def _load_config_file(config: MigratorConfig, config_path: Path) -> None:
    """Load and apply configuration from a YAML file."""
    if not config_path.exists():
        return

    yaml_config = await _load_yaml_config(config_path)
    section = yaml_config.get("migrations", yaml_config)
    if not isinstance(section, dict):
        raise ConfigurationError(f"'migrations' section in {config_path} must be a mapping")

    for key, value in section.items():
        _set_field(config, key, value, source=str(config_path))


def _apply_env_overrides(config: MigratorConfig) -> None:
    """Apply environment variable overrides."""
    for env_var, field_name in ENV_OVERRIDES.items():
        if (value := os.getenv(env_var)) is not None:
            _set_field(config, field_name, value, source=env_var)


def _set_field(config: MigratorConfig, key: str, value: Any, source: str) -> None:
    if key not in MigratorConfig.model_fields:
        logger.warning("Ignoring unknown configuration key", key=key, source=source)
        return
    try:
        setattr(config, key, value)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid value for '{key}' from {source}: {e}") from e


async def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML configuration file."""
    try:
        content = await asyncio.to_thread(config_path.read_text)
        content = _expand_yaml_config(content)
        loaded = yaml.safe_load(content)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load config from {config_path}: {e}") from e
    if not isinstance(loaded, dict):
        return {}
    return loaded


def _expand_yaml_config(content: str) -> str:
    """Securely expand environment variables with allowlist."""

    allowed_env_vars = {
        "HOME",
        "USER",
        "XDG_CONFIG_HOME",
        "XDG_DATA_HOME",
        "DOCDB_MIGRATOR_CONFIG",
        "MIGRATIONS_ROOT",
        "LOG_LEVEL",
        "LOG_DIR",
    }

    def replace_var(match):
        var_name = match.group(1)
        if var_name in allowed_env_vars:
            return os.getenv(var_name, match.group(0))
        logger.warning(
            "Environment variable not in allowlist, skipping expansion",
            variable=var_name,
            pattern=match.group(0),
        )
        return match.group(0)

    content = re.sub(r"\$\{([^}]+)\}", replace_var, content)
    content = re.sub(r"\$([A-Za-z_][A-Za-z0-9_]*)", replace_var, content)
    return content
