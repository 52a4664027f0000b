"""
Configuration management for hatchet-resolver.

This module handles loading, validating, and providing access to the
resolver configuration stored in config.yaml, with a handful of
environment overrides for secrets and per-machine values.

The configuration file contains:
    - Hatchet API location, timeout and user agent
    - The account the resolver acts on behalf of (user name, account
      database, access token file)
    - Number of background worker threads
    - Log directory and console level

Configuration File Location:
    By default config.yaml is read from the current working directory.
    When no file exists there, built-in defaults are used. An explicitly
    passed path must exist.

Environment Overrides (a .env file is honoured via python-dotenv):
    HATCHET_USER_NAME     -> account.user_name
    HATCHET_ACCESS_TOKEN  -> account.access_token
    HATCHET_BASE_URL      -> api.base_url

Example config.yaml:
    api:
      base_url: "https://api.hatchet.is"
      version: "v1"
      timeout: 15

    account:
      user_name: "mrmaffen"
      database: "~/.hatchet-resolver/account.db"
      token_file: "~/.hatchet-resolver/token.json"

    executor:
      workers: 4

    logging:
      directory: "~/.hatchet-resolver/logs"
      level: "INFO"
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from hatchet_resolver.core.exceptions import ConfigError


CONFIG_FILENAME = "config.yaml"

DEFAULT_BASE_URL = "https://api.hatchet.is"
DEFAULT_API_VERSION = "v1"
DEFAULT_TIMEOUT = 15
DEFAULT_USER_AGENT = "hatchet-resolver/0.1"
DEFAULT_HOME = "~/.hatchet-resolver"
DEFAULT_WORKERS = 4
DEFAULT_LOG_LEVEL = "INFO"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ApiConfig:
    """
    Remote API settings.

    Attributes:
        base_url: Scheme and host of the API, without trailing slash.
        version: Path segment placed between base_url and every endpoint.
        timeout: Per-request timeout in seconds, handed to the transport.
        user_agent: User-Agent header sent with every request.
    """
    base_url: str
    version: str
    timeout: float
    user_agent: str


@dataclass(frozen=True)
class AccountConfig:
    """
    Settings of the account the resolver acts for.

    Attributes:
        user_name: Display name used to look up the user id when it is not
                   cached yet. None disables identity-scoped requests.
        database: Path of the SQLite account store.
        token_file: Path of the JSON access token file.
        access_token: Token taken from the environment; wins over token_file.
    """
    user_name: str | None
    database: Path
    token_file: Path
    access_token: str | None = None


@dataclass(frozen=True)
class ExecutorConfig:
    """
    Background executor settings.

    Attributes:
        workers: Number of worker threads resolving and sending requests.
    """
    workers: int


@dataclass(frozen=True)
class LoggingConfig:
    directory: Path
    level: str


@dataclass(frozen=True)
class Config:
    """
    Complete resolver configuration.

    Created by load_config() and immutable afterwards.

    Example:
        config = load_config()
        print(f"Talking to {config.api.base_url}/{config.api.version}")
        print(f"Using {config.executor.workers} workers")
    """
    api: ApiConfig
    account: AccountConfig
    executor: ExecutorConfig
    logging: LoggingConfig


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory
                     and falls back to defaults when it is absent.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is not found, has invalid YAML
                     syntax, or contains invalid values.

    Thread Safety:
        This function is NOT thread-safe. Call it once at startup, before
        the executor starts its workers.
    """
    load_dotenv()

    explicit = config_path is not None
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    raw_config: dict[str, Any] = {}
    if config_path.exists():
        raw_config = _read_yaml(config_path)
    elif explicit:
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    for section in ("api", "account", "executor", "logging"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )

    return Config(
        api=_parse_api_config(raw_config.get("api") or {}),
        account=_parse_account_config(raw_config.get("account") or {}),
        executor=_parse_executor_config(raw_config.get("executor") or {}),
        logging=_parse_logging_config(raw_config.get("logging") or {}),
    )


def _read_yaml(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file parses to None
    if raw_config is None:
        return {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )
    return raw_config


def _string_field(section: dict[str, Any], key: str, field_name: str, default: str) -> str:
    value = section.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"'{field_name}' must be a non-empty string",
            details={"field": field_name}
        )
    return value.strip()


def _parse_api_config(api_section: dict[str, Any]) -> ApiConfig:
    """
    Parse and validate the api configuration section.

    HATCHET_BASE_URL wins over the file value. A trailing slash on the
    base url is stripped so endpoint paths can be joined with '/'.

    Raises:
        ConfigError: If a string field is empty or timeout is not positive.
    """
    base_url = os.environ.get("HATCHET_BASE_URL") or _string_field(
        api_section, "base_url", "api.base_url", DEFAULT_BASE_URL
    )
    version = _string_field(api_section, "version", "api.version", DEFAULT_API_VERSION)
    user_agent = _string_field(api_section, "user_agent", "api.user_agent", DEFAULT_USER_AGENT)

    timeout = api_section.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(
            "'api.timeout' must be a positive number",
            details={"field": "api.timeout", "value": timeout}
        )

    return ApiConfig(
        base_url=base_url.rstrip("/"),
        version=version.strip("/"),
        timeout=float(timeout),
        user_agent=user_agent
    )


def _parse_account_config(account_section: dict[str, Any]) -> AccountConfig:
    user_name = os.environ.get("HATCHET_USER_NAME") or account_section.get("user_name")
    if user_name is not None and (not isinstance(user_name, str) or not user_name.strip()):
        raise ConfigError(
            "'account.user_name' must be a non-empty string or null",
            details={"field": "account.user_name"}
        )

    database = _string_field(
        account_section, "database", "account.database", f"{DEFAULT_HOME}/account.db"
    )
    token_file = _string_field(
        account_section, "token_file", "account.token_file", f"{DEFAULT_HOME}/token.json"
    )

    return AccountConfig(
        user_name=user_name.strip() if user_name else None,
        database=Path(database).expanduser().resolve(),
        token_file=Path(token_file).expanduser().resolve(),
        access_token=os.environ.get("HATCHET_ACCESS_TOKEN") or None
    )


def _parse_executor_config(executor_section: dict[str, Any]) -> ExecutorConfig:
    workers = executor_section.get("workers", DEFAULT_WORKERS)
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise ConfigError(
            "'executor.workers' must be a positive integer",
            details={"field": "executor.workers", "value": workers}
        )
    return ExecutorConfig(workers=workers)


def _parse_logging_config(logging_section: dict[str, Any]) -> LoggingConfig:
    directory = _string_field(
        logging_section, "directory", "logging.directory", f"{DEFAULT_HOME}/logs"
    )
    level = _string_field(logging_section, "level", "logging.level", DEFAULT_LOG_LEVEL).upper()
    if level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"'logging.level' must be one of {', '.join(VALID_LOG_LEVELS)}",
            details={"field": "logging.level", "value": level}
        )
    return LoggingConfig(
        directory=Path(directory).expanduser().resolve(),
        level=level
    )
