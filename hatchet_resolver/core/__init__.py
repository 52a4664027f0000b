"""
Core module for hatchet-resolver.

This module provides the foundational components used throughout the resolver:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - account_store: Thread-safe SQLite store for account fields
    - logger: Logging system with multiple outputs

Usage:
    from hatchet_resolver.core import (
        Config, load_config,
        AccountStore,
        setup_logging, get_logger,
        HatchetResolverError, ConfigError, TransportError
    )
"""

from hatchet_resolver.core.account_store import AccountStore, MemoryAccountStore
from hatchet_resolver.core.config import (
    AccountConfig,
    ApiConfig,
    Config,
    ExecutorConfig,
    LoggingConfig,
    load_config,
)
from hatchet_resolver.core.exceptions import (
    AccountStoreError,
    AuthUnavailableError,
    ConfigError,
    HatchetResolverError,
    IdentityUnavailableError,
    ParseError,
    QueryError,
    TransportError,
)
from hatchet_resolver.core.logger import (
    get_logger,
    log_request_failure,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "ApiConfig",
    "AccountConfig",
    "ExecutorConfig",
    "LoggingConfig",
    "load_config",
    # Account store
    "AccountStore",
    "MemoryAccountStore",
    # Exceptions
    "HatchetResolverError",
    "ConfigError",
    "QueryError",
    "TransportError",
    "ParseError",
    "IdentityUnavailableError",
    "AuthUnavailableError",
    "AccountStoreError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_request_failure",
    "shutdown_logging",
]
