"""
Core Utilities Package

Shared configuration, error types and helpers used by the bank feed, YNAB and
sync packages.

This package provides:
- Configuration management (environment, .env and settings.yaml)
- The SyncError taxonomy
- Currency conversion with integer milliunit arithmetic
- RFC3339 timestamp handling
- The DataStore protocol for local state
"""

from .config import (
    AccountConfig,
    Config,
    Environment,
    ProcessingOrder,
    SyncSettings,
    get_config,
    reload_config,
)
from .currency import dollars_to_milliunits, format_milliunits, milliunits_to_dollars_str
from .dates import ensure_utc, format_rfc3339, parse_rfc3339, to_ynab_date
from .errors import (
    ConfigurationError,
    CorruptStoreError,
    CreationError,
    NotFoundError,
    ParseError,
    StorageError,
    SyncError,
    TransportError,
)

__all__ = [
    # Configuration
    "AccountConfig",
    "Config",
    "Environment",
    "ProcessingOrder",
    "SyncSettings",
    "get_config",
    "reload_config",
    # Currency utilities
    "dollars_to_milliunits",
    "format_milliunits",
    "milliunits_to_dollars_str",
    # Dates
    "ensure_utc",
    "format_rfc3339",
    "parse_rfc3339",
    "to_ynab_date",
    # Errors
    "ConfigurationError",
    "CorruptStoreError",
    "CreationError",
    "NotFoundError",
    "ParseError",
    "StorageError",
    "SyncError",
    "TransportError",
]
