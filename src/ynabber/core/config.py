#!/usr/bin/env python3
"""
Configuration Management for ynabber

Handles environment-based configuration with secure defaults and validation.
Secrets (API tokens) come from the environment or a .env file; the tracked
accounts and payee rules come from settings.yaml in the config directory.

Only the CLI layer reads the process-wide configuration. The sync engine is
handed explicit per-run values (AccountConfig, SyncSettings) built from it.
"""

import logging
import os
import re
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

SETTINGS_FILE_NAME = "settings.yaml"
WATERMARK_FILE_NAME = ".transaction_cache"
DEFAULT_MEMO = "🤖"


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class ProcessingOrder(Enum):
    """Order in which new bank transactions are delivered to YNAB."""

    # Watermark never moves past an undelivered transaction
    OLDEST_FIRST = "oldest-first"
    # Feed order; a failure after a success skips the failed transaction for good
    NEWEST_FIRST = "newest-first"


@dataclass(frozen=True)
class AccountConfig:
    """A tracked bank account and the YNAB account it feeds."""

    name: str
    akahu_id: str
    ynab_id: str


@dataclass(frozen=True)
class SyncSettings:
    """Per-run sync options handed to the orchestrator."""

    budget_id: str
    dry_run: bool = False
    processing_order: ProcessingOrder = ProcessingOrder.OLDEST_FIRST
    memo: str | None = DEFAULT_MEMO


@dataclass
class YNABConfig:
    """YNAB API configuration."""

    access_token: str | None = None
    budget_id: str | None = None
    base_url: str = "https://api.ynab.com/v1"
    timeout: int = 30


@dataclass
class AkahuConfig:
    """Akahu bank feed API configuration."""

    app_token: str | None = None
    user_token: str | None = None
    base_url: str = "https://api.akahu.io/v1"
    timeout: int = 30
    # Bound on pages scanned during a cold start; None means unbounded
    max_pages: int | None = 50


@dataclass
class Config:
    """
    Main configuration class for ynabber.

    Loads configuration from environment variables and settings.yaml with
    secure defaults and validation for each environment type.
    """

    environment: Environment

    # Core directories
    config_dir: Path
    cache_dir: Path

    # Component configurations
    ynab: YNABConfig
    akahu: AkahuConfig

    accounts: list[AccountConfig] = field(default_factory=list)
    payee_rules: list[tuple[str, str]] = field(default_factory=list)

    memo: str | None = DEFAULT_MEMO
    processing_order: ProcessingOrder = ProcessingOrder.OLDEST_FIRST

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @property
    def settings_file(self) -> Path:
        """Path of the YAML settings file."""
        return self.config_dir / SETTINGS_FILE_NAME

    @property
    def watermark_file(self) -> Path:
        """Path of the per-account watermark store."""
        return self.cache_dir / WATERMARK_FILE_NAME

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables and settings.yaml."""
        env = Environment(os.getenv("YNABBER_ENV", "development"))

        # Base directories
        if env == Environment.TEST:
            default_base = Path(tempfile.gettempdir()) / "test_ynabber"
            config_dir = Path(os.getenv("YNABBER_CONFIG_DIR", str(default_base / "config")))
            cache_dir = Path(os.getenv("YNABBER_CACHE_DIR", str(default_base / "cache")))
        else:
            config_dir = _resolve_dir("YNABBER_CONFIG_DIR", "XDG_CONFIG_HOME", ".config")
            cache_dir = _resolve_dir("YNABBER_CACHE_DIR", "XDG_CACHE_HOME", ".cache")

        ynab = YNABConfig(
            access_token=os.getenv("YNAB_ACCESS_TOKEN"),
            budget_id=os.getenv("YNAB_BUDGET_ID"),
            timeout=_parse_int("YNAB_TIMEOUT", "30"),
        )

        max_pages = _parse_int("AKAHU_MAX_PAGES", "50")
        akahu = AkahuConfig(
            app_token=os.getenv("AKAHU_APP_TOKEN"),
            user_token=os.getenv("AKAHU_USER_TOKEN"),
            timeout=_parse_int("AKAHU_TIMEOUT", "30"),
            max_pages=max_pages if max_pages > 0 else None,
        )

        order_value = os.getenv("YNABBER_PROCESSING_ORDER", ProcessingOrder.OLDEST_FIRST.value)
        try:
            processing_order = ProcessingOrder(order_value.lower())
        except ValueError as e:
            raise ConfigurationError(
                f"YNABBER_PROCESSING_ORDER must be one of "
                f"{', '.join(o.value for o in ProcessingOrder)}, got {order_value!r}"
            ) from e

        config = cls(
            environment=env,
            config_dir=config_dir,
            cache_dir=cache_dir,
            ynab=ynab,
            akahu=akahu,
            memo=os.getenv("YNABBER_MEMO", DEFAULT_MEMO) or None,
            processing_order=processing_order,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
        config.load_settings_file()
        return config

    def load_settings_file(self, path: Path | None = None) -> None:
        """
        Load tracked accounts and payee rules from settings.yaml.

        A missing file leaves both empty. budget_id in the file overrides
        YNAB_BUDGET_ID.

        Raises:
            ConfigurationError: If the file is unreadable or malformed
        """
        settings_path = path or self.settings_file
        if not settings_path.exists():
            return

        try:
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read settings file {settings_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {settings_path} must contain a mapping")

        if data.get("budget_id"):
            self.ynab.budget_id = str(data["budget_id"])
        self.accounts = parse_accounts(data.get("accounts") or {})
        self.payee_rules = parse_payee_rules(data.get("payees") or [])

    def sync_settings(self, dry_run: bool = False) -> SyncSettings:
        """Build the explicit per-run settings passed to the orchestrator."""
        if not self.ynab.budget_id:
            raise ConfigurationError("No YNAB budget configured (YNAB_BUDGET_ID or budget_id in settings.yaml)")
        return SyncSettings(
            budget_id=self.ynab.budget_id,
            dry_run=dry_run,
            processing_order=self.processing_order,
            memo=self.memo,
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        # Tokens are mandatory where real money moves
        if self.environment == Environment.PRODUCTION:
            if not self.ynab.access_token:
                errors.append("YNAB_ACCESS_TOKEN is required in production")
            if not self.akahu.app_token or not self.akahu.user_token:
                errors.append("AKAHU_APP_TOKEN and AKAHU_USER_TOKEN are required in production")

        if self.ynab.timeout <= 0:
            errors.append("YNAB timeout must be positive")
        if self.akahu.timeout <= 0:
            errors.append("Akahu timeout must be positive")

        seen = set()
        for account in self.accounts:
            if account.akahu_id in seen:
                errors.append(f"Bank account {account.akahu_id} is configured more than once")
            seen.add(account.akahu_id)

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        # Configure format based on environment
        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        # Reduce noise from external libraries in production
        if self.environment == Environment.PRODUCTION:
            logging.getLogger("urllib3").setLevel(logging.WARNING)
            logging.getLogger("requests").setLevel(logging.WARNING)

    def get_sensitive_fields(self) -> list:
        """Get list of field names that contain sensitive data."""
        return [
            "ynab.access_token",
            "akahu.app_token",
            "akahu.user_token",
        ]

    def to_dict(self, include_sensitive: bool = False) -> dict[str, Any]:
        """Convert configuration to dictionary, optionally excluding sensitive data."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if field_name == "accounts":
                result[field_name] = [account.__dict__.copy() for account in field_value]
            elif field_name == "payee_rules":
                result[field_name] = [{"id": payee_id, "pattern": pattern} for payee_id, pattern in field_value]
            elif isinstance(field_value, Path):
                result[field_name] = str(field_value)
            elif isinstance(field_value, Enum):
                result[field_name] = field_value.value
            elif hasattr(field_value, "__dict__"):
                # Nested dataclass
                nested_dict: dict[str, Any] = {}
                for nested_name, nested_value in field_value.__dict__.items():
                    full_field_name = f"{field_name}.{nested_name}"

                    if not include_sensitive and full_field_name in self.get_sensitive_fields():
                        nested_dict[nested_name] = "***REDACTED***" if nested_value else None
                    else:
                        nested_dict[nested_name] = nested_value

                result[field_name] = nested_dict
            else:
                result[field_name] = field_value

        return result


def parse_accounts(data: Any) -> list[AccountConfig]:
    """
    Parse the `accounts` section of settings.yaml.

    Expected shape: {name: {akahu_id: ..., ynab_id: ...}}, in document order.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("'accounts' must be a mapping of name -> {akahu_id, ynab_id}")

    accounts = []
    for name, entry in data.items():
        if not isinstance(entry, dict) or not entry.get("akahu_id") or not entry.get("ynab_id"):
            raise ConfigurationError(f"Account '{name}' needs both akahu_id and ynab_id")
        accounts.append(AccountConfig(name=str(name), akahu_id=str(entry["akahu_id"]), ynab_id=str(entry["ynab_id"])))
    return accounts


def parse_payee_rules(data: Any) -> list[tuple[str, str]]:
    """
    Parse the `payees` section of settings.yaml into ordered (id, pattern) pairs.

    Accepts either a list of {id, pattern} entries or a mapping of id -> pattern;
    both keep document order, which is the evaluation order.

    Raises:
        ConfigurationError: On malformed entries or invalid regular expressions
    """
    if isinstance(data, dict):
        pairs = list(data.items())
    elif isinstance(data, list):
        pairs = []
        for entry in data:
            if not isinstance(entry, dict) or "id" not in entry or "pattern" not in entry:
                raise ConfigurationError(f"Payee rule must have 'id' and 'pattern': {entry!r}")
            pairs.append((entry["id"], entry["pattern"]))
    else:
        raise ConfigurationError("'payees' must be a list of {id, pattern} or a mapping of id -> pattern")

    rules = []
    for payee_id, pattern in pairs:
        if payee_id is None or not str(payee_id).strip():
            raise ConfigurationError(f"Payee rule for pattern {pattern!r} has an empty id")
        payee_id = str(payee_id)
        if not isinstance(pattern, str):
            raise ConfigurationError(f"Pattern for payee {payee_id} must be a string")
        try:
            re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid pattern for payee {payee_id}: {e}") from e
        rules.append((payee_id, pattern))
    return rules


def _resolve_dir(override_var: str, xdg_var: str, home_fallback: str) -> Path:
    """Resolve an app directory: explicit override, then XDG base dir, then ~/<fallback>."""
    override = os.getenv(override_var)
    if override:
        return Path(override).expanduser()
    base = os.getenv(xdg_var)
    base_dir = Path(base).expanduser() if base else Path.home() / home_fallback
    return base_dir / "ynabber"


def _parse_int(name: str, default: str) -> int:
    """Read an integer environment variable."""
    value = os.getenv(name, default)
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        # Validate configuration
        errors = _config.validate()
        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

        # Setup logging
        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()
