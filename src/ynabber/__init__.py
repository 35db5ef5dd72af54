"""
ynabber - Akahu to YNAB Transaction Sync

Keeps a YNAB budget in step with bank accounts connected through Akahu. Each
run finds the transactions that are new since the last successful sync and
creates each of them exactly once in YNAB.

Domain Packages:
- core: Configuration, errors, currency and date helpers
- akahu: Bank feed models and API client
- ynab: YNAB models, API client and payee matching
- sync: Watermark store, pagination walker and sync orchestrator
- cli: Command-line interface

Example Usage:
    from ynabber.sync import PaginationWalker, SyncOrchestrator, WatermarkStore
    from ynabber.ynab import PayeeMatcher
"""

__version__ = "0.3.0"
__author__ = "Basie"

from .core.config import AccountConfig, ProcessingOrder, SyncSettings, get_config
from .core.errors import SyncError
from .sync import PaginationWalker, SyncOrchestrator, WatermarkRecord, WatermarkStore
from .ynab import PayeeMatcher

__all__ = [
    # Configuration
    "AccountConfig",
    "ProcessingOrder",
    "SyncSettings",
    "get_config",
    # Errors
    "SyncError",
    # Sync engine
    "PaginationWalker",
    "PayeeMatcher",
    "SyncOrchestrator",
    "WatermarkRecord",
    "WatermarkStore",
]
