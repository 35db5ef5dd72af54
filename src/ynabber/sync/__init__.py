"""
Incremental Sync Package

Moves new bank transactions into YNAB exactly once.

Key Components:
- watermark: WatermarkStore, per-account "last synced" position on disk
- walker: PaginationWalker, stop-at-match scan over the bank feed's cursor pages
- orchestrator: SyncOrchestrator, delivery order and watermark commits

Safety Features:
- Watermark advances only after YNAB confirms each creation
- Whole-file atomic replace for every watermark write
- Dry-run mode never touches YNAB or the watermark file
"""

from .orchestrator import AccountSyncResult, DeliveredTransaction, SyncOrchestrator, SyncStatus
from .walker import PaginationWalker, WalkResult
from .watermark import WatermarkRecord, WatermarkStore

__all__ = [
    "AccountSyncResult",
    "DeliveredTransaction",
    "PaginationWalker",
    "SyncOrchestrator",
    "SyncStatus",
    "WalkResult",
    "WatermarkRecord",
    "WatermarkStore",
]
