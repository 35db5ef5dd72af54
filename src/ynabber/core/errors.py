#!/usr/bin/env python3
"""
Error Taxonomy for ynabber

All failures raised by the sync engine derive from SyncError so callers can
decide per account whether to abort the whole run or move on to the next one.
"""


class SyncError(Exception):
    """
    Base exception for sync failures.

    Carries the account and (where known) the source transaction involved so
    the caller can log the failure without re-deriving context.
    """

    def __init__(self, message: str, account_id: str | None = None, transaction_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.account_id = account_id
        self.transaction_id = transaction_id

    def __str__(self) -> str:
        context = []
        if self.account_id:
            context.append(f"account={self.account_id}")
        if self.transaction_id:
            context.append(f"transaction={self.transaction_id}")
        if context:
            return f"{self.message} ({', '.join(context)})"
        return self.message


class ConfigurationError(SyncError):
    """Invalid or incomplete configuration."""

    pass


class TransportError(SyncError):
    """Network failure or timeout talking to the bank feed or YNAB."""

    pass


class ParseError(SyncError):
    """Malformed response payload or persisted state."""

    pass


class NotFoundError(SyncError):
    """Watermark lookup miss for an account that was expected to exist."""

    pass


class CreationError(SyncError):
    """YNAB rejected a transaction (validation, auth, quota)."""

    def __init__(
        self,
        message: str,
        account_id: str | None = None,
        transaction_id: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, account_id=account_id, transaction_id=transaction_id)
        self.status_code = status_code


class StorageError(SyncError):
    """Watermark storage unavailable or unwritable."""

    pass


class CorruptStoreError(StorageError, ParseError):
    """Watermark file exists but cannot be parsed."""

    pass
