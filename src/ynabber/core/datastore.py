#!/usr/bin/env python3
"""
DataStore Protocol - Standard interface for local state persistence.

Separates "where the data lives" from the sync logic that uses it, so the
orchestrator only ever talks to load/save and the CLI only to metadata.
"""

from datetime import datetime
from typing import Protocol, TypeVar

T = TypeVar("T")


class DataStore(Protocol[T]):
    """
    Protocol for local data persistence and metadata queries.

    Type parameter T represents the stored data type (e.g. a mapping of
    watermark records keyed by account).
    """

    def exists(self) -> bool:
        """
        Check if data exists in storage.

        Returns:
            True if the backing file exists, False otherwise
        """
        ...

    def load_all(self) -> T:
        """
        Load all data from storage.

        Returns:
            Stored data structure

        Raises:
            StorageError: If storage is unreadable or corrupted
        """
        ...

    def save_all(self, data: T) -> None:
        """
        Replace all stored data atomically.

        Args:
            data: Data to persist
        """
        ...

    def last_modified(self) -> datetime | None:
        """Timestamp of last modification, or None if data doesn't exist."""
        ...

    def age_days(self) -> int | None:
        """Days since last modification, or None if data doesn't exist."""
        ...

    def item_count(self) -> int | None:
        """Count of stored records, or None if data doesn't exist."""
        ...

    def size_bytes(self) -> int | None:
        """Storage size in bytes, or None if data doesn't exist."""
        ...

    def summary_text(self) -> str:
        """Brief text description for display in CLI output and logs."""
        ...
