#!/usr/bin/env python3
"""
DataStore Mixin - Common functionality for file-backed DataStore implementations.

Provides the metadata methods shared by every store that persists to a single
file.
"""

from abc import abstractmethod
from datetime import datetime
from pathlib import Path


class FileDataStoreMixin:
    """
    Mixin providing common metadata for single-file stores.

    Provides:
    - exists / last_modified / size_bytes from the backing file
    - age_days derived from last_modified

    Subclasses must set `self.path` and implement:
    - item_count() -> int | None
    - summary_text() -> str
    """

    path: Path

    def exists(self) -> bool:
        """Check if the backing file exists."""
        return self.path.exists()

    def last_modified(self) -> datetime | None:
        """Get modification time of the backing file."""
        if not self.exists():
            return None
        return datetime.fromtimestamp(self.path.stat().st_mtime)

    def age_days(self) -> int | None:
        """
        Get age of data in days since last modification.

        Returns:
            Number of days since last modification, or None if data doesn't exist
        """
        last_mod = self.last_modified()
        if last_mod is None:
            return None
        return (datetime.now() - last_mod).days

    def size_bytes(self) -> int | None:
        """Get size of the backing file."""
        if not self.exists():
            return None
        return self.path.stat().st_size

    @abstractmethod
    def item_count(self) -> int | None:
        """Get count of items/records in stored data."""
        ...

    @abstractmethod
    def summary_text(self) -> str:
        """Get human-readable summary of current data state."""
        ...
