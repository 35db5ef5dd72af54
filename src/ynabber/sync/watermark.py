#!/usr/bin/env python3
"""
Watermark Store

Remembers, per bank account, the last transaction successfully delivered to
YNAB. The file layout is a fixed five-line record per account:

    <akahu account id>
    <ynab account id>
    <akahu transaction id>
    <ynab transaction id>
    <transaction timestamp, RFC3339 UTC>

Records are concatenated with no separator; N accounts occupy exactly 5N lines.
Every write replaces the whole file through a temp file and os.replace, so a
crash mid-write leaves the previous file intact.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..core.datastore_mixin import FileDataStoreMixin
from ..core.dates import ensure_utc, format_rfc3339, parse_rfc3339
from ..core.errors import CorruptStoreError, NotFoundError, StorageError

logger = logging.getLogger(__name__)

LINES_PER_RECORD = 5


@dataclass(frozen=True)
class WatermarkRecord:
    """Sync position for one bank account."""

    source_account_id: str
    dest_account_id: str
    last_source_transaction_id: str
    last_dest_transaction_id: str
    last_transaction_timestamp: datetime  # diagnostics only, never used for ordering

    def __post_init__(self) -> None:
        for name in (
            "source_account_id",
            "dest_account_id",
            "last_source_transaction_id",
            "last_dest_transaction_id",
        ):
            value = getattr(self, name)
            # str.splitlines also breaks on \x0b, \x1c-\x1e, \x85, \u2028 and friends
            if not value or value.splitlines() != [value]:
                raise ValueError(f"{name} must be a non-empty single-line string, got {value!r}")
        # Store at the precision the file keeps
        normalised = ensure_utc(self.last_transaction_timestamp).replace(microsecond=0)
        object.__setattr__(self, "last_transaction_timestamp", normalised)

    def to_lines(self) -> list[str]:
        """Serialise to the five-line file representation."""
        return [
            self.source_account_id,
            self.dest_account_id,
            self.last_source_transaction_id,
            self.last_dest_transaction_id,
            format_rfc3339(self.last_transaction_timestamp),
        ]

    @classmethod
    def from_lines(cls, lines: list[str]) -> "WatermarkRecord":
        """
        Parse a five-line record.

        Raises:
            ValueError: If the record is malformed
        """
        if len(lines) != LINES_PER_RECORD:
            raise ValueError(f"expected {LINES_PER_RECORD} lines, got {len(lines)}")
        return cls(
            source_account_id=lines[0],
            dest_account_id=lines[1],
            last_source_transaction_id=lines[2],
            last_dest_transaction_id=lines[3],
            last_transaction_timestamp=parse_rfc3339(lines[4]),
        )


class WatermarkStore(FileDataStoreMixin):
    """
    DataStore for per-account watermarks.

    Single writer only: read-modify-write is not safe under concurrent
    processes, and no locking is attempted.
    """

    def __init__(self, path: Path):
        """
        Initialize watermark store.

        Args:
            path: Watermark file (typically ~/.cache/ynabber/.transaction_cache)
        """
        self.path = Path(path)

    def load_all(self) -> dict[str, WatermarkRecord]:
        """
        Load every record, keyed by bank account id, in file order.

        A missing file is an empty store.

        Raises:
            StorageError: If the file can't be read
            CorruptStoreError: If the file isn't a sequence of valid records
        """
        if not self.exists():
            return {}

        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read watermark file {self.path}: {e}") from e

        lines = text.splitlines()
        if len(lines) % LINES_PER_RECORD != 0:
            raise CorruptStoreError(
                f"Watermark file {self.path} has {len(lines)} lines, not a multiple of {LINES_PER_RECORD}"
            )

        records: dict[str, WatermarkRecord] = {}
        for offset in range(0, len(lines), LINES_PER_RECORD):
            chunk = lines[offset : offset + LINES_PER_RECORD]
            try:
                record = WatermarkRecord.from_lines(chunk)
            except ValueError as e:
                raise CorruptStoreError(
                    f"Invalid record at line {offset + 1} of {self.path}: {e}", account_id=chunk[0] or None
                ) from e
            if record.source_account_id in records:
                raise CorruptStoreError(
                    f"Duplicate record in {self.path}", account_id=record.source_account_id
                )
            records[record.source_account_id] = record
        return records

    def save_all(self, records: dict[str, WatermarkRecord]) -> None:
        """
        Atomically replace the file with the given records.

        Raises:
            StorageError: If the file can't be written
        """
        lines: list[str] = []
        for record in records.values():
            lines.extend(record.to_lines())
        contents = "".join(f"{line}\n" for line in lines)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        except OSError as e:
            raise StorageError(f"Cannot prepare watermark file {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(contents)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StorageError(f"Cannot write watermark file {self.path}: {e}") from e

    def load(self, source_account_id: str) -> WatermarkRecord | None:
        """
        Get the watermark for an account.

        Returns:
            The record, or None for an account never synced (cold start)
        """
        return self.load_all().get(source_account_id)

    def load_required(self, source_account_id: str) -> WatermarkRecord:
        """
        Get the watermark for an account that must already have one.

        Raises:
            NotFoundError: If the account has no record
        """
        record = self.load(source_account_id)
        if record is None:
            raise NotFoundError(f"No watermark recorded in {self.path}", account_id=source_account_id)
        return record

    def save(self, record: WatermarkRecord) -> None:
        """
        Upsert one account's record, leaving the others unchanged.

        Existing accounts keep their position in the file; new ones are appended.
        """
        records = self.load_all()
        records[record.source_account_id] = record
        self.save_all(records)
        logger.debug(
            f"Watermark for {record.source_account_id} -> {record.last_source_transaction_id} "
            f"({format_rfc3339(record.last_transaction_timestamp)})"
        )

    def item_count(self) -> int | None:
        """Get count of accounts with a watermark."""
        if not self.exists():
            return None
        return len(self.load_all())

    def summary_text(self) -> str:
        """Get human-readable summary."""
        if not self.exists():
            return "No watermarks recorded"
        count = self.item_count()
        return f"Watermarks: {count} account{'s' if count != 1 else ''}"
