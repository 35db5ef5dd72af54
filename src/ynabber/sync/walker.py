#!/usr/bin/env python3
"""
Pagination Walker

Turns "list every transaction" into "list only what's new" by walking the
bank feed's cursor pages newest-first and stopping at the watermark.

Algorithm (stop-at-match scan):
1. Fetch a page (no cursor for the first request).
2. Take items from the front while their id differs from the watermark's
   last bank transaction id.
3. If the scan stopped inside the page, the watermark was found: done.
4. Otherwise keep the whole page and follow the next cursor.
5. No next cursor means history is exhausted: return what was collected.
   That's either a cold start (no watermark) or a watermark that has fallen
   off the feed's retained history; the result looks the same to the caller.

The returned sequence keeps the feed's newest-first order. No sorting happens.
"""

import logging
from dataclasses import dataclass, field

from ..akahu.client import TransactionPageSource
from ..akahu.models import AkahuTransaction
from .watermark import WatermarkRecord

logger = logging.getLogger(__name__)


@dataclass
class WalkResult:
    """Outcome of one walk over an account's feed."""

    watermark_id: str | None = None  # bank transaction id searched for
    transactions: list[AkahuTransaction] = field(default_factory=list)  # newest first
    pages_fetched: int = 0
    watermark_found: bool = False
    truncated: bool = False  # stopped by max_pages, not by the feed

    @property
    def is_cold_start(self) -> bool:
        """True when there was no watermark to look for."""
        return self.watermark_id is None

    @property
    def watermark_lost(self) -> bool:
        """True when a watermark existed but the feed no longer contains it."""
        return self.watermark_id is not None and not self.watermark_found


class PaginationWalker:
    """
    Collects transactions newer than an account's watermark.

    Args:
        source: Page source (normally AkahuClient)
        max_pages: Upper bound on pages fetched during a cold start; None for unbounded
    """

    def __init__(self, source: TransactionPageSource, max_pages: int | None = None):
        if max_pages is not None and max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        self.source = source
        self.max_pages = max_pages

    def collect_new(self, account_id: str, watermark: WatermarkRecord | None) -> list[AkahuTransaction]:
        """
        Return transactions not yet synchronized, newest first.

        Raises:
            TransportError: If a page fetch fails
            ParseError: If a page is malformed
        """
        return self.walk(account_id, watermark).transactions

    def walk(self, account_id: str, watermark: WatermarkRecord | None) -> WalkResult:
        """Run the stop-at-match scan and report how it ended."""
        stop_id = watermark.last_source_transaction_id if watermark else None
        result = WalkResult(watermark_id=stop_id)
        cursor: str | None = None
        # Only a cold start is bounded; with a watermark, stopping early would leave a gap
        limit = self.max_pages if watermark is None else None

        while True:
            if limit is not None and result.pages_fetched >= limit:
                result.truncated = True
                logger.warning(
                    f"Cold start for {account_id} stopped after {result.pages_fetched} pages; "
                    f"older history will not be imported"
                )
                break

            page = self.source.fetch_page(account_id, cursor)
            result.pages_fetched += 1
            logger.debug(f"Page {result.pages_fetched} for {account_id}: {len(page.items)} items")

            new_items = []
            for item in page.items:
                if item.id == stop_id:
                    break
                new_items.append(item)
            result.transactions.extend(new_items)

            if len(new_items) != len(page.items):
                # Hit a known transaction id: everything older is already synced
                result.watermark_found = True
                logger.info(
                    f"Found watermark {stop_id} at index {len(new_items)} of page "
                    f"{result.pages_fetched}, stopping search"
                )
                break

            if page.next_cursor is None:
                if stop_id is None:
                    logger.info(f"Cold start for {account_id}: read entire available history")
                else:
                    logger.warning(
                        f"Watermark {stop_id} for {account_id} not found in retained history; "
                        f"treating all {len(result.transactions)} transactions as new"
                    )
                break

            cursor = page.next_cursor

        logger.info(f"Total new transactions for {account_id}: {len(result.transactions)}")
        return result
