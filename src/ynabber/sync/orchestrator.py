#!/usr/bin/env python3
"""
Sync Orchestrator

For each tracked account: read the watermark, collect new bank transactions,
create them in YNAB one at a time, and advance the watermark after every
successful creation before moving on.

Delivery order matters. The walker returns transactions newest-first. If they
were delivered in that order and an older one failed after a newer one
succeeded, the watermark would already point past the failure and the next
run's stop-at-match scan would never offer it again. Delivering oldest-first
(the default) means a failure stops the run before anything newer commits, so
the failed transaction is retried next run. Newest-first stays available as
ProcessingOrder.NEWEST_FIRST for the legacy behaviour.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from ..akahu.models import AkahuTransaction
from ..core.config import AccountConfig, ProcessingOrder, SyncSettings
from ..core.currency import dollars_to_milliunits
from ..core.dates import to_ynab_date
from ..core.errors import ParseError, SyncError
from ..ynab.client import TransactionSink
from ..ynab.models import SaveTransaction
from ..ynab.payees import PayeeMatcher
from .walker import PaginationWalker, WalkResult
from .watermark import WatermarkRecord, WatermarkStore

logger = logging.getLogger(__name__)


class SyncStatus(Enum):
    """Outcome of syncing one account."""

    COMPLETED = "completed"
    DRY_RUN = "dry_run"  # nothing was sent to YNAB, watermark untouched
    FAILED = "failed"


@dataclass
class DeliveredTransaction:
    """A bank transaction successfully created in YNAB."""

    source: AkahuTransaction
    request: SaveTransaction
    ynab_transaction_id: str


@dataclass
class AccountSyncResult:
    """Result of syncing one account."""

    account: AccountConfig
    status: SyncStatus
    walk: WalkResult | None = None
    delivered: list[DeliveredTransaction] = field(default_factory=list)
    dry_run_requests: list[SaveTransaction] = field(default_factory=list)
    error: SyncError | None = None

    @property
    def created_count(self) -> int:
        """Number of transactions created in YNAB."""
        return len(self.delivered)

    @property
    def pending_count(self) -> int:
        """New transactions found but not delivered (failure or dry run)."""
        found = len(self.walk.transactions) if self.walk else 0
        return found - len(self.delivered)

    def raise_for_error(self) -> None:
        """Re-raise the account's error, if any."""
        if self.error is not None:
            raise self.error


class SyncOrchestrator:
    """
    Runs the incremental sync for tracked accounts.

    Single writer: runs sharing a watermark file must not overlap.
    """

    def __init__(
        self,
        walker: PaginationWalker,
        sink: TransactionSink,
        store: WatermarkStore,
        matcher: PayeeMatcher,
        settings: SyncSettings,
    ):
        self.walker = walker
        self.sink = sink
        self.store = store
        self.matcher = matcher
        self.settings = settings

    def build_request(self, account: AccountConfig, transaction: AkahuTransaction) -> SaveTransaction:
        """
        Map a bank transaction to a YNAB create request.

        A matched payee rule supplies payee_id; otherwise the raw description is
        sent as payee_name, never both.
        """
        payee_id = self.matcher.match(transaction.description)
        return SaveTransaction(
            account_id=account.ynab_id,
            amount=dollars_to_milliunits(transaction.amount),
            date=to_ynab_date(transaction.date),
            payee_id=payee_id,
            payee_name=None if payee_id is not None else transaction.description,
            memo=self.settings.memo,
            cleared="uncleared",
            approved=True,
        )

    def run(self, account: AccountConfig) -> AccountSyncResult:
        """
        Sync one account.

        SyncErrors are not raised: they stop the account's run and come back in
        result.error with status FAILED. Watermark advances committed before the
        failure are kept.
        """
        status = SyncStatus.DRY_RUN if self.settings.dry_run else SyncStatus.COMPLETED
        result = AccountSyncResult(account=account, status=status)
        current: AkahuTransaction | None = None

        try:
            watermark = self.store.load(account.akahu_id)
            if watermark is None:
                logger.info(f"No watermark for {account.name} ({account.akahu_id}): cold start")

            result.walk = self.walker.walk(account.akahu_id, watermark)
            pending = list(result.walk.transactions)
            if self.settings.processing_order == ProcessingOrder.OLDEST_FIRST:
                pending.reverse()

            for current in pending:
                try:
                    request = self.build_request(account, current)
                except ValueError as e:
                    raise ParseError(f"Cannot build YNAB request: {e}") from e

                if self.settings.dry_run:
                    logger.info(f"## DRY RUN ## {current.id}: {request.describe()}")
                    result.dry_run_requests.append(request)
                    continue

                ynab_transaction_id = self.sink.create_transaction(self.settings.budget_id, request)
                logger.info(
                    f"Created YNAB transaction {ynab_transaction_id} for {current.id}: {request.describe()}"
                )
                # Exists in YNAB from here on, even if the watermark write fails
                result.delivered.append(DeliveredTransaction(current, request, ynab_transaction_id))

                try:
                    record = WatermarkRecord(
                        source_account_id=account.akahu_id,
                        dest_account_id=account.ynab_id,
                        last_source_transaction_id=current.id,
                        last_dest_transaction_id=ynab_transaction_id,
                        last_transaction_timestamp=current.date,
                    )
                except ValueError as e:
                    raise ParseError(f"Cannot record watermark for {ynab_transaction_id}: {e}") from e
                self.store.save(record)
        except SyncError as e:
            if e.account_id is None:
                e.account_id = account.akahu_id
            if e.transaction_id is None and current is not None:
                e.transaction_id = current.id
            logger.error(f"Sync failed for {account.name}: {e}")
            result.status = SyncStatus.FAILED
            result.error = e

        return result

    def run_all(self, accounts: list[AccountConfig], fail_fast: bool = False) -> list[AccountSyncResult]:
        """
        Sync accounts sequentially.

        Args:
            accounts: Accounts to sync, in order
            fail_fast: Stop after the first failed account instead of continuing

        Returns:
            One result per account attempted; with fail_fast a failure is last
        """
        results = []
        for account in accounts:
            logger.info(f"Checking account {account.name} ({account.akahu_id})...")
            result = self.run(account)
            results.append(result)
            if fail_fast and result.status == SyncStatus.FAILED:
                logger.warning(f"Stopping after failed account {account.name}")
                break
        return results
