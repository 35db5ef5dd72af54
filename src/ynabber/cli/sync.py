#!/usr/bin/env python3
"""
Sync CLI - Run the Akahu to YNAB sync and inspect watermarks.
"""

from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any

import click

from ..akahu.client import AkahuClient
from ..core.config import AccountConfig, Config, ProcessingOrder
from ..core.currency import format_milliunits
from ..core.dates import format_rfc3339
from ..core.errors import ConfigurationError, StorageError
from ..core.json_utils import write_json
from ..sync.orchestrator import AccountSyncResult, SyncOrchestrator, SyncStatus
from ..sync.walker import PaginationWalker
from ..sync.watermark import WatermarkStore
from ..ynab.client import YnabClient
from ..ynab.payees import PayeeMatcher


def build_orchestrator(
    config: Config, dry_run: bool = False, order: ProcessingOrder | None = None
) -> SyncOrchestrator:
    """
    Wire the sync engine from configuration.

    Raises:
        ConfigurationError: If credentials or the budget id are missing
    """
    if not config.akahu.app_token or not config.akahu.user_token:
        raise ConfigurationError("AKAHU_APP_TOKEN and AKAHU_USER_TOKEN must be set")
    if not config.ynab.access_token and not dry_run:
        raise ConfigurationError("YNAB_ACCESS_TOKEN must be set (or use --dry-run)")

    settings = config.sync_settings(dry_run=dry_run)
    if order is not None:
        settings = replace(settings, processing_order=order)

    akahu = AkahuClient(
        config.akahu.app_token,
        config.akahu.user_token,
        base_url=config.akahu.base_url,
        timeout=config.akahu.timeout,
    )
    ynab = YnabClient(config.ynab.access_token or "", base_url=config.ynab.base_url, timeout=config.ynab.timeout)

    return SyncOrchestrator(
        walker=PaginationWalker(akahu, max_pages=config.akahu.max_pages),
        sink=ynab,
        store=WatermarkStore(config.watermark_file),
        matcher=PayeeMatcher(config.payee_rules),
        settings=settings,
    )


def select_accounts(config: Config, selected: tuple[str, ...]) -> list[AccountConfig]:
    """Pick configured accounts by name or Akahu id; all of them when none selected."""
    if not selected:
        return list(config.accounts)

    accounts = []
    for key in selected:
        matches = [a for a in config.accounts if key in (a.name, a.akahu_id)]
        if not matches:
            raise click.BadParameter(f"No configured account named {key!r}", param_hint="--account")
        accounts.extend(a for a in matches if a not in accounts)
    return accounts


def result_to_dict(result: AccountSyncResult) -> dict[str, Any]:
    """Convert an account result to a JSON-friendly report entry."""
    walk = result.walk
    return {
        "account": result.account.name,
        "akahu_account_id": result.account.akahu_id,
        "ynab_account_id": result.account.ynab_id,
        "status": result.status.value,
        "new_transactions": len(walk.transactions) if walk else 0,
        "pages_fetched": walk.pages_fetched if walk else 0,
        "watermark_found": walk.watermark_found if walk else False,
        "created": [
            {"akahu_transaction_id": d.source.id, "ynab_transaction_id": d.ynab_transaction_id}
            for d in result.delivered
        ],
        "dry_run_requests": [request.to_dict() for request in result.dry_run_requests],
        "error": str(result.error) if result.error else None,
    }


@click.command()
@click.option("--dry-run", is_flag=True, help="Show what would be created without calling YNAB")
@click.option("--account", "accounts", multiple=True, help="Only sync this account (name or Akahu id); repeatable")
@click.option("--fail-fast", is_flag=True, help="Stop at the first account that fails")
@click.option(
    "--order",
    type=click.Choice([o.value for o in ProcessingOrder]),
    help="Override delivery order for this run",
)
@click.option("--report", type=click.Path(dir_okay=False, path_type=Path), help="Write a JSON run report")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def sync(
    ctx: click.Context,
    dry_run: bool,
    accounts: tuple[str, ...],
    fail_fast: bool,
    order: str | None,
    report: Path | None,
    verbose: bool,
) -> None:
    """
    Sync new Akahu transactions into YNAB.

    Examples:
      ynabber sync
      ynabber sync --dry-run --account visa_business
    """
    config = ctx.obj["config"]
    verbose = verbose or ctx.obj.get("verbose", False)

    selected = select_accounts(config, accounts)
    if not selected:
        raise click.ClickException(f"No accounts configured in {config.settings_file}")

    try:
        orchestrator = build_orchestrator(config, dry_run=dry_run, order=ProcessingOrder(order) if order else None)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        click.echo("ynabber Sync")
        click.echo(f"Accounts: {', '.join(a.name for a in selected)}")
        click.echo(f"Order: {orchestrator.settings.processing_order.value}")
        click.echo(f"Mode: {'Dry run' if dry_run else 'Create transactions'}")
        click.echo()

    results = orchestrator.run_all(selected, fail_fast=fail_fast)

    for result in results:
        _echo_result(result, verbose)

    if report:
        write_json(
            report,
            {
                "timestamp": datetime.now().isoformat(timespec="seconds"),
                "dry_run": dry_run,
                "accounts": [result_to_dict(r) for r in results],
            },
        )
        click.echo(f"Report saved to: {report}")

    failed = [r for r in results if r.status == SyncStatus.FAILED]
    if failed and fail_fast:
        skipped = len(selected) - len(results)
        raise click.ClickException(f"Sync aborted (--fail-fast), {skipped} account(s) not attempted")
    if failed:
        raise click.ClickException(f"{len(failed)} of {len(results)} accounts failed")

    if dry_run:
        click.echo("\n💡 This was a dry run. Nothing was sent to YNAB and no watermark moved.")


def _echo_result(result: AccountSyncResult, verbose: bool) -> None:
    """Print one account's outcome."""
    name = result.account.name
    walk = result.walk

    if result.status == SyncStatus.FAILED:
        click.echo(f"❌ {name}: {result.error}", err=True)
        if result.delivered:
            click.echo(f"   Created before failure: {result.created_count}")
            if isinstance(result.error, StorageError):
                last = result.delivered[-1]
                click.echo(
                    f"   Watermark not saved after {last.source.id} -> {last.ynab_transaction_id}; "
                    "check YNAB for a duplicate after the next sync"
                )
        return

    if walk is not None and walk.watermark_lost:
        click.echo(f"⚠️  {name}: last synced transaction is no longer in the Akahu feed")
    if walk is not None and walk.truncated:
        click.echo(f"⚠️  {name}: first sync stopped after {walk.pages_fetched} pages")

    if result.status == SyncStatus.DRY_RUN:
        click.echo(f"🔎 {name}: {len(result.dry_run_requests)} transactions would be created")
        for request in result.dry_run_requests:
            click.echo(f"   {request.describe()}")
        return

    click.echo(f"✅ {name}: created {result.created_count} transactions")
    if verbose:
        for delivered in result.delivered:
            click.echo(
                f"   {delivered.request.date.isoformat()} {format_milliunits(delivered.request.amount)} "
                f"{delivered.source.description} -> {delivered.ynab_transaction_id}"
            )


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """
    Show where each account's last sync left off.

    Example:
      ynabber status
    """
    config = ctx.obj["config"]
    store = WatermarkStore(config.watermark_file)

    try:
        records = store.load_all()
    except StorageError as e:
        raise click.ClickException(str(e)) from e

    click.echo(store.summary_text())
    age = store.age_days()
    if age is not None:
        click.echo(f"Last written: {age} days ago ({store.path})")

    names = {a.akahu_id: a.name for a in config.accounts}
    for account_id, record in records.items():
        click.echo(f"  {names.get(account_id, account_id)}:")
        click.echo(f"    Akahu: {account_id} / {record.last_source_transaction_id}")
        click.echo(f"    YNAB:  {record.dest_account_id} / {record.last_dest_transaction_id}")
        click.echo(f"    Transaction time: {format_rfc3339(record.last_transaction_timestamp)}")

    for account in config.accounts:
        if account.akahu_id not in records:
            click.echo(f"  {account.name}: never synced (first sync reads full history)")
