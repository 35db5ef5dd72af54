#!/usr/bin/env python3
"""
YNAB CLI - Budget lookups that help write settings.yaml.
"""

import click

from ..core.errors import SyncError
from ..core.json_utils import format_json
from ..ynab.client import YnabClient


@click.group()
def ynab() -> None:
    """YNAB budget lookup commands."""
    pass


@ynab.command()
@click.option("--filter", "name_filter", help="Only payees whose name contains this text (case-insensitive)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--include-transfers", is_flag=True, help="Include account transfer payees")
@click.pass_context
def payees(ctx: click.Context, name_filter: str | None, as_json: bool, include_transfers: bool) -> None:
    """
    List payees in the configured budget.

    Use the ids shown here in the `payees` rules of settings.yaml.

    Example:
      ynabber ynab payees --filter uber
    """
    config = ctx.obj["config"]
    if not config.ynab.access_token:
        raise click.ClickException("YNAB_ACCESS_TOKEN must be set")
    if not config.ynab.budget_id:
        raise click.ClickException("No YNAB budget configured (YNAB_BUDGET_ID or budget_id in settings.yaml)")

    client = YnabClient(config.ynab.access_token, base_url=config.ynab.base_url, timeout=config.ynab.timeout)
    try:
        all_payees = client.list_payees(config.ynab.budget_id)
    except SyncError as e:
        raise click.ClickException(str(e)) from e

    selected = [
        p
        for p in all_payees
        if not p.deleted
        and (include_transfers or not p.is_transfer)
        and (not name_filter or name_filter.lower() in p.name.lower())
    ]
    selected.sort(key=lambda p: p.name.lower())

    if as_json:
        click.echo(format_json([{"id": p.id, "name": p.name} for p in selected]))
        return

    for payee in selected:
        click.echo(f"{payee.id}  {payee.name}")
    click.echo(f"\n{len(selected)} payees")
