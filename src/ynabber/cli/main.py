#!/usr/bin/env python3
"""
Main CLI Entry Point for ynabber

Provides the command-line interface for syncing Akahu transactions into YNAB.
"""

import logging
import os

import click

from ..core.config import get_config, reload_config
from ..core.errors import ConfigurationError


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    ynabber - Akahu to YNAB Transaction Sync

    Creates each new bank transaction in YNAB exactly once, remembering per
    account where the last sync left off.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)

    # Set environment if specified
    if config_env:
        os.environ["YNABBER_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"

    try:
        config = reload_config() if (config_env or debug) else get_config()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("ynabber").setLevel(logging.DEBUG)

    # Store global options
    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config

    if verbose:
        click.echo(f"Environment: {config.environment.value}")
        click.echo(f"Config directory: {config.config_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    from ynabber import __author__, __version__

    click.echo(f"ynabber v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Settings File: {config_obj.settings_file}")
    click.echo(f"  Watermark File: {config_obj.watermark_file}")
    click.echo(f"  YNAB Budget: {config_obj.ynab.budget_id or '(not set)'}")
    click.echo(f"  YNAB Token: {'set' if config_obj.ynab.access_token else 'not set'}")
    akahu_ready = config_obj.akahu.app_token and config_obj.akahu.user_token
    click.echo(f"  Akahu Tokens: {'set' if akahu_ready else 'not set'}")
    click.echo(f"  Processing Order: {config_obj.processing_order.value}")
    click.echo(f"  Cold Start Page Limit: {config_obj.akahu.max_pages or 'unbounded'}")
    click.echo(f"  Accounts: {len(config_obj.accounts)}")
    for account in config_obj.accounts:
        click.echo(f"    {account.name}: {account.akahu_id} -> {account.ynab_id}")
    click.echo(f"  Payee Rules: {len(config_obj.payee_rules)}")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")


# Import subcommands
from .sync import status, sync  # noqa: E402
from .ynab import ynab  # noqa: E402

main.add_command(sync)
main.add_command(status)
main.add_command(ynab)


if __name__ == "__main__":
    main()
