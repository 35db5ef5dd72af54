#!/usr/bin/env python3
"""
Integration tests for CLI Main Entry Point

Tests end-to-end CLI command execution with real command invocation.
"""

import pytest
from click.testing import CliRunner

from tests.fixtures.sync_fakes import TEST_AKAHU_ACCOUNT, TEST_YNAB_ACCOUNT
from ynabber.cli.main import main
from ynabber.core.config import get_config


@pytest.mark.integration
class TestCLIMainIntegration:
    """Test main CLI entry point with real command execution."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_help_command_lists_all_subcommands(self):
        """Test ynabber --help shows all registered subcommands."""
        result = self.runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Akahu to YNAB" in result.output
        for command in ["sync", "status", "ynab", "config", "version"]:
            assert command in result.output

    def test_version_command_shows_version_info(self):
        """Test ynabber version displays version and author."""
        result = self.runner.invoke(main, ["version"])

        assert result.exit_code == 0
        assert "ynabber v" in result.output
        assert "Author:" in result.output

    def test_config_command_shows_configuration(self):
        """Test ynabber config displays current configuration without secrets."""
        result = self.runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert "Current Configuration:" in result.output
        assert "Environment: test" in result.output
        assert "Watermark File:" in result.output
        assert "YNAB Token: set" in result.output
        assert "Processing Order: oldest-first" in result.output
        assert "Accounts: 0" in result.output
        assert "test-ynab-token" not in result.output

    def test_config_lists_accounts_from_settings(self):
        """Test configured accounts are shown."""
        settings = get_config().settings_file
        settings.parent.mkdir(parents=True, exist_ok=True)
        settings.write_text(
            f"accounts:\n  visa_test:\n    akahu_id: {TEST_AKAHU_ACCOUNT}\n    ynab_id: {TEST_YNAB_ACCOUNT}\n",
            encoding="utf-8",
        )

        result = self.runner.invoke(main, ["--config-env", "test", "config"])

        assert result.exit_code == 0
        assert "Accounts: 1" in result.output
        assert f"visa_test: {TEST_AKAHU_ACCOUNT} -> {TEST_YNAB_ACCOUNT}" in result.output

    def test_verbose_flag_shows_environment(self):
        """Test -v prints the environment before running the command."""
        result = self.runner.invoke(main, ["-v", "version"])

        assert result.exit_code == 0
        assert "Environment: test" in result.output

    def test_invalid_configuration_is_reported(self, monkeypatch):
        """Test configuration errors become a clean CLI error."""
        monkeypatch.setenv("YNABBER_PROCESSING_ORDER", "sideways")

        result = self.runner.invoke(main, ["config"])

        assert result.exit_code == 1
        assert "YNABBER_PROCESSING_ORDER" in result.output

    def test_invalid_command_shows_error(self):
        """Test unknown commands fail with usage error."""
        result = self.runner.invoke(main, ["nonexistent"])

        assert result.exit_code != 0
        assert "No such command" in result.output
