"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import pytest

import ynabber.core.config as config_module
from tests.fixtures.sync_fakes import TEST_AKAHU_ACCOUNT, TEST_BUDGET, TEST_YNAB_ACCOUNT
from ynabber.core.config import AccountConfig, SyncSettings


@pytest.fixture
def test_account() -> AccountConfig:
    """Tracked account used across sync tests."""
    return AccountConfig(name="visa_test", akahu_id=TEST_AKAHU_ACCOUNT, ynab_id=TEST_YNAB_ACCOUNT)


@pytest.fixture
def sync_settings() -> SyncSettings:
    """Default (oldest-first, live) sync settings."""
    return SyncSettings(budget_id=TEST_BUDGET)


@pytest.fixture
def sample_akahu_item() -> dict:
    """Sample Akahu transaction item as returned by the API."""
    return {
        "_id": "trans_test0001",
        "_account": TEST_AKAHU_ACCOUNT,
        "_user": "user_test",
        "_connection": "conn_test",
        "created_at": "2024-08-15T20:00:00.000Z",
        "updated_at": "2024-08-15T20:00:00.000Z",
        "date": "2024-08-15T12:00:00.000Z",
        "hash": "hash_test0001",
        "description": "UBER EATS CAFE",
        "amount": -45.99,
        "type": "EFTPOS",
        "merchant": {"_id": "merchant_test", "name": "Uber Eats"},
        "meta": {"logo": "https://example.invalid/logo.png"},
    }


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests don't touch real config or watermarks
    monkeypatch.setenv("YNABBER_ENV", "test")
    monkeypatch.setenv("YNABBER_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("YNABBER_CACHE_DIR", str(tmp_path / "cache"))

    # Mock sensitive environment variables
    monkeypatch.setenv("YNAB_ACCESS_TOKEN", "test-ynab-token")
    monkeypatch.setenv("YNAB_BUDGET_ID", TEST_BUDGET)
    monkeypatch.setenv("AKAHU_APP_TOKEN", "app_token_test")
    monkeypatch.setenv("AKAHU_USER_TOKEN", "user_token_test")
    for name in ("YNABBER_PROCESSING_ORDER", "YNABBER_MEMO", "AKAHU_MAX_PAGES", "LOG_LEVEL", "DEBUG"):
        monkeypatch.delenv(name, raising=False)

    # Drop any configuration cached by an earlier test
    monkeypatch.setattr(config_module, "_config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "akahu: Tests for the Akahu bank feed")
    config.addinivalue_line("markers", "ynab: Tests for YNAB integration")
    config.addinivalue_line("markers", "sync: Tests for watermark, walker and orchestrator")
