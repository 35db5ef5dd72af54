#!/usr/bin/env python3
"""
Unit tests for the stop-at-match pagination walker.
"""

from datetime import datetime, timezone

import pytest

from tests.fixtures.sync_fakes import TEST_AKAHU_ACCOUNT, FakePageSource, make_feed
from ynabber.core.errors import TransportError
from ynabber.sync.walker import PaginationWalker
from ynabber.sync.watermark import WatermarkRecord


def watermark_at(transaction_id: str) -> WatermarkRecord:
    return WatermarkRecord(
        source_account_id=TEST_AKAHU_ACCOUNT,
        dest_account_id="ynab-account",
        last_source_transaction_id=transaction_id,
        last_dest_transaction_id=f"ynab-{transaction_id}",
        last_transaction_timestamp=datetime(2024, 8, 1, tzinfo=timezone.utc),
    )


def ids(transactions) -> list[str]:
    return [t.id for t in transactions]


@pytest.mark.sync
class TestStopAtMatch:
    """Test the walker stops at the watermark."""

    def test_stops_on_second_page_without_third_request(self):
        """Test the watermark at the head of page 2 ends the walk after two requests."""
        feed = make_feed(["tx_1001", "tx_1000", "tx_999", "tx_998", "tx_997", "tx_996"])
        source = FakePageSource(feed, page_size=2)
        walker = PaginationWalker(source)

        result = walker.collect_new(TEST_AKAHU_ACCOUNT, watermark_at("tx_999"))

        assert ids(result) == ["tx_1001", "tx_1000"]
        assert source.requests == [(TEST_AKAHU_ACCOUNT, None), (TEST_AKAHU_ACCOUNT, "cursor-1")]

    def test_stops_mid_page(self):
        """Test a match inside a page keeps only the items before it."""
        feed = make_feed(["tx_5", "tx_4", "tx_3", "tx_2", "tx_1"])
        source = FakePageSource(feed, page_size=3)

        walk = PaginationWalker(source).walk(TEST_AKAHU_ACCOUNT, watermark_at("tx_4"))

        assert ids(walk.transactions) == ["tx_5"]
        assert walk.watermark_found
        assert walk.pages_fetched == 1

    def test_watermark_first_item_returns_nothing(self):
        """Test no new transactions means an empty result after one page."""
        feed = make_feed(["tx_3", "tx_2", "tx_1"])
        source = FakePageSource(feed, page_size=2)

        walk = PaginationWalker(source).walk(TEST_AKAHU_ACCOUNT, watermark_at("tx_3"))

        assert walk.transactions == []
        assert walk.watermark_found
        assert source.pages_served == 1

    def test_preserves_feed_order_across_pages(self):
        """Test items accumulate newest-first without sorting."""
        feed = make_feed(["tx_9", "tx_8", "tx_7", "tx_6", "tx_5", "tx_4", "tx_3"])
        source = FakePageSource(feed, page_size=2)

        result = PaginationWalker(source).collect_new(TEST_AKAHU_ACCOUNT, watermark_at("tx_4"))

        assert ids(result) == ["tx_9", "tx_8", "tx_7", "tx_6", "tx_5"]
        assert source.pages_served == 3


@pytest.mark.sync
class TestExhaustedHistory:
    """Test behaviour when no watermark match is found."""

    def test_cold_start_drains_history(self):
        """Test no watermark reads all three pages and returns all six items."""
        feed = make_feed([f"tx_{n}" for n in range(6, 0, -1)])
        source = FakePageSource(feed, page_size=2)

        walk = PaginationWalker(source).walk(TEST_AKAHU_ACCOUNT, None)

        assert ids(walk.transactions) == ["tx_6", "tx_5", "tx_4", "tx_3", "tx_2", "tx_1"]
        assert walk.pages_fetched == 3
        assert walk.is_cold_start
        assert not walk.watermark_found
        assert not walk.truncated

    def test_lost_watermark_returns_everything(self, caplog):
        """Test a watermark missing from history yields full history plus a warning."""
        feed = make_feed(["tx_4", "tx_3", "tx_2"])
        source = FakePageSource(feed, page_size=2)

        with caplog.at_level("WARNING", logger="ynabber.sync.walker"):
            walk = PaginationWalker(source).walk(TEST_AKAHU_ACCOUNT, watermark_at("tx_0"))

        assert ids(walk.transactions) == ["tx_4", "tx_3", "tx_2"]
        assert walk.watermark_lost
        assert not walk.is_cold_start
        assert "not found in retained history" in caplog.text

    def test_empty_feed(self):
        """Test an account with no transactions at all."""
        source = FakePageSource([], page_size=2)

        walk = PaginationWalker(source).walk(TEST_AKAHU_ACCOUNT, None)

        assert walk.transactions == []
        assert walk.pages_fetched == 1


@pytest.mark.sync
class TestColdStartBound:
    """Test the max_pages policy."""

    def test_cold_start_stops_at_max_pages(self):
        """Test a cold start reads at most max_pages pages."""
        feed = make_feed([f"tx_{n}" for n in range(10, 0, -1)])
        source = FakePageSource(feed, page_size=2)

        walk = PaginationWalker(source, max_pages=2).walk(TEST_AKAHU_ACCOUNT, None)

        assert ids(walk.transactions) == ["tx_10", "tx_9", "tx_8", "tx_7"]
        assert walk.truncated
        assert source.pages_served == 2

    def test_bound_does_not_apply_with_watermark(self):
        """Test an existing watermark is always searched for to the end."""
        feed = make_feed([f"tx_{n}" for n in range(10, 0, -1)])
        source = FakePageSource(feed, page_size=2)

        walk = PaginationWalker(source, max_pages=1).walk(TEST_AKAHU_ACCOUNT, watermark_at("tx_3"))

        assert ids(walk.transactions) == ["tx_10", "tx_9", "tx_8", "tx_7", "tx_6", "tx_5", "tx_4"]
        assert walk.watermark_found
        assert not walk.truncated

    def test_rejects_non_positive_bound(self):
        """Test max_pages must be at least one."""
        with pytest.raises(ValueError):
            PaginationWalker(FakePageSource([]), max_pages=0)


@pytest.mark.sync
class TestWalkerErrors:
    """Test errors propagate out of the walker."""

    def test_transport_error_propagates(self):
        """Test a failing page fetch is not swallowed."""
        feed = make_feed(["tx_4", "tx_3", "tx_2", "tx_1"])
        source = FakePageSource(feed, page_size=2, fail_on_page=1)

        with pytest.raises(TransportError):
            PaginationWalker(source).collect_new(TEST_AKAHU_ACCOUNT, watermark_at("tx_1"))
