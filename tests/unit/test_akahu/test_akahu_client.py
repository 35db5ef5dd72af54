#!/usr/bin/env python3
"""Tests for the Akahu HTTP client against a mocked requests session."""

import pytest
import requests

from tests.fixtures.http_fakes import http_response, mock_session
from tests.fixtures.sync_fakes import TEST_AKAHU_ACCOUNT, make_feed, transaction_to_api_dict
from ynabber.akahu.client import AkahuClient
from ynabber.core.errors import ParseError, TransportError
from ynabber.sync.walker import PaginationWalker

BASE_URL = "https://api.akahu.test/v1"
TRANSACTIONS_URL = f"{BASE_URL}/accounts/{TEST_AKAHU_ACCOUNT}/transactions"


def make_client(*outcomes) -> AkahuClient:
    return AkahuClient(
        "app_token_test", "user_token_test", base_url=BASE_URL, timeout=5, session=mock_session(*outcomes)
    )


@pytest.mark.akahu
class TestFetchPage:
    """Test GET /accounts/{id}/transactions."""

    def test_first_page_sends_no_cursor_and_auth_headers(self, sample_akahu_item):
        """Test the first request and authentication headers."""
        client = make_client(
            http_response(200, {"success": True, "items": [sample_akahu_item], "cursor": {"next": "c1"}})
        )

        page = client.fetch_page(TEST_AKAHU_ACCOUNT)

        assert page.next_cursor == "c1"
        assert page.items[0].id == "trans_test0001"
        call = client.session.request.call_args
        assert call.args == ("GET", TRANSACTIONS_URL)
        assert call.kwargs["params"] is None
        assert call.kwargs["timeout"] == 5
        assert client.session.headers["Authorization"] == "Bearer user_token_test"
        assert client.session.headers["X-Akahu-ID"] == "app_token_test"

    def test_cursor_sent_as_query_param(self):
        """Test later pages pass the cursor back."""
        client = make_client(http_response(200, {"success": True, "items": [], "cursor": {"next": None}}))

        page = client.fetch_page(TEST_AKAHU_ACCOUNT, cursor="c1")

        assert page.items == []
        assert page.is_last
        assert client.session.request.call_args.kwargs["params"] == {"cursor": "c1"}

    def test_http_error_is_transport_error(self):
        """Test an error status surfaces Akahu's message."""
        client = make_client(http_response(401, {"success": False, "message": "Invalid user token"}))

        with pytest.raises(TransportError, match="Invalid user token") as exc_info:
            client.fetch_page(TEST_AKAHU_ACCOUNT)
        assert exc_info.value.account_id == TEST_AKAHU_ACCOUNT

    def test_timeout_is_transport_error(self):
        """Test timeouts are TransportErrors."""
        client = make_client(requests.Timeout())

        with pytest.raises(TransportError, match="Timed out"):
            client.fetch_page(TEST_AKAHU_ACCOUNT)

    def test_connection_error_is_transport_error(self):
        """Test other requests failures are TransportErrors."""
        client = make_client(requests.ConnectionError("reset"))

        with pytest.raises(TransportError, match="reset"):
            client.fetch_page(TEST_AKAHU_ACCOUNT)

    def test_invalid_json_is_parse_error(self):
        """Test a non-JSON body is a ParseError."""
        client = make_client(http_response(200, text="<html>maintenance</html>"))

        with pytest.raises(ParseError):
            client.fetch_page(TEST_AKAHU_ACCOUNT)


@pytest.mark.akahu
@pytest.mark.integration
class TestWalkerOverHttp:
    """Test the walker driving the real client."""

    def test_cold_start_follows_cursors_to_the_end(self):
        """Test two pages are fetched and concatenated newest-first."""
        feed = make_feed(["tx_4", "tx_3", "tx_2"])
        client = make_client(
            http_response(200, {"items": [transaction_to_api_dict(t) for t in feed[:2]], "cursor": {"next": "c1"}}),
            http_response(200, {"items": [transaction_to_api_dict(feed[2])], "cursor": {"next": None}}),
        )

        result = PaginationWalker(client).collect_new(TEST_AKAHU_ACCOUNT, None)

        assert [t.id for t in result] == ["tx_4", "tx_3", "tx_2"]
        cursors = [call.kwargs["params"] for call in client.session.request.call_args_list]
        assert cursors == [None, {"cursor": "c1"}]
