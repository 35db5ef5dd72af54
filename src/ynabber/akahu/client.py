#!/usr/bin/env python3
"""
Akahu API Client

Thin blocking client over the Akahu transactions listing. One call fetches one
page; cursor handling lives in the walker.
"""

import logging
from typing import Protocol

import requests

from ..core.errors import ParseError, TransportError
from .models import AkahuPage

logger = logging.getLogger(__name__)


class TransactionPageSource(Protocol):
    """Anything that can serve pages of an account's transactions, newest first."""

    def fetch_page(self, account_id: str, cursor: str | None = None) -> AkahuPage:
        """
        Fetch one page of transactions.

        Args:
            account_id: Akahu account id
            cursor: Token from the previous page, or None for the newest page

        Returns:
            AkahuPage with items newest-first and the next cursor (if any)

        Raises:
            TransportError: On network failure or timeout
            ParseError: On malformed responses
        """
        ...


class AkahuClient:
    """
    Akahu transactions API client.

    Authenticates with the app token (X-Akahu-ID) and the user token (Bearer).
    """

    def __init__(
        self,
        app_token: str,
        user_token: str,
        base_url: str = "https://api.akahu.io/v1",
        timeout: float = 30,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {user_token}",
                "X-Akahu-ID": app_token,
                "Accept": "application/json",
            }
        )

    def fetch_page(self, account_id: str, cursor: str | None = None) -> AkahuPage:
        """Fetch one page of an account's transactions (see TransactionPageSource)."""
        url = f"{self.base_url}/accounts/{account_id}/transactions"
        params = {"cursor": cursor} if cursor else None

        logger.debug(f"GET {url} cursor={cursor}")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as e:
            raise TransportError(f"Timed out fetching transactions after {self.timeout}s", account_id=account_id) from e
        except requests.RequestException as e:
            raise TransportError(f"Error fetching transactions: {e}", account_id=account_id) from e

        if not response.ok:
            raise TransportError(
                f"Akahu returned HTTP {response.status_code}: {_error_detail(response)}",
                account_id=account_id,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError("Akahu response is not valid JSON", account_id=account_id) from e

        return AkahuPage.from_response(data, account_id=account_id)


def _error_detail(response: requests.Response) -> str:
    """Extract error message from an Akahu error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text
