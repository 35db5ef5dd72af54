#!/usr/bin/env python3
"""
YNAB API Client

Blocking client for the two YNAB calls ynabber needs: creating a transaction
and listing payees (to help write payee rules).
"""

import logging
from typing import Any, Protocol

import requests

from ..core.errors import CreationError, ParseError, TransportError
from .models import SaveTransaction, YnabPayee

logger = logging.getLogger(__name__)


class TransactionSink(Protocol):
    """Anything that can create YNAB transactions."""

    def create_transaction(self, budget_id: str, transaction: SaveTransaction) -> str:
        """
        Create one transaction.

        Returns:
            Id YNAB assigned to the new transaction

        Raises:
            CreationError: If YNAB rejects the transaction
            TransportError: On network failure or timeout
            ParseError: If the response is malformed
        """
        ...


class YnabClient:
    """YNAB REST API client using a personal access token."""

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.ynab.com/v1",
        timeout: float = 30,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            }
        )

    def create_transaction(self, budget_id: str, transaction: SaveTransaction) -> str:
        """Create one transaction (see TransactionSink)."""
        url = f"{self.base_url}/budgets/{budget_id}/transactions"
        response = self._request(
            "POST", url, account_id=transaction.account_id, json={"transaction": transaction.to_dict()}
        )

        if not response.ok:
            raise CreationError(
                f"YNAB rejected transaction (HTTP {response.status_code}): {extract_ynab_error(response)}",
                account_id=transaction.account_id,
                status_code=response.status_code,
            )

        body = self._json(response, account_id=transaction.account_id)
        try:
            created = body["data"]["transaction"]
            transaction_id = created["id"]
        except (KeyError, TypeError) as e:
            raise ParseError("No transaction detail in YNAB response", account_id=transaction.account_id) from e
        logger.debug(f"YNAB created transaction {transaction_id}")
        return str(transaction_id)

    def list_payees(self, budget_id: str) -> list[YnabPayee]:
        """
        List all payees in a budget.

        Raises:
            TransportError: On network failure or an error response
            ParseError: If the response is malformed
        """
        url = f"{self.base_url}/budgets/{budget_id}/payees"
        response = self._request("GET", url)
        if not response.ok:
            raise TransportError(f"YNAB returned HTTP {response.status_code}: {extract_ynab_error(response)}")

        body = self._json(response)
        try:
            return [YnabPayee.from_dict(payee) for payee in body["data"]["payees"]]
        except (KeyError, TypeError) as e:
            raise ParseError(f"Malformed payees response: {e}") from e

    def _request(self, method: str, url: str, account_id: str | None = None, **kwargs: Any) -> requests.Response:
        """Send a request, translating requests' exceptions into TransportError."""
        logger.debug(f"{method} {url}")
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise TransportError(f"Timed out talking to YNAB after {self.timeout}s", account_id=account_id) from e
        except requests.RequestException as e:
            raise TransportError(f"Error talking to YNAB: {e}", account_id=account_id) from e

    @staticmethod
    def _json(response: requests.Response, account_id: str | None = None) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ParseError("YNAB response is not valid JSON", account_id=account_id) from e


def extract_ynab_error(response: requests.Response) -> str:
    """Extract error detail from a YNAB API error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]
        return str(error.get("detail") or error.get("name") or response.text)
    return response.text
