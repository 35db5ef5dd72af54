#!/usr/bin/env python3
"""
Akahu Domain Models

Type-safe models for the parts of the Akahu transactions API the sync engine
reads. Everything else in the payload is ignored.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.dates import parse_rfc3339
from ..core.errors import ParseError


@dataclass(frozen=True)
class AkahuTransaction:
    """
    Bank transaction from the Akahu feed.

    Amount is signed dollars (negative = money out).
    """

    id: str
    account_id: str
    date: datetime  # UTC
    description: str
    amount: Decimal
    merchant_name: str | None = None
    type: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AkahuTransaction":
        """
        Create AkahuTransaction from an API item.

        Args:
            data: One element of the response `items` array

        Returns:
            AkahuTransaction instance

        Raises:
            ParseError: If required fields are missing or malformed
        """
        if not isinstance(data, dict):
            raise ParseError(f"Transaction item must be an object, got {type(data).__name__}")

        transaction_id = data.get("_id")
        try:
            merchant = data.get("merchant") or {}
            return cls(
                id=str(data["_id"]),
                account_id=str(data["_account"]),
                date=parse_rfc3339(data["date"]),
                description=str(data["description"]),
                amount=_parse_amount(data["amount"]),
                merchant_name=merchant.get("name") if isinstance(merchant, dict) else None,
                type=data.get("type"),
            )
        except KeyError as e:
            raise ParseError(f"Transaction item is missing field {e}", transaction_id=transaction_id) from e
        except (ValueError, InvalidOperation) as e:
            raise ParseError(f"Malformed transaction item: {e}", transaction_id=transaction_id) from e


@dataclass
class AkahuPage:
    """One page of the transactions listing."""

    items: list[AkahuTransaction] = field(default_factory=list)
    next_cursor: str | None = None

    @property
    def is_last(self) -> bool:
        """True when the feed has no further history after this page."""
        return self.next_cursor is None

    @classmethod
    def from_response(cls, data: Any, account_id: str | None = None) -> "AkahuPage":
        """
        Parse a transactions listing response.

        An absent `cursor` object, or an absent/empty `cursor.next`, means the
        end of available history.

        Raises:
            ParseError: If the body isn't a successful listing
        """
        if not isinstance(data, dict):
            raise ParseError("Transactions response must be a JSON object", account_id=account_id)
        if data.get("success") is False:
            message = data.get("message") or "success=false"
            raise ParseError(f"Akahu reported failure: {message}", account_id=account_id)

        raw_items = data.get("items")
        if not isinstance(raw_items, list):
            raise ParseError("Transactions response has no 'items' list", account_id=account_id)

        items = []
        for raw in raw_items:
            try:
                items.append(AkahuTransaction.from_dict(raw))
            except ParseError as e:
                e.account_id = account_id
                raise

        cursor = data.get("cursor")
        next_cursor = None
        if cursor is not None:
            if not isinstance(cursor, dict):
                raise ParseError("Transactions response 'cursor' must be an object", account_id=account_id)
            next_cursor = cursor.get("next") or None

        return cls(items=items, next_cursor=next_cursor)


def _parse_amount(value: Any) -> Decimal:
    """Parse a JSON number into Decimal without float artefacts."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"amount must be numeric, got {value!r}")
    amount = Decimal(str(value))
    if not amount.is_finite():
        raise ValueError(f"amount must be finite, got {value!r}")
    return amount
