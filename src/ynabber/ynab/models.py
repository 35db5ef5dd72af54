#!/usr/bin/env python3
"""
YNAB Domain Models

Type-safe models for the YNAB API objects the sync engine writes and reads.
Amounts are integer milliunits (1000 = $1.00).
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from ..core.currency import format_milliunits

# YNAB rejects longer payee names
MAX_PAYEE_NAME_LENGTH = 200


@dataclass(frozen=True)
class SaveTransaction:
    """
    New transaction request for POST /budgets/{budget_id}/transactions.

    Exactly one of payee_id / payee_name is set.
    """

    account_id: str
    amount: int  # milliunits
    date: date
    payee_id: str | None = None
    payee_name: str | None = None
    memo: str | None = None
    cleared: str = "uncleared"  # "cleared", "uncleared", "reconciled"
    approved: bool = True

    def __post_init__(self) -> None:
        if (self.payee_id is None) == (self.payee_name is None):
            raise ValueError("Exactly one of payee_id or payee_name must be set")
        if self.payee_name is not None and len(self.payee_name) > MAX_PAYEE_NAME_LENGTH:
            object.__setattr__(self, "payee_name", self.payee_name[:MAX_PAYEE_NAME_LENGTH])

    def to_dict(self) -> dict[str, Any]:
        """Convert to the API's SaveTransaction JSON shape."""
        return {
            "account_id": self.account_id,
            "date": self.date.isoformat(),
            "amount": self.amount,
            "payee_id": self.payee_id,
            "payee_name": self.payee_name,
            "category_id": None,
            "memo": self.memo,
            "cleared": self.cleared,
            "approved": self.approved,
            "flag_color": None,
        }

    def describe(self) -> str:
        """One-line description for logs and dry-run output."""
        payee = f"payee_id={self.payee_id}" if self.payee_id else f"payee_name={self.payee_name!r}"
        return f"{self.date.isoformat()} {format_milliunits(self.amount)} {payee}"


@dataclass(frozen=True)
class YnabPayee:
    """YNAB payee from API."""

    id: str
    name: str
    transfer_account_id: str | None = None
    deleted: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "YnabPayee":
        """
        Create YnabPayee from API dict.

        Args:
            data: One element of data.payees

        Returns:
            YnabPayee instance
        """
        return cls(
            id=data["id"],
            name=data["name"],
            transfer_account_id=data.get("transfer_account_id"),
            deleted=data.get("deleted", False),
        )

    @property
    def is_transfer(self) -> bool:
        """Check if this is a transfer payee (another account)."""
        return self.transfer_account_id is not None
