"""
YNAB Integration Package

Destination side of the sync: creates transactions in a YNAB budget.

Key Components:
- models: SaveTransaction requests and YnabPayee records
- client: YnabClient (create transaction, list payees)
- payees: PayeeMatcher, ordered regex rules from description to payee id
"""

from .client import TransactionSink, YnabClient, extract_ynab_error
from .models import MAX_PAYEE_NAME_LENGTH, SaveTransaction, YnabPayee
from .payees import PayeeMatcher, PayeeRule

__all__ = [
    "MAX_PAYEE_NAME_LENGTH",
    "PayeeMatcher",
    "PayeeRule",
    "SaveTransaction",
    "TransactionSink",
    "YnabClient",
    "YnabPayee",
    "extract_ynab_error",
]
