"""
Akahu Bank Feed Package

Read-only access to the Akahu transactions API.

Key Components:
- models: AkahuTransaction / AkahuPage parsed from API responses
- client: AkahuClient, one blocking call per page
"""

from .client import AkahuClient, TransactionPageSource
from .models import AkahuPage, AkahuTransaction

__all__ = [
    "AkahuClient",
    "AkahuPage",
    "AkahuTransaction",
    "TransactionPageSource",
]
