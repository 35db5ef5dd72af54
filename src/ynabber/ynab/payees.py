#!/usr/bin/env python3
"""
Payee Matching

Maps a bank transaction description to a YNAB payee id using an ordered list
of (payee id, regex) rules. The first rule whose pattern matches anywhere in
the description wins, so rule order is part of the configuration.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayeeRule:
    """One (payee id, pattern) rule."""

    payee_id: str
    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, payee_id: str, pattern: str) -> "PayeeRule":
        """
        Build a rule from a regex string.

        Raises:
            re.error: If the pattern is invalid
            ValueError: If the payee id is empty
        """
        if not payee_id:
            raise ValueError(f"Payee rule {pattern!r} has an empty payee id")
        return cls(payee_id=payee_id, pattern=re.compile(pattern))


class PayeeMatcher:
    """
    Evaluates payee rules in declaration order.

    Examples:
        >>> matcher = PayeeMatcher([("uber", "(?i)uber"), ("cafe", "(?i)caf")])
        >>> matcher.match("UBER EATS CAFE")
        'uber'
        >>> matcher.match("UNKNOWN MERCHANT 123") is None
        True
    """

    def __init__(self, rules: Iterable[tuple[str, str]] = ()):
        self.rules = [PayeeRule.compile(payee_id, pattern) for payee_id, pattern in rules]

    def match(self, description: str) -> str | None:
        """
        Find the payee id for a description.

        Args:
            description: Bank transaction description

        Returns:
            Payee id of the first matching rule, or None
        """
        for rule in self.rules:
            if rule.pattern.search(description):
                logger.debug(f"MATCH: {rule.payee_id}: {rule.pattern.pattern} ({description})")
                return rule.payee_id
        return None

    def __len__(self) -> int:
        return len(self.rules)
