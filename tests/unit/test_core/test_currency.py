#!/usr/bin/env python3
"""Tests for core currency utilities."""

from decimal import Decimal

import pytest

from ynabber.core.currency import dollars_to_milliunits, format_milliunits, milliunits_to_dollars_str


class TestCurrencyConversions:
    """Test core currency conversion functions."""

    @pytest.mark.currency
    def test_dollars_to_milliunits(self):
        """Test conversion from bank dollars to YNAB milliunits."""
        assert dollars_to_milliunits(-45.99) == -45990
        assert dollars_to_milliunits(4.35) == 4350  # float 4.35 is 4.3499999... in binary
        assert dollars_to_milliunits(100) == 100000
        assert dollars_to_milliunits(0) == 0
        assert dollars_to_milliunits("12.5") == 12500
        assert dollars_to_milliunits(Decimal("-0.01")) == -10

    @pytest.mark.currency
    def test_dollars_to_milliunits_truncates_toward_zero(self):
        """Test sub-milliunit fractions are dropped, not rounded."""
        assert dollars_to_milliunits(0.0001) == 0
        assert dollars_to_milliunits("1.2349") == 1234
        assert dollars_to_milliunits("-1.2349") == -1234
        assert dollars_to_milliunits(Decimal("-0.0009")) == 0

    @pytest.mark.currency
    @pytest.mark.parametrize("bad", ["abc", "", True, float("nan"), float("inf")])
    def test_dollars_to_milliunits_rejects_non_numeric(self, bad):
        """Test invalid amounts raise ValueError."""
        with pytest.raises(ValueError):
            dollars_to_milliunits(bad)

    @pytest.mark.currency
    def test_milliunits_to_dollars_str(self):
        """Test formatting milliunits as dollar strings."""
        assert milliunits_to_dollars_str(45990) == "45.99"
        assert milliunits_to_dollars_str(-45990) == "-45.99"
        assert milliunits_to_dollars_str(1000) == "1.00"
        assert milliunits_to_dollars_str(50) == "0.05"
        assert milliunits_to_dollars_str(0) == "0.00"
        assert milliunits_to_dollars_str(1234) == "1.23"  # sub-cent dropped

    @pytest.mark.currency
    def test_format_milliunits(self):
        """Test display formatting."""
        assert format_milliunits(45990) == "$45.99"
        assert format_milliunits(-4350) == "$-4.35"
