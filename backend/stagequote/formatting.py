"""Formatting helpers for quote output.

Amounts are shown with cents and thousands separators; variations and
rates always carry a sign so discounts read as discounts.
"""

from __future__ import annotations

from decimal import Decimal


def format_currency(amount: float | Decimal) -> str:
    """Format an amount as e.g. '$1,234.50' or '-$100.00'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_variation(amount: float | Decimal) -> str:
    """Format a variation with an explicit sign: '+$50.00' / '-$100.00'."""
    if amount < 0:
        return format_currency(amount)
    return f"+{format_currency(amount)}"


def format_rate(rate: float | Decimal) -> str:
    """Format a decimal fraction as a signed percentage: -0.1 -> '-10%'."""
    pct = f"{Decimal(str(rate)) * 100:+.2f}".rstrip("0").rstrip(".")
    return f"{pct}%"
