"""Display formatting helpers for the terminal view."""

from decimal import Decimal
from typing import Any

from recordview.utils.amount_parser import coerce_amount
from recordview.utils.date_parser import EPOCH, parse_instant


def format_currency(value: Any, symbol: str = "$") -> str:
    """Format an amount with thousands separators and two decimals."""
    amount = coerce_amount(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_date(value: Any) -> str:
    """Format a record date as DD-MM-YYYY, or "-" when missing or invalid."""
    if value is None or value == "":
        return "-"
    instant = parse_instant(value)
    if instant == EPOCH and not _is_epoch_literal(value):
        return "-"
    return instant.strftime("%d-%m-%Y")


def _is_epoch_literal(value: Any) -> bool:
    if isinstance(value, (int, float, Decimal)):
        return value == 0
    return isinstance(value, str) and value.startswith("1970-01-01")
