"""Utility functions for recordview."""

from recordview.utils.date_parser import parse_date, parse_instant
from recordview.utils.amount_parser import parse_amount, coerce_amount
from recordview.utils.formatters import format_currency, format_date

__all__ = [
    "parse_date",
    "parse_instant",
    "parse_amount",
    "coerce_amount",
    "format_currency",
    "format_date",
]
