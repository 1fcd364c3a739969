"""Formatting helpers for amounts, rates, hours and dates on the invoice document."""

from datetime import date, datetime
from typing import Union

from dateutil import parser as dateutil_parser

USD_SYMBOL = "$"
INR_SYMBOL = "₹"


def _group_indian(integer_part: str) -> str:
    """Group digits the en-IN way: last three, then pairs (12,34,567)"""
    if len(integer_part) <= 3:
        return integer_part
    head, tail = integer_part[:-3], integer_part[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def fmt_usd(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}{USD_SYMBOL}{abs(amount):,.2f}"


def fmt_inr(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    integer_part, fraction = f"{abs(amount):.2f}".split(".")
    return f"{sign}{INR_SYMBOL}{_group_indian(integer_part)}.{fraction}"


def fmt_money(amount: float, currency: str = "USD") -> str:
    return fmt_inr(amount) if currency == "INR" else fmt_usd(amount)


def strip_currency_symbol(formatted: str) -> str:
    """Drop the currency symbol, for the 'INR 1,23,456.78' convention"""
    return formatted.replace(USD_SYMBOL, "").replace(INR_SYMBOL, "")


def fmt_rate(rate: float) -> str:
    return f"{rate:.4f}"


def fmt_hours(hours: float) -> str:
    return f"{hours:.2f}"


def fmt_date(raw: Union[str, date, datetime, None]) -> str:
    """Format a date (or a date string) as '05 Mar 2025'."""
    if raw is None:
        return ""
    if isinstance(raw, (date, datetime)):
        return raw.strftime("%d %b %Y")
    raw = raw.strip()
    if not raw:
        return raw
    try:
        return dateutil_parser.parse(raw).strftime("%d %b %Y")
    except (ValueError, OverflowError):
        return raw


def fmt_month(month_key: str) -> str:
    """'2025-03' -> 'Mar 2025'"""
    return datetime.strptime(month_key, "%Y-%m").strftime("%b %Y")
