"""Display formatting: Indian currency/number grouping, periods, slugs, ids."""

import re
import secrets
import string
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from .constants import FINANCIAL_YEAR_START_MONTH

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

_ID_ALPHABET = string.digits + string.ascii_lowercase


def _group_digits(digits: str, indian: bool) -> str:
    """Insert thousands separators into a string of integer digits.

    Indian grouping keeps the last three digits together and then groups
    by two (12,34,567); western grouping is by three (1,234,567).
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    size = 2 if indian else 3
    groups = []
    while head:
        groups.insert(0, head[-size:])
        head = head[:-size]
    return ",".join(groups + [tail])


def _format_decimal(value: Decimal, places: int, indian: bool, strip_zeros: bool) -> str:
    quantum = Decimal(1).scaleb(-places)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    int_part, _, frac_part = f"{abs(rounded):.{places}f}".partition(".")
    if strip_zeros:
        frac_part = frac_part.rstrip("0")
    out = _group_digits(int_part, indian)
    if frac_part:
        out = f"{out}.{frac_part}"
    return sign + out


def _is_indian_locale(locale: str) -> bool:
    return locale.replace("_", "-").lower().endswith("-in")


def format_currency(amount: float, locale: str = "en-IN", currency: str = "INR") -> str:
    """Format an amount as currency, e.g. 123456.78 -> '₹1,23,456.78'."""
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    # Decimal(float) is exact, so 1.005 (stored as 1.00499...) rounds down
    body = _format_decimal(
        Decimal(amount), 2, indian=_is_indian_locale(locale), strip_zeros=False
    )
    if body.startswith("-"):
        return f"-{symbol}{body[1:]}"
    return f"{symbol}{body}"


def format_indian_number(num: float) -> str:
    """Indian digit grouping with up to 3 fraction digits: 1234567.5 -> '12,34,567.5'."""
    return _format_decimal(Decimal(num), 3, indian=True, strip_zeros=True)


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def get_financial_year(when: date) -> str:
    """Indian financial year label (April..March), e.g. 2024-04-15 -> '2024-25'."""
    year = when.year
    if when.month >= FINANCIAL_YEAR_START_MONTH:
        return f"{year}-{str(year + 1)[2:]}"
    return f"{year - 1}-{str(year)[2:]}"


class Period(NamedTuple):
    month: int
    year: int


def parse_period(period: str) -> Period | None:
    """Parse a GST return period 'MMYYYY' (e.g. '042024').

    Returns None for anything that is not 6 characters, has a month outside
    1..12 or a year before 2000.
    """
    if not isinstance(period, str) or len(period) != 6 or not period.isdigit():
        return None
    month = int(period[:2])
    year = int(period[2:])
    if month < 1 or month > 12 or year < 2000:
        return None
    return Period(month=month, year=year)


def format_period(when: date) -> str:
    """Inverse of parse_period: date -> 'MMYYYY'."""
    return f"{when.month:02d}{when.year}"


def slugify(text: str) -> str:
    text = str(text).lower().strip()
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"[^\w\-]+", "", text, flags=re.ASCII)
    text = re.sub(r"\-\-+", "-", text)
    return text.strip("-")


def generate_id(prefix: str | None = None) -> str:
    """Random 13-character base36 id, optionally as '<prefix>_<id>'."""
    random_part = "".join(secrets.choice(_ID_ALPHABET) for _ in range(13))
    return f"{prefix}_{random_part}" if prefix else random_part
