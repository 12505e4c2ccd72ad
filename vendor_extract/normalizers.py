#!/usr/bin/env python3
"""
Normalizers - Convert raw text fragments into canonical amounts and dates.

Amounts come back as two-decimal strings ("1234.56"), dates as ISO
YYYY-MM-DD strings. Both return None when the text does not contain a
usable value.
"""

import math
import re
import logging
from datetime import date
from typing import Optional

logger = logging.getLogger(__name__)

# Characters kept by normalize_currency before number parsing
_NON_AMOUNT_CHARS = re.compile(r'[^\d,.R$£€-]')
_LEADING_SYMBOLS = re.compile(r'^(-?)[R$£€]+')
# 1.234,56 / 150,00 -> comma is the decimal separator
_COMMA_DECIMAL = re.compile(r'^(\d{1,3}(?:\.\d{3})*),(\d{2})$')
_NUMBER = re.compile(r'-?\d+\.?\d*')

MONTH_NAMES = (
    r'Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?'
    r'|Aug(?:ust)?|Sep(?:tember)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?'
)

MONTH_NUMBERS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}

_ISO_DATE = re.compile(r'(\d{4})-(\d{2})-(\d{2})')
_DOTTED_DATE = re.compile(r'(\d{2})\.(\d{2})\.(\d{4})')
_DAY_MONTH_YEAR = re.compile(rf'(\d{{1,2}})\s+({MONTH_NAMES})\s+(\d{{4}})', re.IGNORECASE)
_MONTH_DAY_YEAR = re.compile(rf'({MONTH_NAMES})\s+(\d{{1,2}}),?\s+(\d{{4}})', re.IGNORECASE)
_SLASH_DASH_DATE = re.compile(r'(\d{1,2})[/-](\d{1,2})[/-](\d{4})')


def normalize_currency(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a raw amount string to a positive two-decimal string.

    Handles currency prefixes ("R 1,234.56", "ZAR 99.00", "$5"), thousands
    commas and European decimal commas ("1.234,56", "150,00").

    Args:
        raw: Text containing an amount

    Returns:
        Amount formatted with two decimals, or None if unparsable or not positive
    """
    if not raw:
        return None

    cleaned = re.sub(r'\s+', '', raw)
    cleaned = _NON_AMOUNT_CHARS.sub('', cleaned)
    cleaned = _LEADING_SYMBOLS.sub(r'\1', cleaned)
    if not cleaned:
        return None

    comma_decimal = _COMMA_DECIMAL.match(cleaned)
    if comma_decimal:
        cleaned = comma_decimal.group(1).replace('.', '') + '.' + comma_decimal.group(2)
    else:
        cleaned = cleaned.replace(',', '')

    match = _NUMBER.search(cleaned)
    if not match:
        return None

    try:
        value = float(match.group(0))
    except ValueError:
        return None

    # digit runs past the float range parse as inf
    if not math.isfinite(value):
        logger.debug(f"Rejected non-finite amount from {raw[:40]!r}")
        return None

    value = round(value, 2)
    if value <= 0:
        return None

    return f"{value:.2f}"


def _iso(year: int, month: int, day: int) -> Optional[str]:
    """Format a calendar date, None if the parts are not a real date"""
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        logger.debug(f"Rejected impossible date {year}-{month}-{day}")
        return None


def normalize_date(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a raw date string to YYYY-MM-DD.

    Patterns are tried in order and the first one that yields a real
    calendar date wins:

    1. ISO: 2024-12-25
    2. Dotted: 25.12.2024
    3. Day, month name, year: 25 December 2024 / 25 Dec 2024
    4. Month name, day, year: December 25, 2024
    5. Slash or dash: 25/12/2024, 25-12-2024 (day first)

    Args:
        raw: Text containing a date

    Returns:
        ISO date string or None if no pattern matches
    """
    if not raw:
        return None

    text = raw.strip()

    match = _ISO_DATE.search(text)
    if match:
        result = _iso(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        if result:
            return result

    match = _DOTTED_DATE.search(text)
    if match:
        result = _iso(int(match.group(3)), int(match.group(2)), int(match.group(1)))
        if result:
            return result

    match = _DAY_MONTH_YEAR.search(text)
    if match:
        month = MONTH_NUMBERS[match.group(2)[:3].lower()]
        result = _iso(int(match.group(3)), month, int(match.group(1)))
        if result:
            return result

    match = _MONTH_DAY_YEAR.search(text)
    if match:
        month = MONTH_NUMBERS[match.group(1)[:3].lower()]
        result = _iso(int(match.group(3)), month, int(match.group(2)))
        if result:
            return result

    match = _SLASH_DASH_DATE.search(text)
    if match:
        result = _iso(int(match.group(3)), int(match.group(2)), int(match.group(1)))
        if result:
            return result

    return None
