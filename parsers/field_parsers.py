"""Parsers for the date, amount and status fields of e-invoice rows."""

import math
import re
from datetime import date
from typing import Optional

from models.invoice import InvoiceStatus

_DATE_NOISE = re.compile(r"[^\d/\-]")
_AMOUNT_NOISE = re.compile(r"[^\d.\-]")
_NUMBER_PREFIX = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)")

DATE_PATTERNS = [
    re.compile(r"^(\d{4})[/\-](\d{1,2})[/\-](\d{1,2})$"),  # YYYY/MM/DD, YYYY-MM-DD
    re.compile(r"^(\d{4})(\d{2})(\d{2})$"),  # YYYYMMDD
]

VOID_MARKERS = ("作廢", "void", "cancel")


def parse_invoice_date(text: Optional[str]) -> Optional[date]:
    """
    Parse an invoice date in YYYY/MM/DD, YYYY-MM-DD or YYYYMMDD form.

    Characters other than digits, "/" and "-" are dropped first, so
    " 2024/09/01 " and "NT 2024-9-1" style noise is tolerated.

    Args:
        text: Raw date field

    Returns:
        The calendar date, or None when no format matches or the date does
        not exist (e.g. 2024/02/30)
    """
    if not text:
        return None

    cleaned = _DATE_NOISE.sub("", text)

    for pattern in DATE_PATTERNS:
        match = pattern.match(cleaned)
        if not match:
            continue
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            # Matched the shape but not a real day; try the next shape
            continue

    return None


def parse_amount(text: Optional[str]) -> float:
    """
    Parse a monetary amount, ignoring currency symbols and separators.

    Returns NaN when the remaining characters do not form a number; callers
    must reject it. An empty field parses as 0.0.
    """
    cleaned = _AMOUNT_NOISE.sub("", text or "")
    if not cleaned:
        return 0.0

    # Leading numeric prefix only, so "12.5.0" reads as 12.5
    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        return math.nan
    return float(match.group(0))


def is_valid_amount(value: float) -> bool:
    return not math.isnan(value)


def parse_invoice_status(text: Optional[str]) -> InvoiceStatus:
    """Map a status field to issued/voided; empty means issued."""
    if not text:
        return InvoiceStatus.ISSUED

    status = text.lower()
    if any(marker in status for marker in VOID_MARKERS):
        return InvoiceStatus.VOIDED

    return InvoiceStatus.ISSUED
