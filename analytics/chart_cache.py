"""Time-limited cache for derived chart series, keyed by invoice-set hash."""

import time
from typing import Callable, Generic, Optional, TypeVar

from pydantic import BaseModel

from config import Config
from models.invoice import Invoice, InvoiceStatus
from models.statistics import CategoryStat, TimeSeriesPoint
from utils.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DAILY = "daily"
MONTHLY = "monthly"
CATEGORY = "category"


class CacheEntry(BaseModel, Generic[T]):
    data: T
    timestamp: float
    hash: str


class CacheStats(BaseModel):
    daily_hit: bool
    monthly_hit: bool
    category_hit: bool
    cache_size: int


def _format_amount(amount) -> str:
    """Integral amounts without a fractional part ("120", not "120.0")."""
    amount = float(amount)
    if amount.is_integer():
        return str(int(amount))
    return repr(amount)


def _fingerprint(invoice: Invoice) -> str:
    status = InvoiceStatus(invoice.status).value
    return f"{invoice.id}-{_format_amount(invoice.total_amount)}-{status}"


def generate_hash(invoices: list[Invoice]) -> str:
    """
    Fingerprint of an invoice set's ids, totals and statuses.

    Order-independent. Uses the 31-multiplier rolling hash wrapped to a
    signed 32-bit integer.
    """
    ordered = sorted(invoices, key=lambda invoice: invoice.id)
    data = "|".join(_fingerprint(invoice) for invoice in ordered)

    h = 0
    for char in data:
        h = ((h << 5) - h + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return str(h)


class ChartCache:
    """
    Cache for daily series, monthly series and category breakdown.

    An entry is served only while younger than the TTL and while the
    invoice set hashes the same as when it was stored. Expired entries
    stay in place until clear_expired_cache() runs.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Entry lifetime (defaults to Config.CACHE_TTL_SECONDS)
            clock: Monotonic time source in seconds
        """
        self.ttl_seconds = Config.CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.clock = clock
        self._entries: dict[str, Optional[CacheEntry]] = {
            DAILY: None,
            MONTHLY: None,
            CATEGORY: None,
        }

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self.clock() - entry.timestamp >= self.ttl_seconds

    def _get(self, kind: str, invoices: list[Invoice]) -> Optional[list]:
        entry = self._entries[kind]
        if entry is None or self._is_expired(entry):
            return None
        if entry.hash != generate_hash(invoices):
            logger.debug(f"Chart cache entry '{kind}' is stale")
            return None
        return entry.data

    def _set(self, kind: str, invoices: list[Invoice], data: list) -> None:
        self._entries[kind] = CacheEntry(
            data=list(data),
            timestamp=self.clock(),
            hash=generate_hash(invoices),
        )

    def get_daily_time_series(self, invoices: list[Invoice]) -> Optional[list[TimeSeriesPoint]]:
        return self._get(DAILY, invoices)

    def set_daily_time_series(
        self, invoices: list[Invoice], data: list[TimeSeriesPoint]
    ) -> None:
        self._set(DAILY, invoices, data)

    def get_monthly_time_series(
        self, invoices: list[Invoice]
    ) -> Optional[list[TimeSeriesPoint]]:
        return self._get(MONTHLY, invoices)

    def set_monthly_time_series(
        self, invoices: list[Invoice], data: list[TimeSeriesPoint]
    ) -> None:
        self._set(MONTHLY, invoices, data)

    def get_category_breakdown(self, invoices: list[Invoice]) -> Optional[list[CategoryStat]]:
        return self._get(CATEGORY, invoices)

    def set_category_breakdown(self, invoices: list[Invoice], data: list[CategoryStat]) -> None:
        self._set(CATEGORY, invoices, data)

    def clear_cache(self) -> None:
        for kind in self._entries:
            self._entries[kind] = None

    def clear_expired_cache(self) -> None:
        """Drop entries older than the TTL."""
        for kind, entry in self._entries.items():
            if entry is not None and self._is_expired(entry):
                self._entries[kind] = None

    def get_cache_stats(self) -> CacheStats:
        """Which entries are populated (expired or not)."""
        return CacheStats(
            daily_hit=self._entries[DAILY] is not None,
            monthly_hit=self._entries[MONTHLY] is not None,
            category_hit=self._entries[CATEGORY] is not None,
            cache_size=sum(1 for entry in self._entries.values() if entry is not None),
        )
