"""Data models for invoice processing."""

from models.batch_result import (
    BatchResult,
    BatchStatistics,
    FileResult,
    ProcessingStats,
)
from models.category import CATEGORY_KEYWORDS, Category, categorize_item
from models.file_info import FileInfo, FileStatus
from models.invoice import Invoice, InvoiceItem, InvoiceStatus, PartialInvoice
from models.parse_result import ParseError, ParseResult
from models.statistics import (
    CategoryStat,
    DateRange,
    ExtendedStatistics,
    ItemFrequencyStats,
    MerchantStatistics,
    MonthlyStatistics,
    Statistics,
    TimeSeriesPoint,
    VoidedInvoiceStats,
)

__all__ = [
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "PartialInvoice",
    "Category",
    "CATEGORY_KEYWORDS",
    "categorize_item",
    "ParseError",
    "ParseResult",
    "FileInfo",
    "FileStatus",
    "Statistics",
    "CategoryStat",
    "TimeSeriesPoint",
    "DateRange",
    "MonthlyStatistics",
    "MerchantStatistics",
    "ItemFrequencyStats",
    "VoidedInvoiceStats",
    "ExtendedStatistics",
    "FileResult",
    "BatchResult",
    "BatchStatistics",
    "ProcessingStats",
]
