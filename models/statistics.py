"""Data models for derived consumption statistics."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class CategoryStat(BaseModel):
    category: str
    amount: float
    count: int
    percentage: float


class TimeSeriesPoint(BaseModel):
    date: date
    amount: float
    count: int


class DateRange(BaseModel):
    start: date
    end: date


class Statistics(BaseModel):
    """Aggregate statistics over a set of issued invoices."""

    total_amount: float = 0.0
    total_invoices: int = 0
    average_amount: float = 0.0
    date_range: Optional[DateRange] = None  # None when there are no invoices
    category_breakdown: list[CategoryStat] = Field(default_factory=list)
    time_series_data: list[TimeSeriesPoint] = Field(default_factory=list)


class MonthlyStatistics(BaseModel):
    year: int
    month: int
    total_amount: float
    invoice_count: int
    average_amount: float
    category_breakdown: list[CategoryStat] = Field(default_factory=list)


class MerchantStatistics(BaseModel):
    merchant_name: str
    total_amount: float
    invoice_count: int
    average_amount: float
    percentage: float


class ItemFrequencyStats(BaseModel):
    item_name: str
    category: str
    frequency: int
    total_amount: float
    average_price: float


class VoidedInvoiceStats(BaseModel):
    total_voided_invoices: int = 0
    total_voided_amount: float = 0.0
    voided_percentage: float = 0.0


class ExtendedStatistics(Statistics):
    """Basic statistics plus monthly, merchant, item and void breakdowns."""

    monthly_data: list[MonthlyStatistics] = Field(default_factory=list)
    top_merchants: list[MerchantStatistics] = Field(default_factory=list)
    item_frequency: list[ItemFrequencyStats] = Field(default_factory=list)
    voided_invoices_stats: VoidedInvoiceStats = Field(
        default_factory=VoidedInvoiceStats
    )
