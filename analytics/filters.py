"""Invoice filtering: single-criterion helpers and a combined criteria model."""

from datetime import date, datetime
from typing import Optional

from dateutil.parser import parse
from pydantic import BaseModel, Field, field_validator

from analytics.statistics import calculate_basic_statistics, item_category
from models.invoice import Invoice, InvoiceStatus
from models.statistics import Statistics
from utils.formatting import format_amount


def filter_by_date_range(invoices: list[Invoice], start: date, end: date) -> list[Invoice]:
    """Invoices dated within [start, end], both ends inclusive."""
    return [invoice for invoice in invoices if start <= invoice.invoice_date <= end]


def filter_by_merchant(invoices: list[Invoice], merchant_name: str) -> list[Invoice]:
    """Case-insensitive substring match on the merchant name."""
    term = merchant_name.lower()
    return [invoice for invoice in invoices if term in invoice.merchant_name.lower()]


def filter_by_amount_range(
    invoices: list[Invoice], min_amount: float, max_amount: float
) -> list[Invoice]:
    return [
        invoice for invoice in invoices if min_amount <= invoice.total_amount <= max_amount
    ]


def filter_by_category(invoices: list[Invoice], category: str) -> list[Invoice]:
    """Invoices with at least one item in the category."""
    return [
        invoice
        for invoice in invoices
        if any(item_category(item) == category for item in invoice.items)
    ]


class FilterCriteria(BaseModel):
    """Combined filter; unset fields do not constrain."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    merchant_name: str = ""
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    category: Optional[str] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_date(cls, v):
        """Accept dates, datetimes and free-form date strings."""
        if v is None or v == "":
            return None
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, date):
            return v
        if isinstance(v, str):
            return parse(v).date()
        return v


class FilteredData(BaseModel):
    invoices: list[Invoice] = Field(default_factory=list)
    statistics: Statistics = Field(default_factory=Statistics)


def apply_filters(invoices: list[Invoice], filters: FilterCriteria) -> list[Invoice]:
    """
    Apply every active criterion; voided invoices are always excluded.

    Args:
        invoices: Invoices of any status
        filters: Criteria to apply

    Returns:
        Matching issued invoices, in input order
    """
    result = [invoice for invoice in invoices if invoice.status == InvoiceStatus.ISSUED]

    if filters.start_date:
        result = [invoice for invoice in result if invoice.invoice_date >= filters.start_date]
    if filters.end_date:
        result = [invoice for invoice in result if invoice.invoice_date <= filters.end_date]
    if filters.merchant_name.strip():
        result = filter_by_merchant(result, filters.merchant_name.strip())
    if filters.min_amount is not None:
        result = [invoice for invoice in result if invoice.total_amount >= filters.min_amount]
    if filters.max_amount is not None:
        result = [invoice for invoice in result if invoice.total_amount <= filters.max_amount]
    if filters.category:
        result = filter_by_category(result, filters.category)

    return result


def get_filtered_data(invoices: list[Invoice], filters: FilterCriteria) -> FilteredData:
    """Filtered invoices together with statistics recomputed over them."""
    filtered = apply_filters(invoices, filters)
    return FilteredData(invoices=filtered, statistics=calculate_basic_statistics(filtered))


def has_active_filters(filters: FilterCriteria) -> bool:
    return bool(
        filters.start_date
        or filters.end_date
        or filters.merchant_name.strip()
        or filters.min_amount is not None
        or filters.max_amount is not None
        or filters.category
    )


def get_filter_summary(filters: FilterCriteria) -> list[str]:
    """Human readable lines describing each active criterion."""
    summary = []
    if filters.start_date:
        summary.append(f"Start date: {filters.start_date.isoformat()}")
    if filters.end_date:
        summary.append(f"End date: {filters.end_date.isoformat()}")
    if filters.merchant_name.strip():
        summary.append(f"Merchant: {filters.merchant_name}")
    if filters.min_amount is not None:
        summary.append(f"Min amount: ${format_amount(filters.min_amount)}")
    if filters.max_amount is not None:
        summary.append(f"Max amount: ${format_amount(filters.max_amount)}")
    if filters.category:
        summary.append(f"Category: {filters.category}")
    return summary


def validate_filters(filters: FilterCriteria) -> tuple[bool, list[str]]:
    """
    Check a criteria set for contradictions.

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []

    if filters.start_date and filters.end_date and filters.start_date > filters.end_date:
        errors.append("Start date cannot be after end date")

    if (
        filters.min_amount is not None
        and filters.max_amount is not None
        and filters.min_amount > filters.max_amount
    ):
        errors.append("Minimum amount cannot exceed maximum amount")

    if filters.min_amount is not None and filters.min_amount < 0:
        errors.append("Minimum amount cannot be negative")

    if filters.max_amount is not None and filters.max_amount < 0:
        errors.append("Maximum amount cannot be negative")

    return len(errors) == 0, errors


def create_empty_filters() -> FilterCriteria:
    return FilterCriteria()
