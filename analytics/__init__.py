"""Statistics, filtering and chart caching over reconciled invoices."""

from analytics.chart_cache import ChartCache, generate_hash
from analytics.filters import (
    FilterCriteria,
    FilteredData,
    apply_filters,
    create_empty_filters,
    filter_by_amount_range,
    filter_by_category,
    filter_by_date_range,
    filter_by_merchant,
    get_filter_summary,
    get_filtered_data,
    has_active_filters,
    validate_filters,
)
from analytics.statistics import (
    calculate_basic_statistics,
    calculate_category_breakdown,
    calculate_extended_statistics,
    calculate_item_frequency_stats,
    calculate_merchant_statistics,
    calculate_monthly_statistics,
    calculate_monthly_time_series,
    calculate_time_series_data,
    calculate_voided_invoice_stats,
    get_valid_invoices,
    get_voided_invoices,
)

__all__ = [
    "ChartCache",
    "generate_hash",
    "FilterCriteria",
    "FilteredData",
    "apply_filters",
    "create_empty_filters",
    "filter_by_amount_range",
    "filter_by_category",
    "filter_by_date_range",
    "filter_by_merchant",
    "get_filter_summary",
    "get_filtered_data",
    "has_active_filters",
    "validate_filters",
    "calculate_basic_statistics",
    "calculate_category_breakdown",
    "calculate_extended_statistics",
    "calculate_item_frequency_stats",
    "calculate_merchant_statistics",
    "calculate_monthly_statistics",
    "calculate_monthly_time_series",
    "calculate_time_series_data",
    "calculate_voided_invoice_stats",
    "get_valid_invoices",
    "get_voided_invoices",
]
