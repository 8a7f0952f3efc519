"""Consumption statistics over reconciled invoices.

All functions are pure: they take a list of invoices and return freshly
built models. Callers pass the issued subset unless a function says
otherwise (see calculate_extended_statistics and
calculate_voided_invoice_stats).
"""

from collections import defaultdict
from datetime import date

from models.category import categorize_item
from models.invoice import Invoice, InvoiceItem, InvoiceStatus
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

TOP_MERCHANTS = 10
TOP_ITEMS = 50


def item_category(item: InvoiceItem) -> str:
    """The item's assigned category, or the categorizer's guess."""
    return item.category or categorize_item(item.item_name)


def get_valid_invoices(invoices: list[Invoice]) -> list[Invoice]:
    return [invoice for invoice in invoices if invoice.status == InvoiceStatus.ISSUED]


def get_voided_invoices(invoices: list[Invoice]) -> list[Invoice]:
    return [invoice for invoice in invoices if invoice.status == InvoiceStatus.VOIDED]


def calculate_basic_statistics(invoices: list[Invoice]) -> Statistics:
    """
    Totals, date range, category breakdown and daily series.

    Args:
        invoices: Issued invoices

    Returns:
        Statistics; all zero with date_range=None for an empty list
    """
    if not invoices:
        return Statistics()

    total_amount = sum(invoice.total_amount for invoice in invoices)
    dates = [invoice.invoice_date for invoice in invoices]

    return Statistics(
        total_amount=total_amount,
        total_invoices=len(invoices),
        average_amount=total_amount / len(invoices),
        date_range=DateRange(start=min(dates), end=max(dates)),
        category_breakdown=calculate_category_breakdown(invoices),
        time_series_data=calculate_time_series_data(invoices),
    )


def calculate_category_breakdown(invoices: list[Invoice]) -> list[CategoryStat]:
    """
    Item amounts per category, largest first.

    Percentages are relative to the sum of all item amounts, not to the
    invoice totals.
    """
    amounts: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)

    for invoice in invoices:
        for item in invoice.items:
            category = item_category(item)
            amounts[category] += item.amount
            counts[category] += 1

    grand_total = sum(amounts.values())
    breakdown = [
        CategoryStat(
            category=category,
            amount=amount,
            count=counts[category],
            percentage=(amount / grand_total) * 100 if grand_total > 0 else 0.0,
        )
        for category, amount in amounts.items()
    ]
    return sorted(breakdown, key=lambda stat: stat.amount, reverse=True)


def _bucket_series(invoices: list[Invoice], key) -> list[TimeSeriesPoint]:
    amounts: dict[date, float] = defaultdict(float)
    counts: dict[date, int] = defaultdict(int)

    for invoice in invoices:
        bucket = key(invoice.invoice_date)
        amounts[bucket] += invoice.total_amount
        counts[bucket] += 1

    return [
        TimeSeriesPoint(date=bucket, amount=amounts[bucket], count=counts[bucket])
        for bucket in sorted(amounts)
    ]


def calculate_time_series_data(invoices: list[Invoice]) -> list[TimeSeriesPoint]:
    """One point per calendar day, ascending."""
    return _bucket_series(invoices, lambda d: d)


def calculate_monthly_time_series(invoices: list[Invoice]) -> list[TimeSeriesPoint]:
    """One point per month dated on its first day, ascending."""
    return _bucket_series(invoices, lambda d: d.replace(day=1))


def calculate_monthly_statistics(invoices: list[Invoice]) -> list[MonthlyStatistics]:
    by_month: dict[tuple[int, int], list[Invoice]] = defaultdict(list)
    for invoice in invoices:
        by_month[(invoice.invoice_date.year, invoice.invoice_date.month)].append(invoice)

    monthly = []
    for (year, month), month_invoices in sorted(by_month.items()):
        total_amount = sum(invoice.total_amount for invoice in month_invoices)
        monthly.append(
            MonthlyStatistics(
                year=year,
                month=month,
                total_amount=total_amount,
                invoice_count=len(month_invoices),
                average_amount=total_amount / len(month_invoices),
                category_breakdown=calculate_category_breakdown(month_invoices),
            )
        )
    return monthly


def calculate_merchant_statistics(
    invoices: list[Invoice], limit: int = TOP_MERCHANTS
) -> list[MerchantStatistics]:
    """Merchants by total spend, largest first, at most `limit` entries."""
    amounts: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)

    for invoice in invoices:
        amounts[invoice.merchant_name] += invoice.total_amount
        counts[invoice.merchant_name] += 1

    grand_total = sum(amounts.values())
    merchants = [
        MerchantStatistics(
            merchant_name=name,
            total_amount=amount,
            invoice_count=counts[name],
            average_amount=amount / counts[name],
            percentage=(amount / grand_total) * 100 if grand_total > 0 else 0.0,
        )
        for name, amount in amounts.items()
    ]
    merchants.sort(key=lambda merchant: merchant.total_amount, reverse=True)
    return merchants[:limit]


def calculate_item_frequency_stats(
    invoices: list[Invoice], limit: int = TOP_ITEMS
) -> list[ItemFrequencyStats]:
    """
    Most frequently bought items.

    Items are keyed by name; the category of the first occurrence is kept.
    Ties in frequency keep first-seen order.
    """
    frequency: dict[str, int] = {}
    totals: dict[str, float] = {}
    categories: dict[str, str] = {}

    for invoice in invoices:
        for item in invoice.items:
            name = item.item_name
            if name not in frequency:
                frequency[name] = 0
                totals[name] = 0.0
                categories[name] = item_category(item)
            frequency[name] += 1
            totals[name] += item.amount

    items = [
        ItemFrequencyStats(
            item_name=name,
            category=categories[name],
            frequency=count,
            total_amount=totals[name],
            average_price=totals[name] / count,
        )
        for name, count in frequency.items()
    ]
    items.sort(key=lambda item: item.frequency, reverse=True)
    return items[:limit]


def calculate_voided_invoice_stats(
    all_invoices: list[Invoice], voided_invoices: list[Invoice]
) -> VoidedInvoiceStats:
    """
    Count and amount of voided invoices.

    Args:
        all_invoices: Every invoice, issued and voided
        voided_invoices: The voided subset
    """
    return VoidedInvoiceStats(
        total_voided_invoices=len(voided_invoices),
        total_voided_amount=sum(invoice.total_amount for invoice in voided_invoices),
        voided_percentage=(
            (len(voided_invoices) / len(all_invoices)) * 100 if all_invoices else 0.0
        ),
    )


def calculate_extended_statistics(invoices: list[Invoice]) -> ExtendedStatistics:
    """
    Full statistics over a mixed invoice list.

    Only issued invoices contribute to totals and breakdowns; voided ones
    are summarized separately.

    Args:
        invoices: All invoices, issued and voided

    Returns:
        ExtendedStatistics
    """
    valid = get_valid_invoices(invoices)
    voided = get_voided_invoices(invoices)
    basic = calculate_basic_statistics(valid)

    return ExtendedStatistics(
        **basic.model_dump(),
        monthly_data=calculate_monthly_statistics(valid),
        top_merchants=calculate_merchant_statistics(valid),
        item_frequency=calculate_item_frequency_stats(valid),
        voided_invoices_stats=calculate_voided_invoice_stats(invoices, voided),
    )
