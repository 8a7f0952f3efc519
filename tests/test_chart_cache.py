"""Test the chart data cache."""

from datetime import date

import pytest

from analytics.chart_cache import ChartCache, generate_hash
from analytics.statistics import (
    calculate_category_breakdown,
    calculate_monthly_time_series,
    calculate_time_series_data,
)
from models import Invoice, InvoiceStatus


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ChartCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def invoices(make_invoice):
    return [
        make_invoice(100, date(2024, 9, 1), items=[("咖啡", 100)]),
        make_invoice(250.5, date(2024, 9, 2), items=[("便當", 250.5)]),
    ]


def test_set_then_get_returns_equal_data(cache, invoices):
    data = calculate_time_series_data(invoices)
    cache.set_daily_time_series(invoices, data)

    assert cache.get_daily_time_series(invoices) == data


def test_mutating_an_invoice_invalidates(cache, invoices):
    cache.set_daily_time_series(invoices, calculate_time_series_data(invoices))

    invoices[0].total_amount = 101
    assert cache.get_daily_time_series(invoices) is None


def test_status_change_invalidates(cache, invoices):
    cache.set_category_breakdown(invoices, calculate_category_breakdown(invoices))

    invoices[1].status = InvoiceStatus.VOIDED
    assert cache.get_category_breakdown(invoices) is None


def test_assigned_fields_are_coerced(cache, invoices):
    cache.set_daily_time_series(invoices, calculate_time_series_data(invoices))

    invoices[0].total_amount = 101
    invoices[1].status = "voided"

    assert isinstance(invoices[0].total_amount, float)
    assert invoices[1].status is InvoiceStatus.VOIDED
    assert cache.get_daily_time_series(invoices) is None


def test_hash_tolerates_unvalidated_invoices(invoices):
    raw = Invoice.model_construct(
        **{**invoices[0].model_dump(), "total_amount": 100, "status": "issued"}
    )

    assert generate_hash([raw]) == generate_hash([invoices[0]])


def test_order_does_not_matter(cache, invoices):
    data = calculate_monthly_time_series(invoices)
    cache.set_monthly_time_series(invoices, data)

    assert cache.get_monthly_time_series(list(reversed(invoices))) == data


def test_stored_data_is_a_copy(cache, invoices):
    data = calculate_time_series_data(invoices)
    cache.set_daily_time_series(invoices, data)
    data.clear()

    assert len(cache.get_daily_time_series(invoices)) == 2


def test_entries_expire(cache, clock, invoices):
    cache.set_daily_time_series(invoices, calculate_time_series_data(invoices))

    clock.now += 299
    assert cache.get_daily_time_series(invoices) is not None

    clock.now += 1
    assert cache.get_daily_time_series(invoices) is None
    # Lazily invalid only; still counted until swept
    assert cache.get_cache_stats().daily_hit


def test_clear_expired_cache(cache, clock, invoices):
    cache.set_daily_time_series(invoices, [])
    clock.now += 200
    cache.set_category_breakdown(invoices, [])
    clock.now += 150

    cache.clear_expired_cache()
    stats = cache.get_cache_stats()

    assert not stats.daily_hit
    assert stats.category_hit
    assert stats.cache_size == 1


def test_clear_cache(cache, invoices):
    cache.set_daily_time_series(invoices, [])
    cache.set_monthly_time_series(invoices, [])
    cache.set_category_breakdown(invoices, [])
    assert cache.get_cache_stats().cache_size == 3

    cache.clear_cache()
    assert cache.get_cache_stats().cache_size == 0
    assert cache.get_monthly_time_series(invoices) is None


def test_kinds_are_independent(cache, invoices):
    cache.set_daily_time_series(invoices, calculate_time_series_data(invoices))
    assert cache.get_monthly_time_series(invoices) is None
    assert cache.get_category_breakdown(invoices) is None


def test_hash_is_signed_32_bit(invoices):
    value = int(generate_hash(invoices))
    assert -(2**31) <= value < 2**31


def test_hash_of_empty_set():
    assert generate_hash([]) == "0"


def test_hash_known_value(make_invoice):
    """Integral totals hash without a trailing .0."""
    invoice = make_invoice(1, invoice_id="a")
    # "a-1-issued" folded with h = h * 31 + code
    expected = 0
    for char in "a-1-issued":
        expected = (expected * 31 + ord(char)) & 0xFFFFFFFF
    if expected >= 2**31:
        expected -= 2**32

    assert generate_hash([invoice]) == str(expected)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
