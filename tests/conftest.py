"""Shared fixtures for invoice analysis tests."""

from datetime import date

import pytest

from config import Config
from models import Invoice, InvoiceItem, InvoiceStatus
from utils.ids import sequential_ids

SAMPLE_CSV = """\
M,3J0002,/ABC1234,2024/09/01,12345678,全家便利商店,AB00000001,137,
D,AB00000001,65,拿鐵咖啡
D,AB00000001,72,巧克力餅乾
M,3J0002,/ABC1234,2024/09/03,87654321,台灣中油,AB00000002,1200,
D,AB00000002,汽油,1200
M,3J0002,/ABC1234,20240915,11112222,誠品書店,AB00000003,450,作廢
D,AB00000003,450,雜誌
"""


@pytest.fixture
def sample_csv_bytes() -> bytes:
    return SAMPLE_CSV.encode("utf-8")


@pytest.fixture
def sample_csv_path(tmp_path):
    path = tmp_path / "invoices.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def id_factory():
    return sequential_ids("test")


@pytest.fixture
def make_invoice():
    """Factory for invoices with sensible defaults."""
    counter = {"n": 0}

    def _make(
        total_amount: float = 100.0,
        invoice_date: date = date(2024, 9, 1),
        merchant_name: str = "全家便利商店",
        status: InvoiceStatus = InvoiceStatus.ISSUED,
        items: list[tuple[str, float]] = None,
        invoice_id: str = None,
    ) -> Invoice:
        counter["n"] += 1
        number = f"AB{counter['n']:08d}"
        return Invoice(
            id=invoice_id or f"inv-{counter['n']}",
            carrier_type="3J0002",
            carrier_number="/ABC1234",
            invoice_date=invoice_date,
            merchant_id="12345678",
            merchant_name=merchant_name,
            invoice_number=number,
            total_amount=total_amount,
            status=status,
            items=[
                InvoiceItem(
                    id=f"item-{counter['n']}-{i}",
                    invoice_number=number,
                    item_name=name,
                    amount=amount,
                )
                for i, (name, amount) in enumerate(items or [])
            ],
        )

    return _make


@pytest.fixture
def restore_config():
    """Snapshot Config class attributes and restore them after the test."""
    names = [name for name in vars(Config) if name.isupper()]
    saved = {name: getattr(Config, name) for name in names}
    yield Config
    for name, value in saved.items():
        setattr(Config, name, value)
