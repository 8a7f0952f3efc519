"""Test M-line and D-line parsers and the parser factory."""

from datetime import date

import pytest

from models import InvoiceStatus
from parsers import (
    DetailLineParser,
    LineParseError,
    LineParserFactory,
    MainLineParser,
    RowShapeError,
)

M_ROW = ["M", " 3J0002 ", "/ABC1234", "2024/09/01", "12345678", " 全家 ", "AB00000001", "137"]


class TestMainLineParser:
    def test_parses_header_fields(self):
        header = MainLineParser().parse(M_ROW, 1)

        assert header.carrier_type == "3J0002"
        assert header.merchant_name == "全家"
        assert header.invoice_number == "AB00000001"
        assert header.invoice_date == date(2024, 9, 1)
        assert header.total_amount == 137.0
        assert header.status == InvoiceStatus.ISSUED

    def test_optional_status_field(self):
        header = MainLineParser().parse(M_ROW + ["作廢"], 1)
        assert header.status == InvoiceStatus.VOIDED

    def test_extra_trailing_fields_are_ignored(self):
        header = MainLineParser().parse(M_ROW + ["issued", "extra", "more"], 1)
        assert header.status == InvoiceStatus.ISSUED

    def test_short_row_raises_shape_error(self):
        with pytest.raises(RowShapeError, match="Row 4: M-line parse error: expected at least 8"):
            MainLineParser().parse(M_ROW[:7], 4)

    def test_bad_date(self):
        row = list(M_ROW)
        row[3] = "2024/02/30"
        with pytest.raises(LineParseError) as exc_info:
            MainLineParser().parse(row, 2)

        assert exc_info.value.field == "invoice_date"
        assert exc_info.value.row_number == 2
        assert "Row 2" in str(exc_info.value)

    def test_bad_amount(self):
        row = list(M_ROW)
        row[7] = "-"
        with pytest.raises(LineParseError) as exc_info:
            MainLineParser().parse(row, 3)
        assert exc_info.value.field == "total_amount"


class TestDetailLineParser:
    @pytest.mark.parametrize(
        "row",
        [
            ["D", "INV1", "137", "咖啡"],
            ["D", "INV1", "咖啡", "137"],
        ],
    )
    def test_field_order_is_detected(self, row, id_factory):
        """Amount-first and name-first rows parse to the same item."""
        item = DetailLineParser(id_factory).parse(row, 1)

        assert item.invoice_number == "INV1"
        assert item.item_name == "咖啡"
        assert item.amount == 137.0
        assert item.category == "飲料"
        assert item.id == "test-1"

    def test_thousands_separator_counts_as_amount(self):
        item = DetailLineParser().parse(["D", "INV1", "1,200", "汽油"], 1)
        assert item.item_name == "汽油"
        assert item.amount == 1200.0

    def test_both_numeric_keeps_name_first(self):
        """Ambiguous rows fall back to name-first order."""
        item = DetailLineParser().parse(["D", "INV1", "100", "200"], 1)
        assert item.item_name == "100"
        assert item.amount == 200.0

    def test_neither_numeric_keeps_name_first(self):
        item = DetailLineParser().parse(["D", "INV1", "咖啡", "$50"], 1)
        assert item.item_name == "咖啡"
        assert item.amount == 50.0

    def test_short_row(self):
        with pytest.raises(RowShapeError):
            DetailLineParser().parse(["D", "INV1", "137"], 5)

    def test_empty_invoice_number(self):
        with pytest.raises(LineParseError) as exc_info:
            DetailLineParser().parse(["D", " ", "137", "咖啡"], 1)
        assert exc_info.value.field == "invoice_number"

    def test_empty_item_name(self):
        with pytest.raises(LineParseError) as exc_info:
            DetailLineParser().parse(["D", "INV1", "137", ""], 1)
        assert exc_info.value.field == "item_name"

    def test_unparseable_amount(self):
        with pytest.raises(LineParseError) as exc_info:
            DetailLineParser().parse(["D", "INV1", "咖啡", "-"], 1)
        assert exc_info.value.field == "amount"


def test_factory_dispatch():
    factory = LineParserFactory()

    assert isinstance(factory.get_parser("M"), MainLineParser)
    assert isinstance(factory.get_parser("D"), DetailLineParser)
    assert factory.get_parser("H") is None
    assert factory.get_parser("") is None
    assert sorted(factory.get_supported_tags()) == ["D", "M"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
