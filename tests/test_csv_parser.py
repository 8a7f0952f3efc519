"""Test the streaming invoice CSV parser end to end."""

import asyncio
import io

import pytest

from models import InvoiceStatus
from processors.csv_parser import StreamingCSVParser, parse_invoice_csv
from utils.ids import sequential_ids


def parse(source, **options):
    """Run a parse to completion with a fresh parser."""
    chunk_size = options.pop("chunk_size", None)
    parser = StreamingCSVParser(chunk_size=chunk_size, id_factory=sequential_ids("t"))
    return asyncio.run(parser.parse(source, **options))


def test_sample_file(sample_csv_bytes):
    result = parse(sample_csv_bytes)

    assert result.success
    assert result.errors == []
    assert result.total_rows == 7
    assert result.processed_rows == 3
    assert [inv.invoice_number for inv in result.invoices] == [
        "AB00000001",
        "AB00000002",
        "AB00000003",
    ]

    first, second, third = result.invoices
    assert [item.item_name for item in first.items] == ["拿鐵咖啡", "巧克力餅乾"]
    assert second.items[0].item_name == "汽油"
    assert second.items[0].amount == 1200.0
    assert third.status == InvoiceStatus.VOIDED


def test_single_invoice_scenario():
    data = "M,mobile,/T,2024-09-01,12345678,Shop,AB1,137,issued\nD,AB1,137,CoffeeSnack\n"
    result = parse(data.encode())

    assert result.success
    assert len(result.invoices) == 1
    invoice = result.invoices[0]
    assert invoice.total_amount == 137
    assert len(invoice.items) == 1
    assert invoice.items[0].item_name == "CoffeeSnack"
    assert invoice.items[0].amount == 137


def test_short_detail_row_is_recorded_not_fatal():
    data = (
        "M,mobile,/T,2024-09-01,1,Shop,AB1,100\n"
        "D,AB1,100\n"
        "M,mobile,/T,2024-09-02,1,Shop,AB2,50\n"
        "D,AB2,50,茶\n"
    )
    result = parse(data.encode(), skip_errors=True)

    assert result.success
    assert result.is_partial
    assert len(result.errors) == 1
    assert result.errors[0].row == 2
    assert "expected at least 4 fields" in result.errors[0].message
    assert result.errors[0].data == ["D", "AB1", "100"]
    assert len(result.invoices) == 2
    assert result.invoices[0].items == []


def test_duplicate_items_collapse():
    data = (
        "M,mobile,/T,2024-09-01,1,Shop,AB1,130\n"
        "D,AB1,65,咖啡\n"
        "D,AB1,咖啡,65\n"
        "D,AB1,65,紅茶\n"
    )
    result = parse(data.encode())

    items = result.invoices[0].items
    assert [(item.item_name, item.amount) for item in items] == [("咖啡", 65), ("紅茶", 65)]


def test_items_join_only_their_invoice():
    data = (
        "D,AB2,30,豆漿\n"
        "M,mobile,/T,2024-09-01,1,Shop,AB1,100\n"
        "M,mobile,/T,2024-09-01,1,Shop,AB2,30\n"
        "D,AB1,100,便當\n"
        "D,ZZ9,10,orphan\n"
    )
    result = parse(data.encode())

    by_number = {inv.invoice_number: inv for inv in result.invoices}
    assert [item.item_name for item in by_number["AB1"].items] == ["便當"]
    assert [item.item_name for item in by_number["AB2"].items] == ["豆漿"]
    assert all(item.item_name != "orphan" for inv in result.invoices for item in inv.items)


def test_later_header_overwrites_earlier():
    data = (
        "M,mobile,/T,2024-09-01,1,Old Shop,AB1,100\n"
        "M,mobile,/T,2024-09-02,1,New Shop,AB1,200\n"
    )
    result = parse(data.encode())

    assert len(result.invoices) == 1
    assert result.invoices[0].merchant_name == "New Shop"
    assert result.invoices[0].total_amount == 200


def test_blank_and_unknown_rows_are_skipped():
    data = (
        "\n"
        "H,header,row\n"
        "M,mobile,/T,2024-09-01,1,Shop,AB1,100\n"
        ",,,\n"
        "D,AB1,100,便當\n"
        "\n"
    )
    result = parse(data.encode())

    assert result.success
    assert result.errors == []
    # Blank rows are not counted; the unknown H row is
    assert result.total_rows == 3
    assert len(result.invoices) == 1


def test_missing_merchant_drops_invoice():
    data = (
        "M,mobile,/T,2024-09-01,1,,AB1,100\n"
        "M,mobile,/T,2024-09-01,1,Shop,AB2,50\n"
    )
    result = parse(data.encode())

    assert [inv.invoice_number for inv in result.invoices] == ["AB2"]
    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.row == -1
    assert error.field == "merchant_name"
    assert "AB1" in error.message
    assert result.success


def test_utf8_bom_is_tolerated(sample_csv_bytes):
    result = parse(b"\xef\xbb\xbf" + sample_csv_bytes)
    assert result.success
    assert len(result.invoices) == 3


@pytest.mark.parametrize("kind", ["path", "str_path", "binary_stream", "text_stream"])
def test_source_kinds(kind, sample_csv_path):
    text = sample_csv_path.read_text(encoding="utf-8")
    source = {
        "path": sample_csv_path,
        "str_path": str(sample_csv_path),
        "binary_stream": io.BytesIO(text.encode("utf-8")),
        "text_stream": io.StringIO(text, newline=""),
    }[kind]

    result = parse(source)
    assert len(result.invoices) == 3


def test_binary_stream_left_open():
    stream = io.BytesIO(b"M,mobile,/T,2024-09-01,1,Shop,AB1,100\n")
    parse(stream)
    assert not stream.closed


def test_missing_file_is_fatal(tmp_path):
    result = parse(tmp_path / "does_not_exist.csv")

    assert not result.success
    assert result.invoices == []
    assert len(result.errors) == 1
    assert result.errors[0].row == -1
    assert result.errors[0].message.startswith("Failed to read file")


def test_undecodable_bytes_are_fatal():
    result = parse(b"M,mobile,/T,2024-09-01,1,\xff\xfe\xfa,AB1,100\n")

    assert not result.success
    assert result.invoices == []
    assert len(result.errors) == 1


def test_strict_mode_stops_at_first_bad_row():
    data = (
        "M,mobile,/T,2024-09-01,1,Shop,AB1,100\n"
        "M,mobile,/T,not-a-date,1,Shop,AB2,50\n"
        "M,mobile,/T,2024-09-03,1,Shop,AB3,70\n"
    )
    result = parse(data.encode(), skip_errors=False)

    assert not result.success
    assert len(result.errors) == 1
    assert result.errors[0].field == "invoice_date"
    # Rows before the failure are still reconciled
    assert [inv.invoice_number for inv in result.invoices] == ["AB1"]
    assert result.total_rows == 2


def test_strict_mode_without_errors_succeeds(sample_csv_bytes):
    result = parse(sample_csv_bytes, skip_errors=False)
    assert result.success
    assert len(result.invoices) == 3


def test_all_rows_bad_is_not_success():
    data = "M,mobile,/T,bad,1,Shop,AB1,100\nD,AB1,10\n"
    result = parse(data.encode(), skip_errors=True)

    assert not result.success
    assert result.invoices == []
    assert len(result.errors) == 2


def test_error_cap_suppresses_detail_but_keeps_parsing():
    bad_rows = "".join(f"D,AB1,{i}\n" for i in range(5))
    data = bad_rows + "M,mobile,/T,2024-09-01,1,Shop,AB1,100\nD,AB1,100,便當\n"
    result = parse(data.encode(), max_errors=2)

    assert len(result.errors) == 2
    assert result.suppressed_errors == 3
    assert result.error_count == 5
    assert len(result.invoices) == 1
    assert result.invoices[0].items[0].item_name == "便當"
    assert result.success


def test_progress_reporting(sample_csv_bytes):
    reports = []
    parse(sample_csv_bytes, chunk_size=2, on_progress=lambda p, m: reports.append((p, m)))

    values = [p for p, _ in reports]
    assert values[0] == 0
    assert values[-1] == 100
    assert 85 in values
    assert all(0 <= v <= 100 for v in values)
    # Four ingestion chunks for seven rows
    assert sum(1 for _, m in reports if m.startswith("Processed")) == 4
    ingest = [v for v in values[1:] if v <= 80]
    assert ingest and max(ingest) <= 80


def test_parser_yields_between_chunks(sample_csv_bytes):
    """Another task gets to run while a file is being parsed."""

    async def scenario():
        ticks = 0
        done = False

        async def ticker():
            nonlocal ticks
            while not done:
                ticks += 1
                await asyncio.sleep(0)

        task = asyncio.create_task(ticker())
        parser = StreamingCSVParser(chunk_size=1)
        result = await parser.parse(sample_csv_bytes)
        done = True
        await task
        return ticks, result

    ticks, result = asyncio.run(scenario())
    assert len(result.invoices) == 3
    assert ticks >= 7


def test_parse_invoice_csv_uses_fresh_parser(sample_csv_bytes):
    first = asyncio.run(parse_invoice_csv(sample_csv_bytes, id_factory=sequential_ids("a")))
    second = asyncio.run(parse_invoice_csv(sample_csv_bytes, id_factory=sequential_ids("b")))

    assert first.invoices[0].id.startswith("a-")
    assert second.invoices[0].id.startswith("b-")
    assert len(first.invoices) == len(second.invoices) == 3


def test_invoice_ids_are_unique(sample_csv_bytes):
    result = asyncio.run(parse_invoice_csv(sample_csv_bytes))
    ids = [inv.id for inv in result.invoices]
    item_ids = [item.id for inv in result.invoices for item in inv.items]
    assert len(set(ids)) == len(ids)
    assert len(set(item_ids)) == len(item_ids)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
