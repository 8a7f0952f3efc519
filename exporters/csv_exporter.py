"""CSV export functionality for invoice data."""

import csv
from datetime import datetime
from pathlib import Path
from typing import Callable, NamedTuple, Optional, Union

from config import Config
from models import ExtendedStatistics, Invoice, InvoiceStatus
from utils import format_amount, get_logger

logger = get_logger(__name__)


class ExportField(NamedTuple):
    key: str
    label: str
    get_value: Callable[[Invoice], Union[str, int, float]]
    group: str  # invoice | merchant | amount | date


EXPORT_FIELDS: list[ExportField] = [
    ExportField("invoice_number", "發票號碼", lambda inv: inv.invoice_number, "invoice"),
    ExportField(
        "invoice_date",
        "發票日期",
        lambda inv: inv.invoice_date.strftime(Config.DATE_FORMAT),
        "date",
    ),
    ExportField("merchant_name", "商店名稱", lambda inv: inv.merchant_name, "merchant"),
    ExportField("merchant_id", "商店統編", lambda inv: inv.merchant_id, "merchant"),
    ExportField("total_amount", "總金額", lambda inv: format_amount(inv.total_amount), "amount"),
    ExportField(
        "status",
        "狀態",
        lambda inv: "開立" if inv.status == InvoiceStatus.ISSUED else "作廢",
        "invoice",
    ),
    ExportField("carrier_type", "載具類型", lambda inv: inv.carrier_type, "invoice"),
    ExportField("carrier_number", "載具號碼", lambda inv: inv.carrier_number, "invoice"),
    ExportField("item_count", "品項數量", lambda inv: len(inv.items), "amount"),
]

DEFAULT_EXPORT_FIELDS = [
    "invoice_number",
    "invoice_date",
    "merchant_name",
    "total_amount",
    "status",
]

ITEM_HEADERS = ["品項名稱", "品項金額", "品項分類"]


def validate_export_fields(selected_fields: list[str]) -> tuple[bool, list[str]]:
    """
    Check a field selection against EXPORT_FIELDS.

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []
    if not selected_fields:
        errors.append("Select at least one export field")

    known = {field.key for field in EXPORT_FIELDS}
    invalid = [key for key in selected_fields if key not in known]
    if invalid:
        errors.append(f"Unknown fields: {', '.join(invalid)}")

    return len(errors) == 0, errors


class CSVExporter:
    """Export invoice data to CSV format."""

    def __init__(self, output_dir: Optional[Path] = None):
        """
        Initialize CSV exporter.

        Args:
            output_dir: Directory for output files (defaults to Config.OUTPUT_DIR)
        """
        self.output_dir = Path(output_dir or Config.OUTPUT_DIR)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export(
        self,
        invoices: list[Invoice],
        selected_fields: Optional[list[str]] = None,
        include_items: bool = False,
        filename_prefix: str = "invoices",
    ) -> Path:
        """
        Export invoices to CSV (UTF-8 with BOM so spreadsheet tools detect it).

        Args:
            invoices: Invoices to export
            selected_fields: Keys from EXPORT_FIELDS (defaults to DEFAULT_EXPORT_FIELDS);
                unknown keys are ignored
            include_items: One row per item instead of one per invoice
            filename_prefix: Prefix for the output filename

        Returns:
            Path to the written file

        Raises:
            ValueError: If no selected field is known
        """
        selected = set(selected_fields or DEFAULT_EXPORT_FIELDS)
        fields = [field for field in EXPORT_FIELDS if field.key in selected]
        if not fields:
            raise ValueError("Select at least one valid export field")

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        kind = "items" if include_items else "summary"
        output_file = self.output_dir / f"{filename_prefix}_{kind}_{timestamp}.csv"

        headers = [field.label for field in fields]
        if include_items:
            headers += ITEM_HEADERS

        rows = self._item_rows(invoices, fields) if include_items else [
            self._invoice_row(invoice, fields) for invoice in invoices
        ]

        logger.info(f"Writing {len(rows)} rows to {output_file}")
        with open(output_file, "w", newline="", encoding="utf-8-sig") as f:
            writer = csv.DictWriter(f, fieldnames=headers)
            writer.writeheader()
            writer.writerows(rows)

        logger.info("Invoice export complete")
        return output_file

    @staticmethod
    def _invoice_row(invoice: Invoice, fields: list[ExportField]) -> dict:
        return {field.label: field.get_value(invoice) for field in fields}

    def _item_rows(self, invoices: list[Invoice], fields: list[ExportField]) -> list[dict]:
        """One row per item; item-less invoices get a single row with empty item columns."""
        rows = []
        for invoice in invoices:
            base_row = self._invoice_row(invoice, fields)
            if not invoice.items:
                rows.append({**base_row, "品項名稱": "", "品項金額": "", "品項分類": ""})
                continue
            for item in invoice.items:
                rows.append(
                    {
                        **base_row,
                        "品項名稱": item.item_name,
                        "品項金額": format_amount(item.amount),
                        "品項分類": item.category or "",
                    }
                )
        return rows

    def export_summary(self, statistics: ExtendedStatistics) -> Path:
        """
        Export a summary report of consumption statistics.

        Args:
            statistics: Extended statistics to summarize

        Returns:
            Path to summary CSV file
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        summary_file = self.output_dir / f"summary_{timestamp}.csv"

        logger.info(f"Writing summary to {summary_file}")
        with open(summary_file, "w", newline="", encoding="utf-8-sig") as f:
            writer = csv.writer(f)
            writer.writerow(["Invoice Consumption Summary"])
            writer.writerow([])
            writer.writerow(["Total Invoices", statistics.total_invoices])
            writer.writerow(["Total Amount", f"{statistics.total_amount:.2f}"])
            writer.writerow(["Average Amount", f"{statistics.average_amount:.2f}"])
            if statistics.date_range:
                writer.writerow(
                    [
                        "Date Range",
                        statistics.date_range.start.strftime(Config.DATE_FORMAT),
                        statistics.date_range.end.strftime(Config.DATE_FORMAT),
                    ]
                )
            voided = statistics.voided_invoices_stats
            writer.writerow(["Voided Invoices", voided.total_voided_invoices])
            writer.writerow(["Voided Amount", f"{voided.total_voided_amount:.2f}"])
            writer.writerow([])

            writer.writerow(["Category", "Count", "Amount", "Percentage"])
            for stat in statistics.category_breakdown:
                writer.writerow(
                    [stat.category, stat.count, f"{stat.amount:.2f}", f"{stat.percentage:.1f}%"]
                )
            writer.writerow([])

            writer.writerow(["Month", "Invoices", "Amount", "Average"])
            for month in statistics.monthly_data:
                writer.writerow(
                    [
                        f"{month.year}-{month.month:02d}",
                        month.invoice_count,
                        f"{month.total_amount:.2f}",
                        f"{month.average_amount:.2f}",
                    ]
                )
            writer.writerow([])

            writer.writerow(["Merchant", "Invoices", "Amount", "Percentage"])
            for merchant in statistics.top_merchants:
                writer.writerow(
                    [
                        merchant.merchant_name,
                        merchant.invoice_count,
                        f"{merchant.total_amount:.2f}",
                        f"{merchant.percentage:.1f}%",
                    ]
                )

        logger.info("Summary export complete")
        return summary_file
