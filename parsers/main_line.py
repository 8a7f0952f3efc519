"""Parser for M-lines (invoice header rows)."""

from typing import NamedTuple, Sequence

from models.invoice import PartialInvoice
from parsers.base import BaseLineParser
from parsers.field_parsers import (
    is_valid_amount,
    parse_amount,
    parse_invoice_date,
    parse_invoice_status,
)


class MainLineRow(NamedTuple):
    """Fixed-shape view of an M-line.

    M,carrierType,carrierNumber,invoiceDate,merchantId,merchantName,invoiceNumber,totalAmount[,status]
    """

    tag: str
    carrier_type: str
    carrier_number: str
    invoice_date: str
    merchant_id: str
    merchant_name: str
    invoice_number: str
    total_amount: str
    status: str = ""

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "MainLineRow":
        # Trailing fields beyond status are tolerated and ignored
        return cls(*(BaseLineParser._clean(value) for value in row[:9]))


class MainLineParser(BaseLineParser):
    """Turn an M-line into a PartialInvoice."""

    tag = "M"
    min_fields = 8

    def parse(self, row: Sequence[str], row_number: int) -> PartialInvoice:
        """
        Parse an M-line.

        Args:
            row: Raw fields, tag first
            row_number: 1-based row number

        Returns:
            PartialInvoice with trimmed fields

        Raises:
            RowShapeError: If fewer than 8 fields are present
            LineParseError: If the date or total amount is unparseable
        """
        self._check_shape(row, row_number)
        fields = MainLineRow.from_row(row)

        invoice_date = parse_invoice_date(fields.invoice_date)
        if invoice_date is None:
            raise self._fail(
                f"invalid invoice date: {fields.invoice_date!r}",
                row,
                row_number,
                field="invoice_date",
            )

        total_amount = parse_amount(fields.total_amount)
        if not is_valid_amount(total_amount):
            raise self._fail(
                f"invalid amount: {fields.total_amount!r}",
                row,
                row_number,
                field="total_amount",
            )

        return PartialInvoice(
            carrier_type=fields.carrier_type,
            carrier_number=fields.carrier_number,
            invoice_date=invoice_date,
            merchant_id=fields.merchant_id,
            merchant_name=fields.merchant_name,
            invoice_number=fields.invoice_number,
            total_amount=total_amount,
            status=parse_invoice_status(fields.status),
        )
