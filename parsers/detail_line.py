"""Parser for D-lines (invoice item rows)."""

import logging
import re
from typing import NamedTuple, Sequence

from models.category import categorize_item
from models.invoice import InvoiceItem
from parsers.base import BaseLineParser
from parsers.field_parsers import is_valid_amount, parse_amount

logger = logging.getLogger(__name__)

AMOUNT_LIKE = re.compile(r"^-?\d+(?:\.\d+)?$")


def looks_like_amount(value: str) -> bool:
    """True for plain numbers, thousands separators allowed."""
    return bool(AMOUNT_LIKE.match(value.replace(",", "")))


class DetailLineRow(NamedTuple):
    """Fixed-shape view of a D-line: D,invoiceNumber,<field3>,<field4>."""

    tag: str
    invoice_number: str
    third: str
    fourth: str

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "DetailLineRow":
        return cls(*(BaseLineParser._clean(value) for value in row[:4]))

    def resolve_name_and_amount(self) -> tuple[str, str]:
        """
        Work out which of the two trailing fields is the item name.

        Government downloads put the amount first, older exports put the
        name first. Exactly one amount-like field decides the order; when
        both or neither look like amounts the legacy name-first order is
        kept.

        Returns:
            (item_name, amount_text)
        """
        third_is_amount = looks_like_amount(self.third)
        fourth_is_amount = looks_like_amount(self.fourth)

        if third_is_amount and not fourth_is_amount:
            return self.fourth, self.third
        return self.third, self.fourth


class DetailLineParser(BaseLineParser):
    """Turn a D-line into an InvoiceItem."""

    tag = "D"
    min_fields = 4

    def parse(self, row: Sequence[str], row_number: int) -> InvoiceItem:
        """
        Parse a D-line in either field order.

        Args:
            row: Raw fields, tag first
            row_number: 1-based row number

        Returns:
            InvoiceItem with its category assigned

        Raises:
            RowShapeError: If fewer than 4 fields are present
            LineParseError: If invoice number or item name is empty, or the
                amount is unparseable
        """
        self._check_shape(row, row_number)
        fields = DetailLineRow.from_row(row)
        item_name, amount_text = fields.resolve_name_and_amount()

        if not fields.invoice_number:
            raise self._fail(
                "invoice number is empty", row, row_number, field="invoice_number"
            )

        if not item_name:
            raise self._fail("item name is empty", row, row_number, field="item_name")

        amount = parse_amount(amount_text)
        if not is_valid_amount(amount):
            raise self._fail(
                f"invalid amount: {amount_text!r}", row, row_number, field="amount"
            )

        if looks_like_amount(fields.third) and looks_like_amount(fields.fourth):
            logger.debug(
                f"Row {row_number}: both item fields are numeric, "
                f"assuming name-first order ({item_name!r})"
            )

        return InvoiceItem(
            id=self.id_factory(),
            invoice_number=fields.invoice_number,
            item_name=item_name,
            amount=amount,
            category=categorize_item(item_name),
        )
