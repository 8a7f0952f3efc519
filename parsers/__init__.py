"""Line and field parsers for Taiwan e-invoice CSV rows."""

from parsers.base import BaseLineParser, LineParseError, RowShapeError
from parsers.detail_line import DetailLineParser, DetailLineRow, looks_like_amount
from parsers.factory import LineParserFactory
from parsers.field_parsers import (
    parse_amount,
    parse_invoice_date,
    parse_invoice_status,
)
from parsers.main_line import MainLineParser, MainLineRow

__all__ = [
    "BaseLineParser",
    "LineParseError",
    "RowShapeError",
    "MainLineParser",
    "MainLineRow",
    "DetailLineParser",
    "DetailLineRow",
    "LineParserFactory",
    "looks_like_amount",
    "parse_invoice_date",
    "parse_amount",
    "parse_invoice_status",
]
