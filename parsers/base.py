"""Base class and errors for e-invoice line parsers."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from utils.ids import IdFactory, generate_id


class LineParseError(ValueError):
    """A single CSV row could not be turned into a record."""

    def __init__(
        self,
        message: str,
        row_number: int,
        field: Optional[str] = None,
        data: Optional[Sequence[str]] = None,
    ):
        self.row_number = row_number
        self.field = field
        self.data = list(data) if data is not None else None
        super().__init__(message)


class RowShapeError(LineParseError):
    """The row has fewer fields than its line type requires."""


class BaseLineParser(ABC):
    """Abstract base class for M-line and D-line parsers."""

    #: Leading tag in the first column that selects this parser
    tag: str = ""
    #: Minimum number of fields, tag included
    min_fields: int = 0

    def __init__(self, id_factory: IdFactory = generate_id):
        """
        Initialize the parser.

        Args:
            id_factory: Callable producing ids for created records
        """
        self.id_factory = id_factory

    @abstractmethod
    def parse(self, row: Sequence[str], row_number: int) -> Any:
        """
        Parse one raw row.

        Args:
            row: Fields of the row as produced by the CSV tokenizer
            row_number: 1-based row number within the file, for messages

        Returns:
            Parsed record

        Raises:
            LineParseError: If the row is malformed
        """

    def _fail(
        self,
        reason: str,
        row: Sequence[str],
        row_number: int,
        field: Optional[str] = None,
    ) -> LineParseError:
        """Build a LineParseError whose message names the row and line type."""
        return LineParseError(
            f"Row {row_number}: {self.tag}-line parse error: {reason}",
            row_number=row_number,
            field=field,
            data=row,
        )

    def _check_shape(self, row: Sequence[str], row_number: int) -> None:
        """Reject rows shorter than min_fields."""
        if len(row) < self.min_fields:
            raise RowShapeError(
                f"Row {row_number}: {self.tag}-line parse error: expected at least "
                f"{self.min_fields} fields, got {len(row)}",
                row_number=row_number,
                data=row,
            )

    @staticmethod
    def _clean(value: Optional[str]) -> str:
        """Trim a field, treating None as empty."""
        if value is None:
            return ""
        return str(value).strip()
