"""Data models for CSV parse outcomes."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from models.invoice import Invoice


class ParseError(BaseModel):
    """A recoverable problem found while parsing or reconciling."""

    row: int  # -1 for reconciliation and file-level errors
    field: Optional[str] = None
    message: str
    data: Optional[Any] = None

    def describe(self) -> str:
        """One-line human readable form."""
        if self.row < 0 or self.message.startswith("Row "):
            return self.message
        return f"Row {self.row}: {self.message}"


class ParseResult(BaseModel):
    """Complete result of parsing one invoice CSV file."""

    success: bool
    invoices: list[Invoice] = Field(default_factory=list)
    errors: list[ParseError] = Field(default_factory=list)
    total_rows: int = 0
    processed_rows: int = 0
    suppressed_errors: int = 0

    @property
    def error_count(self) -> int:
        """Recorded plus suppressed errors."""
        return len(self.errors) + self.suppressed_errors

    @property
    def is_partial(self) -> bool:
        """Succeeded, but some rows or invoices were rejected."""
        return self.success and self.error_count > 0

    @classmethod
    def fatal(cls, message: str) -> "ParseResult":
        """Result for a file that could not be read at all."""
        return cls(success=False, errors=[ParseError(row=-1, message=message)])
