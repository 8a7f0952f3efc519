"""Per-parse accumulator for M/D records awaiting reconciliation."""

from models.invoice import InvoiceItem, PartialInvoice
from models.parse_result import ParseError


class ParseAccumulator:
    """
    Holds everything one parse collects between the first chunk and the
    final reconciliation: headers keyed by invoice number, item lists keyed
    by invoice number, errors, and row counters.

    A fresh accumulator is created for every parse and released once the
    invoices have been built.
    """

    def __init__(self, max_errors: int = 100):
        self.max_errors = max_errors
        self.headers: dict[str, PartialInvoice] = {}
        self.details: dict[str, list[InvoiceItem]] = {}
        self.errors: list[ParseError] = []
        self.suppressed_errors = 0
        self.total_rows = 0
        self.parsed_rows = 0
        self.aborted = False

    def add_header(self, header: PartialInvoice) -> None:
        """Store an M-line; a later M-line with the same number wins."""
        self.headers[header.invoice_number] = header
        self.parsed_rows += 1

    def add_item(self, item: InvoiceItem) -> None:
        self.details.setdefault(item.invoice_number, []).append(item)
        self.parsed_rows += 1

    def items_for(self, invoice_number: str) -> list[InvoiceItem]:
        return self.details.get(invoice_number, [])

    def record_error(self, error: ParseError) -> bool:
        """
        Record an error unless the cap has been reached.

        Returns:
            True if the error detail was kept, False if only counted
        """
        if len(self.errors) >= self.max_errors:
            self.suppressed_errors += 1
            return False
        self.errors.append(error)
        return True

    @property
    def error_count(self) -> int:
        return len(self.errors) + self.suppressed_errors

    @property
    def ingest_progress(self) -> float:
        """Ingestion share of overall progress, 0-80."""
        return min(self.parsed_rows / max(self.total_rows, 1) * 80, 80)

    def release(self) -> None:
        """Drop the intermediate maps once invoices have been built."""
        self.headers.clear()
        self.details.clear()
