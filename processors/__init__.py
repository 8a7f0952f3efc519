"""CSV parsing, reconciliation and file processing modules."""

from processors.accumulator import ParseAccumulator
from processors.batch_processor import (
    BatchProcessor,
    FileValidationError,
    ReprocessError,
    validate_csv_file,
)
from processors.csv_parser import StreamingCSVParser, parse_invoice_csv
from processors.invoice_store import InvoiceStore
from processors.reconciler import ChunkedReconciler

__all__ = [
    "StreamingCSVParser",
    "parse_invoice_csv",
    "ChunkedReconciler",
    "ParseAccumulator",
    "InvoiceStore",
    "BatchProcessor",
    "FileValidationError",
    "ReprocessError",
    "validate_csv_file",
]
