"""Streaming parser for Taiwan e-invoice CSV exports (M/D line format)."""

import asyncio
import csv
import io
from contextlib import contextmanager
from itertools import islice
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, TextIO, Union

from config import Config
from models.invoice import InvoiceItem, PartialInvoice
from models.parse_result import ParseError, ParseResult
from parsers.base import LineParseError
from parsers.factory import LineParserFactory
from processors.accumulator import ParseAccumulator
from processors.reconciler import ChunkedReconciler
from utils.ids import IdFactory, generate_id
from utils.logging_config import get_logger
from utils.progress import ProgressCallback

logger = get_logger(__name__)

CSVSource = Union[str, Path, bytes, bytearray, BinaryIO, TextIO]


@contextmanager
def open_csv_source(source: CSVSource) -> Iterator[TextIO]:
    """
    Open any supported source as a UTF-8 text stream (BOM tolerated).

    Paths are opened and closed here; caller-owned streams are left open.
    """
    if isinstance(source, (str, Path)):
        with open(source, encoding="utf-8-sig", newline="") as f:
            yield f
    elif isinstance(source, (bytes, bytearray)):
        yield io.TextIOWrapper(io.BytesIO(bytes(source)), encoding="utf-8-sig", newline="")
    elif isinstance(source, io.TextIOBase):
        yield source
    else:
        wrapper = io.TextIOWrapper(source, encoding="utf-8-sig", newline="")
        try:
            yield wrapper
        finally:
            wrapper.detach()


def _is_blank(row: list[str]) -> bool:
    return not any(field.strip() for field in row)


class StreamingCSVParser:
    """Parse invoice CSV files chunk by chunk into reconciled invoices."""

    def __init__(
        self,
        chunk_size: Optional[int] = None,
        batch_size: Optional[int] = None,
        id_factory: IdFactory = generate_id,
    ):
        """
        Initialize the parser.

        Args:
            chunk_size: Rows handled between two yields
                (defaults to Config.PARSE_CHUNK_SIZE)
            batch_size: Reconciliation batch size
                (defaults to Config.RECONCILE_BATCH_SIZE)
            id_factory: Source of invoice and item ids
        """
        self.chunk_size = chunk_size or Config.PARSE_CHUNK_SIZE
        self.factory = LineParserFactory(id_factory)
        self.reconciler = ChunkedReconciler(batch_size, id_factory)

    async def parse(
        self,
        source: CSVSource,
        on_progress: Optional[ProgressCallback] = None,
        skip_errors: Optional[bool] = None,
        max_errors: Optional[int] = None,
    ) -> ParseResult:
        """
        Parse one CSV file.

        Row failures are recorded as ParseErrors. With skip_errors=False the
        first row failure stops ingestion, but invoices built from the rows
        read so far are still returned. Only an unreadable file produces a
        result without invoices.

        Args:
            source: Path, raw bytes, or an open binary/text stream
            on_progress: Called with (percent, message); 0-80 while reading
                rows, 85-100 while reconciling
            skip_errors: Tolerate row failures (defaults to Config.SKIP_ERRORS)
            max_errors: Errors recorded in detail before further ones are
                only counted (defaults to Config.MAX_ERRORS)

        Returns:
            ParseResult
        """
        skip_errors = Config.SKIP_ERRORS if skip_errors is None else skip_errors
        max_errors = Config.MAX_ERRORS if max_errors is None else max_errors
        accumulator = ParseAccumulator(max_errors=max_errors)

        if on_progress:
            on_progress(0, "Starting to parse file...")

        try:
            with open_csv_source(source) as stream:
                reader = csv.reader(stream)
                while not accumulator.aborted:
                    chunk = list(islice(reader, self.chunk_size))
                    if not chunk:
                        break

                    self._process_chunk(chunk, accumulator, skip_errors)

                    if on_progress:
                        on_progress(
                            accumulator.ingest_progress,
                            f"Processed {accumulator.parsed_rows} rows...",
                        )

                    await asyncio.sleep(0)
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            logger.error(f"Failed to read invoice CSV: {e}")
            return ParseResult.fatal(f"Failed to read file: {e}")

        if accumulator.aborted:
            logger.warning(
                f"Stopped reading at row {accumulator.total_rows} (skip_errors=False)"
            )

        total_rows = accumulator.total_rows
        invoices = await self.reconciler.reconcile(accumulator, on_progress)

        if on_progress:
            on_progress(100, "Parsing complete")

        success = accumulator.error_count == 0 or (skip_errors and len(invoices) > 0)

        logger.info(
            f"Parsed {len(invoices)} invoices from {total_rows} rows "
            f"({accumulator.error_count} errors)"
        )

        return ParseResult(
            success=success,
            invoices=invoices,
            errors=accumulator.errors,
            total_rows=total_rows,
            processed_rows=len(invoices),
            suppressed_errors=accumulator.suppressed_errors,
        )

    def _process_chunk(
        self,
        chunk: list[list[str]],
        accumulator: ParseAccumulator,
        skip_errors: bool,
    ) -> None:
        """Dispatch each non-blank row of a chunk to its line parser."""
        for row in chunk:
            if _is_blank(row):
                continue

            accumulator.total_rows += 1
            row_number = accumulator.total_rows

            parser = self.factory.get_parser(row[0].strip())
            if parser is None:
                continue

            try:
                record = parser.parse(row, row_number)
            except LineParseError as e:
                logger.debug(str(e))
                accumulator.record_error(
                    ParseError(row=row_number, field=e.field, message=str(e), data=row)
                )
                if not skip_errors:
                    accumulator.aborted = True
                    return
                continue

            if isinstance(record, PartialInvoice):
                accumulator.add_header(record)
            elif isinstance(record, InvoiceItem):
                accumulator.add_item(record)


async def parse_invoice_csv(
    source: CSVSource,
    on_progress: Optional[ProgressCallback] = None,
    skip_errors: Optional[bool] = None,
    max_errors: Optional[int] = None,
    id_factory: IdFactory = generate_id,
) -> ParseResult:
    """
    Parse an invoice CSV with a freshly constructed parser.

    Args:
        source: Path, raw bytes, or an open binary/text stream
        on_progress: Optional progress callback
        skip_errors: Tolerate row failures
        max_errors: Error detail cap
        id_factory: Source of invoice and item ids

    Returns:
        ParseResult
    """
    parser = StreamingCSVParser(id_factory=id_factory)
    return await parser.parse(
        source, on_progress=on_progress, skip_errors=skip_errors, max_errors=max_errors
    )
