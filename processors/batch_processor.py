"""Batch processor for invoice CSV files: upload, reprocess and remove."""

import json
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from tqdm import tqdm

from config import Config
from models.batch_result import (
    BatchResult,
    BatchStatistics,
    FileResult,
    ProcessingStats,
)
from models.file_info import FileInfo, FileStatus
from models.parse_result import ParseResult
from processors.csv_parser import StreamingCSVParser
from processors.invoice_store import InvoiceStore
from utils.ids import IdFactory, generate_id
from utils.logging_config import get_logger
from utils.progress import ProgressCallback, scaled_progress

logger = get_logger(__name__)


class FileValidationError(ValueError):
    """The file is not an acceptable invoice CSV."""


class ReprocessError(LookupError):
    """A stored file cannot be reprocessed."""


def validate_csv_file(file_name: str, file_size: int) -> None:
    """
    Check name and size of an invoice file before parsing.

    Raises:
        FileValidationError: For a non-CSV name, an empty file or one larger
            than Config.MAX_FILE_SIZE
    """
    if not file_name.lower().endswith(".csv"):
        raise FileValidationError(f"Not a CSV file: {file_name}")
    if file_size == 0:
        raise FileValidationError(f"File is empty: {file_name}")
    if file_size > Config.MAX_FILE_SIZE:
        limit_mb = Config.MAX_FILE_SIZE // (1024 * 1024)
        raise FileValidationError(f"File exceeds {limit_mb}MB: {file_name}")


def create_file_info(
    file_id: str, file_name: str, file_size: int, parse_result: ParseResult
) -> FileInfo:
    """Build the final FileInfo for a parsed file."""
    return FileInfo(
        id=file_id,
        file_name=file_name,
        file_size=file_size,
        status=FileStatus.COMPLETED if parse_result.success else FileStatus.ERROR,
        invoice_count=len(parse_result.invoices),
        error_message=(
            f"Found {parse_result.error_count} errors" if parse_result.error_count else None
        ),
        last_processed_date=datetime.now(),
    )


def format_errors(parse_result: ParseResult) -> list[str]:
    return [error.describe() for error in parse_result.errors]


class BatchProcessor:
    """Parse invoice CSV files into an InvoiceStore."""

    def __init__(
        self,
        parser: Optional[StreamingCSVParser] = None,
        store: Optional[InvoiceStore] = None,
        output_dir: Optional[Path] = None,
        id_factory: IdFactory = generate_id,
    ):
        """
        Initialize batch processor.

        Args:
            parser: Streaming parser (creates new if None)
            store: Invoice/file collection (creates new if None)
            output_dir: Where batch results are saved (defaults to Config.OUTPUT_DIR)
            id_factory: Source of file ids
        """
        self.parser = parser or StreamingCSVParser()
        self.store = store or InvoiceStore()
        self.output_dir = output_dir or Config.OUTPUT_DIR
        self.id_factory = id_factory

    async def process_file(
        self,
        source: Union[str, Path, bytes],
        file_name: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        skip_errors: Optional[bool] = None,
        max_errors: Optional[int] = None,
        store_original: bool = True,
    ) -> FileResult:
        """
        Validate, parse and store one CSV file.

        Invoices reconciled before a failure are kept in the store even when
        the parse as a whole is not successful.

        Args:
            source: Path to the file, or its raw bytes
            file_name: Display name (required for bytes, defaults to the path name)
            on_progress: Optional progress callback
            skip_errors: Tolerate row failures
            max_errors: Error detail cap
            store_original: Keep the original bytes for reprocessing when the
                file is no larger than Config.MAX_STORED_FILE_SIZE

        Returns:
            FileResult
        """
        start_time = time.time()

        if isinstance(source, (bytes, bytearray)):
            file_name = file_name or "upload.csv"
            file_size = len(source)
        else:
            path = Path(source)
            file_name = file_name or path.name
            file_size = path.stat().st_size if path.is_file() else 0

        try:
            if not isinstance(source, (bytes, bytearray)) and not Path(source).is_file():
                raise FileValidationError(f"File not found: {source}")
            validate_csv_file(file_name, file_size)
        except FileValidationError as e:
            logger.warning(str(e))
            return FileResult(
                success=False,
                file_info=FileInfo(
                    id=self.id_factory(),
                    file_name=file_name,
                    file_size=file_size,
                    status=FileStatus.ERROR,
                    error_message=str(e),
                ),
                errors=[str(e)],
                processing_time_seconds=time.time() - start_time,
            )

        original_data = None
        if store_original and file_size <= Config.MAX_STORED_FILE_SIZE:
            if isinstance(source, (bytes, bytearray)):
                original_data = bytes(source)
            else:
                original_data = Path(source).read_bytes()

        file_info = FileInfo(
            id=self.id_factory(),
            file_name=file_name,
            file_size=file_size,
            status=FileStatus.PROCESSING,
            original_data=original_data,
            last_processed_date=datetime.now(),
        )
        self.store.add_file(file_info)
        logger.info(f"Processing {file_name} ({file_size} bytes)")

        parse_result = await self.parser.parse(
            original_data if original_data is not None else source,
            on_progress=on_progress,
            skip_errors=skip_errors,
            max_errors=max_errors,
        )

        final_info = create_file_info(file_info.id, file_name, file_size, parse_result)
        final_info = self.store.update_file(
            file_info.id,
            status=final_info.status,
            invoice_count=final_info.invoice_count,
            error_message=final_info.error_message,
            last_processed_date=final_info.last_processed_date,
        )
        self.store.set_file_invoices(file_info.id, parse_result.invoices)

        if not parse_result.success:
            logger.warning(
                f"{file_name}: parse failed with {parse_result.error_count} errors, "
                f"{len(parse_result.invoices)} invoices kept"
            )

        return FileResult(
            success=parse_result.success and len(parse_result.invoices) > 0,
            file_info=final_info,
            invoices=parse_result.invoices,
            errors=format_errors(parse_result),
            processing_time_seconds=time.time() - start_time,
        )

    async def process_files(
        self,
        sources: list[Union[str, Path]],
        on_progress: Optional[ProgressCallback] = None,
        skip_errors: Optional[bool] = None,
        max_errors: Optional[int] = None,
        show_progress: bool = True,
    ) -> BatchResult:
        """
        Process several files one after another.

        With skip_errors=False the run stops at the first failed file.

        Args:
            sources: Paths of CSV files
            on_progress: Overall progress callback across all files
            skip_errors: Tolerate row and file failures
            max_errors: Error detail cap per file
            show_progress: Show a tqdm bar over files

        Returns:
            BatchResult with per-file results and statistics
        """
        skip_errors = Config.SKIP_ERRORS if skip_errors is None else skip_errors
        batch_result = BatchResult(started_at=datetime.now())
        total = len(sources)

        logger.info(f"Starting batch processing of {total} files")

        with tqdm(total=total, desc="Processing invoice files", disable=not show_progress) as pbar:
            for index, source in enumerate(sources):
                name = Path(source).name
                result = await self.process_file(
                    source,
                    on_progress=scaled_progress(on_progress, index, total, name),
                    skip_errors=skip_errors,
                    max_errors=max_errors,
                )
                batch_result.results.append(result)

                status_emoji = "✅" if result.success else "❌"
                pbar.set_postfix_str(f"{status_emoji} {name[:40]}")
                pbar.update(1)

                if not result.success and not skip_errors:
                    logger.warning(f"Stopping batch after failure in {name}")
                    break

        batch_result.completed_at = datetime.now()
        batch_result.statistics = self._calculate_statistics(batch_result)

        logger.info(
            f"Batch processing complete: {batch_result.statistics.successful}/"
            f"{batch_result.statistics.total_files} successful, "
            f"{batch_result.statistics.total_invoices} invoices"
        )
        return batch_result

    async def reprocess_file(
        self,
        file_id: str,
        on_progress: Optional[ProgressCallback] = None,
        skip_errors: Optional[bool] = None,
        max_errors: Optional[int] = None,
    ) -> FileResult:
        """
        Parse a stored file again from its original bytes.

        The file's previous invoices are superseded by the new ones. When
        the new parse yields nothing usable the previous invoices stay.

        Raises:
            ReprocessError: If the file is unknown or its bytes were not kept
        """
        file_info = self.store.get_file(file_id)
        if file_info is None:
            raise ReprocessError(f"File not found: {file_id}")
        if not file_info.can_reprocess:
            raise ReprocessError(
                f"Original data for {file_info.file_name} was not kept; upload it again"
            )

        start_time = time.time()
        self.store.update_file(
            file_id,
            status=FileStatus.PROCESSING,
            error_message=None,
            last_processed_date=datetime.now(),
        )
        logger.info(f"Reprocessing {file_info.file_name}")

        def _report(progress: float, message: str) -> None:
            on_progress(progress, f"Reprocessing: {message}")

        parse_result = await self.parser.parse(
            file_info.original_data,
            on_progress=_report if on_progress else None,
            skip_errors=skip_errors,
            max_errors=max_errors,
        )

        final_info = create_file_info(
            file_id, file_info.file_name, file_info.file_size, parse_result
        )
        keep_previous = not parse_result.success and not parse_result.invoices
        if keep_previous:
            logger.warning(f"Reprocessing {file_info.file_name} failed; previous invoices kept")
        else:
            self.store.set_file_invoices(file_id, parse_result.invoices)

        updated = self.store.update_file(
            file_id,
            status=final_info.status,
            invoice_count=len(self.store.file_invoices(file_id)),
            error_message=final_info.error_message,
            last_processed_date=final_info.last_processed_date,
        )

        return FileResult(
            success=parse_result.success and len(parse_result.invoices) > 0,
            file_info=updated,
            invoices=parse_result.invoices,
            errors=format_errors(parse_result),
            processing_time_seconds=time.time() - start_time,
        )

    def remove_file(self, file_id: str) -> Optional[FileInfo]:
        """Remove a file and every invoice it produced."""
        removed = self.store.remove_file(file_id)
        if removed:
            logger.info(f"Removed {removed.file_name} and its invoices")
        return removed

    def get_processing_stats(self) -> ProcessingStats:
        files = self.store.files
        return ProcessingStats(
            total_files=len(files),
            completed_files=sum(1 for f in files if f.status == FileStatus.COMPLETED),
            error_files=sum(1 for f in files if f.status == FileStatus.ERROR),
            processing_files=sum(1 for f in files if f.status == FileStatus.PROCESSING),
            total_invoices=len(self.store.invoices),
        )

    def save_batch_result(
        self, batch_result: BatchResult, output_dir: Optional[Path] = None
    ) -> Path:
        """
        Save batch result to a timestamped JSON file (invoices excluded).

        Returns:
            Path of the written file
        """
        output_dir = Path(output_dir or self.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        result_file = output_dir / f"batch_result_{timestamp}.json"

        payload = batch_result.model_dump(
            mode="json",
            exclude={"results": {"__all__": {"invoices": True, "file_info": {"original_data"}}}},
        )
        with open(result_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Saved batch result to {result_file}")
        return result_file

    def _calculate_statistics(self, batch_result: BatchResult) -> BatchStatistics:
        """Calculate statistics from batch results."""
        total_files = len(batch_result.results)
        successful = sum(1 for r in batch_result.results if r.success)
        total_time = sum(r.processing_time_seconds or 0 for r in batch_result.results)

        return BatchStatistics(
            total_files=total_files,
            successful=successful,
            failed=total_files - successful,
            total_invoices=sum(len(r.invoices) for r in batch_result.results),
            total_errors=sum(len(r.errors) for r in batch_result.results),
            total_processing_time_seconds=batch_result.duration_seconds or 0,
            average_time_per_file_seconds=total_time / total_files if total_files else 0,
        )

    def print_summary(self, batch_result: BatchResult) -> None:
        """Print a summary of a batch run."""
        stats = batch_result.statistics
        if not stats:
            print("No statistics available")
            return

        print()
        print("=" * 80)
        print("BATCH PROCESSING SUMMARY")
        print("=" * 80)
        print()
        print(f"Total Files Processed: {stats.total_files}")
        print(f"Successful:           {stats.successful} ({stats.success_rate:.1f}%)")
        print(f"Failed:               {stats.failed}")
        print(f"Invoices:             {stats.total_invoices}")
        print(f"Row/Invoice Errors:   {stats.total_errors}")
        print()
        print(f"Total Time:           {stats.total_processing_time_seconds:.2f} seconds")
        print()

        failed_results = batch_result.get_failed_results()
        if failed_results:
            print("Failed Files:")
            print("-" * 80)
            for result in failed_results[:20]:
                print(f"  {result.file_info.file_name:50s}")
                for error in result.errors[:3]:
                    print(f"    Error: {error[:70]}")
            if len(failed_results) > 20:
                print(f"  ... and {len(failed_results) - 20} more")
            print()

        print("=" * 80)
