"""Data models for file processing results."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from models.file_info import FileInfo, FileStatus
from models.invoice import Invoice


class FileResult(BaseModel):
    """Result of processing (or reprocessing) a single CSV file."""

    success: bool
    file_info: FileInfo
    invoices: list[Invoice] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    processing_time_seconds: Optional[float] = None


class BatchStatistics(BaseModel):
    """Statistics for a multi-file processing run."""

    total_files: int
    successful: int
    failed: int = 0
    total_invoices: int = 0
    total_errors: int = 0

    # Timing
    total_processing_time_seconds: float
    average_time_per_file_seconds: float

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        if self.total_files == 0:
            return 0.0
        return (self.successful / self.total_files) * 100


class BatchResult(BaseModel):
    """Complete result of processing several files."""

    started_at: datetime
    completed_at: Optional[datetime] = None
    results: list[FileResult] = Field(default_factory=list)
    statistics: Optional[BatchStatistics] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        """Calculate total duration in seconds."""
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def get_invoices(self) -> list[Invoice]:
        """All invoices produced by the run, including partial successes."""
        return [invoice for result in self.results for invoice in result.invoices]

    def get_failed_results(self) -> list[FileResult]:
        return [result for result in self.results if not result.success]

    def get_results_by_status(self, status: FileStatus) -> list[FileResult]:
        return [result for result in self.results if result.file_info.status == status]


class ProcessingStats(BaseModel):
    """Snapshot of the file collection."""

    total_files: int
    completed_files: int
    error_files: int
    processing_files: int
    total_invoices: int
