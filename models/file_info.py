"""Data models for uploaded invoice files."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class FileStatus(str, Enum):
    """Processing state of an uploaded file."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class FileInfo(BaseModel):
    """Metadata about one uploaded CSV file and its parse outcome."""

    id: str
    file_name: str
    upload_date: datetime = Field(default_factory=datetime.now)
    file_size: int = 0
    status: FileStatus = FileStatus.PROCESSING
    invoice_count: int = 0
    error_message: Optional[str] = None
    original_data: Optional[bytes] = Field(default=None, repr=False)
    last_processed_date: Optional[datetime] = None

    @property
    def can_reprocess(self) -> bool:
        return self.original_data is not None
