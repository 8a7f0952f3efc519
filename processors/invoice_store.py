"""In-memory collection of uploaded files and the invoices they produced."""

from typing import Optional

from analytics.statistics import calculate_basic_statistics, get_valid_invoices
from models.file_info import FileInfo
from models.invoice import Invoice
from models.statistics import Statistics


class InvoiceStore:
    """
    Files and their invoices, keyed by file id.

    Each file owns its invoices exclusively: replacing or removing a file
    replaces or removes exactly those invoices. There is no locking; one
    writer at a time is assumed.
    """

    def __init__(self):
        self._files: dict[str, FileInfo] = {}
        self._invoices: dict[str, list[Invoice]] = {}

    @property
    def files(self) -> list[FileInfo]:
        return list(self._files.values())

    @property
    def invoices(self) -> list[Invoice]:
        """All invoices, in file insertion order."""
        return [invoice for invoices in self._invoices.values() for invoice in invoices]

    @property
    def valid_invoices(self) -> list[Invoice]:
        return get_valid_invoices(self.invoices)

    def statistics(self) -> Statistics:
        """Basic statistics over the issued invoices currently stored."""
        return calculate_basic_statistics(self.valid_invoices)

    def get_file(self, file_id: str) -> Optional[FileInfo]:
        return self._files.get(file_id)

    def add_file(self, file_info: FileInfo) -> None:
        self._files[file_info.id] = file_info
        self._invoices.setdefault(file_info.id, [])

    def update_file(self, file_id: str, **updates) -> FileInfo:
        """
        Replace fields of a stored FileInfo.

        Raises:
            KeyError: If the file is unknown
        """
        current = self._files[file_id]
        updated = current.model_copy(update=updates)
        self._files[file_id] = updated
        return updated

    def file_invoices(self, file_id: str) -> list[Invoice]:
        return list(self._invoices.get(file_id, []))

    def set_file_invoices(self, file_id: str, invoices: list[Invoice]) -> None:
        """Supersede every invoice previously produced by this file."""
        if file_id not in self._files:
            raise KeyError(file_id)
        self._invoices[file_id] = list(invoices)

    def remove_file(self, file_id: str) -> Optional[FileInfo]:
        """Remove a file together with its invoices."""
        self._invoices.pop(file_id, None)
        return self._files.pop(file_id, None)

    def clear(self) -> None:
        self._files.clear()
        self._invoices.clear()
