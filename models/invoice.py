"""Data models for Taiwan e-invoice records."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InvoiceStatus(str, Enum):
    """Lifecycle status of an e-invoice."""

    ISSUED = "issued"
    VOIDED = "voided"


class InvoiceItem(BaseModel):
    """A single purchased item, parsed from a D-line."""

    id: str
    invoice_number: str
    item_name: str
    amount: float
    category: Optional[str] = None

    def dedup_key(self) -> tuple[str, str, float]:
        """Composite key under which identical item rows collapse."""
        return (self.invoice_number, self.item_name, self.amount)


class PartialInvoice(BaseModel):
    """Invoice header parsed from an M-line, awaiting its D-lines."""

    carrier_type: str = ""
    carrier_number: str = ""
    invoice_date: Optional[date] = None
    merchant_id: str = ""
    merchant_name: str = ""
    invoice_number: str = ""
    total_amount: float = 0.0
    status: InvoiceStatus = InvoiceStatus.ISSUED

    def missing_required_fields(self) -> list[str]:
        """Names of required header fields that are empty."""
        missing = []
        if not self.invoice_number:
            missing.append("invoice_number")
        if self.invoice_date is None:
            missing.append("invoice_date")
        if not self.merchant_name:
            missing.append("merchant_name")
        return missing


class Invoice(BaseModel):
    """A complete invoice: header fields plus its items."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    carrier_type: str = ""
    carrier_number: str = ""
    invoice_date: date
    merchant_id: str = ""
    merchant_name: str
    invoice_number: str
    total_amount: float = 0.0
    status: InvoiceStatus = InvoiceStatus.ISSUED
    items: list[InvoiceItem] = Field(default_factory=list)

    @property
    def is_voided(self) -> bool:
        return self.status == InvoiceStatus.VOIDED

    @classmethod
    def from_partial(
        cls, invoice_id: str, header: PartialInvoice, items: list[InvoiceItem]
    ) -> "Invoice":
        """Build a final invoice from a validated header and its items."""
        return cls(
            id=invoice_id,
            carrier_type=header.carrier_type,
            carrier_number=header.carrier_number,
            invoice_date=header.invoice_date,
            merchant_id=header.merchant_id,
            merchant_name=header.merchant_name,
            invoice_number=header.invoice_number,
            total_amount=header.total_amount,
            status=header.status,
            items=list(items),
        )
