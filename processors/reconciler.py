"""Join accumulated M-line headers with their D-line items."""

import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from config import Config
from models.invoice import Invoice, InvoiceItem, PartialInvoice
from models.parse_result import ParseError
from processors.accumulator import ParseAccumulator
from utils.ids import IdFactory, generate_id
from utils.progress import ProgressCallback

logger = logging.getLogger(__name__)

RECONCILE_START = 85.0
RECONCILE_END = 100.0


def deduplicate_items(items: list[InvoiceItem]) -> list[InvoiceItem]:
    """Collapse items sharing (invoice_number, item_name, amount), keeping the first."""
    seen: set[tuple[str, str, float]] = set()
    unique = []
    for item in items:
        key = item.dedup_key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


class ChunkedReconciler:
    """Build final invoices from an accumulator in bounded batches."""

    def __init__(
        self,
        batch_size: Optional[int] = None,
        id_factory: IdFactory = generate_id,
    ):
        """
        Initialize reconciler.

        Args:
            batch_size: Headers joined between two yields
                (defaults to Config.RECONCILE_BATCH_SIZE)
            id_factory: Source of invoice ids
        """
        self.batch_size = batch_size or Config.RECONCILE_BATCH_SIZE
        self.id_factory = id_factory

    async def reconcile(
        self,
        accumulator: ParseAccumulator,
        on_progress: Optional[ProgressCallback] = None,
    ) -> list[Invoice]:
        """
        Join every header with its items, yielding to the event loop after
        each batch.

        Headers missing invoice number, date or merchant name are dropped
        and recorded as errors. Items are deduplicated per invoice and the
        accumulator maps are released afterwards.

        Args:
            accumulator: Records collected by the streaming parser
            on_progress: Optional progress callback (85-100 range)

        Returns:
            Reconciled invoices in header insertion order
        """
        headers = list(accumulator.headers.items())
        total = len(headers)
        invoices: list[Invoice] = []

        if on_progress:
            on_progress(RECONCILE_START, "Reconciling invoice data...")

        for start in range(0, total, self.batch_size):
            batch = headers[start : start + self.batch_size]
            invoices.extend(self._reconcile_batch(batch, accumulator))

            done = start + len(batch)
            if on_progress:
                # Stop short of 100; the caller reports completion
                span = RECONCILE_END - RECONCILE_START - 1
                on_progress(
                    RECONCILE_START + span * done / total,
                    f"Reconciled {done}/{total} invoices...",
                )

            await asyncio.sleep(0)

        for invoice in invoices:
            invoice.items = deduplicate_items(invoice.items)

        orphans = accumulator.details.keys() - accumulator.headers.keys()
        if orphans:
            logger.debug(f"{len(orphans)} D-line groups have no matching M-line")

        accumulator.release()

        logger.debug(f"Reconciled {len(invoices)}/{total} invoice headers")
        return invoices

    def _reconcile_batch(
        self,
        batch: list[tuple[str, PartialInvoice]],
        accumulator: ParseAccumulator,
    ) -> list[Invoice]:
        invoices = []

        for invoice_number, header in batch:
            missing = header.missing_required_fields()
            if missing:
                accumulator.record_error(
                    ParseError(
                        row=-1,
                        field=missing[0],
                        message=(
                            f"Invoice {invoice_number!r} is missing required "
                            f"fields: {', '.join(missing)}"
                        ),
                        data=header.model_dump(mode="json"),
                    )
                )
                continue

            try:
                invoice = Invoice.from_partial(
                    self.id_factory(), header, accumulator.items_for(invoice_number)
                )
            except ValidationError as e:
                accumulator.record_error(
                    ParseError(
                        row=-1,
                        message=f"Failed to build invoice {invoice_number!r}: {e}",
                        data=header.model_dump(mode="json"),
                    )
                )
                continue

            invoices.append(invoice)

        return invoices
