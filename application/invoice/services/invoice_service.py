from typing import List, Optional

from sqlalchemy.orm import Session

from invoice.aop.logging_aspect import loggable
from invoice.connections.database import transaction
from invoice.dto.invoices import InvoiceDTO, InvoicePatch
from invoice.logging.utils import get_app_logger
from invoice.middlewares.request_context import request_context
from invoice.repository.invoices import InvoiceRepository
from invoice.utils.pagination import Pageable

logger = get_app_logger("invoice.services.invoice_service")

# Fields a partial update may overwrite, in column order
PATCHABLE_FIELDS = ("code", "date", "details", "status", "payment_method", "payment_date", "payment_amount")


@loggable
class InvoiceService:
    """Service for managing invoices."""

    def __init__(self, db: Session, repository: Optional[InvoiceRepository] = None):
        self.db = db
        self.repository = repository or InvoiceRepository(db)
        request_context.module_name = 'invoice_service'

    def save(self, invoice: InvoiceDTO) -> InvoiceDTO:
        logger.debug(f"Request to save Invoice : {invoice!r}")
        with transaction(self.db):
            return self.repository.save(invoice)

    def update(self, invoice: InvoiceDTO) -> InvoiceDTO:
        logger.debug(f"Request to update Invoice : {invoice!r}")
        request_context.invoice_id = invoice.id
        with transaction(self.db):
            return self.repository.save(invoice)

    def partial_update(self, invoice: InvoicePatch) -> Optional[InvoiceDTO]:
        logger.debug(f"Request to partially update Invoice : {invoice!r}")
        request_context.invoice_id = invoice.id
        with transaction(self.db):
            existing = self.repository.find_by_id(invoice.id)
            if existing is None:
                return None
            for field in PATCHABLE_FIELDS:
                value = getattr(invoice, field)
                if value is not None:
                    setattr(existing, field, value)
            return self.repository.save(existing)

    def find_all(self, pageable: Optional[Pageable]) -> List[InvoiceDTO]:
        logger.debug("Request to get all Invoices")
        return self.repository.find_all_by(pageable)

    def count_all(self) -> int:
        return self.repository.count()

    def find_one(self, id: int) -> Optional[InvoiceDTO]:
        logger.debug(f"Request to get Invoice : {id}")
        request_context.invoice_id = id
        return self.repository.find_by_id(id)

    def exists(self, id: int) -> bool:
        return self.repository.exists_by_id(id)

    def delete(self, id: int) -> None:
        logger.debug(f"Request to delete Invoice : {id}")
        request_context.invoice_id = id
        with transaction(self.db):
            self.repository.delete_by_id(id)
