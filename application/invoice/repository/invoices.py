from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from invoice.aop.logging_aspect import loggable
from invoice.core.constants import EntityNames
from invoice.dto.invoices import InvoiceDTO
from invoice.models import Invoice
from invoice.repository.base import SimpleRepository
from invoice.repository.entity_manager import ENTITY_ALIAS, EntityManager, sortable_columns
from invoice.repository.row_mappers import InvoiceRowMapper
from invoice.repository.sql_helpers import InvoiceSqlHelper
from invoice.utils.pagination import Pageable

entity_table = Invoice.__table__.alias(ENTITY_ALIAS)


@loggable
class InvoiceRepository(SimpleRepository):
    """Invoice reads and writes; no joins, shipments are loaded from their side."""

    table = Invoice.__table__
    columns = ["code", "date", "details", "status", "payment_method", "payment_date", "payment_amount"]

    def __init__(self, db: Session, entity_manager: Optional[EntityManager] = None,
                 invoice_mapper: Optional[InvoiceRowMapper] = None):
        super().__init__(db)
        self.entity_manager = entity_manager or EntityManager()
        self.invoice_mapper = invoice_mapper or InvoiceRowMapper()

    def create_query(self, pageable: Optional[Pageable], where: Optional[ColumnElement]):
        columns = InvoiceSqlHelper.get_columns(entity_table, ENTITY_ALIAS)
        select_from = select(*columns).select_from(entity_table)
        return self.entity_manager.create_select(
            select_from, EntityNames.INVOICE, sortable_columns(entity_table), pageable, where
        )

    def _run(self, statement) -> List[InvoiceDTO]:
        return [self.invoice_mapper.apply(row._mapping, ENTITY_ALIAS) for row in self.db.execute(statement)]

    def find_all_by(self, pageable: Optional[Pageable]) -> List[InvoiceDTO]:
        return self._run(self.create_query(pageable, None))

    def find_all(self) -> List[InvoiceDTO]:
        return self.find_all_by(None)

    def find_by_id(self, id: int) -> Optional[InvoiceDTO]:
        return self._one_or_none(self._run(self.create_query(None, entity_table.c.id == id)))
