"""
Shipment repository

Reads go through a hand-built SELECT joining shipment to invoice, so every
Shipment comes back with its Invoice already attached.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from invoice.aop.logging_aspect import loggable
from invoice.core.constants import EntityNames
from invoice.dto.shipments import ShipmentDTO
from invoice.models import Invoice, Shipment
from invoice.repository.base import SimpleRepository
from invoice.repository.entity_manager import ENTITY_ALIAS, EntityManager, sortable_columns
from invoice.repository.row_mappers import InvoiceRowMapper, ShipmentRowMapper
from invoice.repository.sql_helpers import InvoiceSqlHelper, ShipmentSqlHelper
from invoice.utils.pagination import Pageable

INVOICE = "invoice"
entity_table = Shipment.__table__.alias(ENTITY_ALIAS)
invoice_table = Invoice.__table__.alias(INVOICE)


@loggable
class ShipmentRepository(SimpleRepository):
    table = Shipment.__table__
    columns = ["tracking_code", "date", "details", "invoice_id"]

    def __init__(self, db: Session, entity_manager: Optional[EntityManager] = None,
                 invoice_mapper: Optional[InvoiceRowMapper] = None,
                 shipment_mapper: Optional[ShipmentRowMapper] = None):
        super().__init__(db)
        self.entity_manager = entity_manager or EntityManager()
        self.invoice_mapper = invoice_mapper or InvoiceRowMapper()
        self.shipment_mapper = shipment_mapper or ShipmentRowMapper()

    def create_query(self, pageable: Optional[Pageable], where: Optional[ColumnElement]):
        """
        SELECT shipment columns + invoice columns
        FROM shipment e LEFT OUTER JOIN invoice invoice ON e.invoice_id = invoice.id
        """
        columns = ShipmentSqlHelper.get_columns(entity_table, ENTITY_ALIAS)
        columns += InvoiceSqlHelper.get_columns(invoice_table, INVOICE)
        select_from = select(*columns).select_from(
            entity_table.outerjoin(invoice_table, entity_table.c.invoice_id == invoice_table.c.id)
        )
        # no criteria support on the joined query, only the id lookup below
        return self.entity_manager.create_select(
            select_from, EntityNames.SHIPMENT, sortable_columns(entity_table), pageable, where
        )

    def _run(self, statement) -> List[ShipmentDTO]:
        return [self._process(row._mapping) for row in self.db.execute(statement)]

    def _process(self, row) -> ShipmentDTO:
        entity = self.shipment_mapper.apply(row, ENTITY_ALIAS)
        entity.set_invoice(self.invoice_mapper.apply(row, INVOICE))
        return entity

    def find_all_by(self, pageable: Optional[Pageable]) -> List[ShipmentDTO]:
        return self._run(self.create_query(pageable, None))

    def find_all(self) -> List[ShipmentDTO]:
        return self.find_all_by(None)

    def find_by_id(self, id: int) -> Optional[ShipmentDTO]:
        where = entity_table.c.id == id
        return self._one_or_none(self._run(self.create_query(None, where)))

    def find_one_with_eager_relationships(self, id: int) -> Optional[ShipmentDTO]:
        return self.find_by_id(id)

    def find_all_with_eager_relationships(self, pageable: Optional[Pageable] = None) -> List[ShipmentDTO]:
        return self.find_all_by(pageable)
