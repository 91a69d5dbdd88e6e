"""Tests for the Shipment and Invoice services.

Transaction handling is checked against a mocked session; field-copy
semantics of partial updates run against SQLite.
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from conftest import SHIPMENT_DATE, build_invoice, build_shipment
from invoice.connections.database import SessionLocal
from invoice.core.constants import InvoiceStatus
from invoice.core.exceptions import EntityNotFoundError
from invoice.dto.invoices import InvoicePatch
from invoice.dto.shipments import ShipmentPatch
from invoice.services.invoice_service import InvoiceService
from invoice.services.shipment_service import ShipmentService
from invoice.utils.pagination import Pageable


class TestShipmentServiceTransactions:
    """Service writes commit on success and roll back on failure."""

    def test_save_commits(self):
        db = MagicMock()
        repository = MagicMock()
        shipment = build_shipment(1)
        repository.save.return_value = shipment

        assert ShipmentService(db, repository).save(shipment) is shipment
        repository.save.assert_called_once_with(shipment)
        db.commit.assert_called_once()
        db.rollback.assert_not_called()

    def test_update_rolls_back_on_error(self):
        db = MagicMock()
        repository = MagicMock()
        repository.save.side_effect = EntityNotFoundError("shipment", 5)

        with pytest.raises(EntityNotFoundError):
            ShipmentService(db, repository).update(build_shipment(1, id=5))
        db.rollback.assert_called_once()
        db.commit.assert_not_called()

    def test_reads_delegate_to_repository(self):
        repository = MagicMock()
        repository.count.return_value = 4
        repository.exists_by_id.return_value = True
        service = ShipmentService(MagicMock(), repository)
        pageable = Pageable.of(0, 10)

        service.find_all(pageable)
        service.find_all_with_eager_relationships(pageable)
        service.find_one(3)

        repository.find_all_by.assert_called_once_with(pageable)
        repository.find_all_with_eager_relationships.assert_called_once_with(pageable)
        repository.find_one_with_eager_relationships.assert_called_once_with(3)
        assert service.count_all() == 4
        assert service.exists(3) is True

    def test_delete_commits(self):
        db = MagicMock()
        repository = MagicMock()
        ShipmentService(db, repository).delete(8)
        repository.delete_by_id.assert_called_once_with(8)
        db.commit.assert_called_once()


class TestShipmentPartialUpdate:
    def test_only_non_null_fields_are_copied(self, db, invoice_factory, shipment_factory):
        invoice = invoice_factory()
        shipment = shipment_factory(invoice.id, details="packed")

        result = ShipmentService(db).partial_update(ShipmentPatch(id=shipment.id, tracking_code="TRK-NEW"))

        assert result.tracking_code == "TRK-NEW"
        assert result.details == "packed"
        assert result.date == SHIPMENT_DATE
        assert result.invoice.id == invoice.id

    def test_change_is_committed(self, db, invoice_factory, shipment_factory):
        invoice = invoice_factory()
        shipment = shipment_factory(invoice.id)
        new_date = datetime(2024, 4, 1, 0, 0, tzinfo=timezone.utc)

        ShipmentService(db).partial_update(ShipmentPatch(id=shipment.id, date=new_date))
        db.close()

        other = SessionLocal()
        try:
            assert ShipmentService(other).find_one(shipment.id).date == new_date
        finally:
            other.close()

    def test_missing_shipment_returns_none(self, db):
        assert ShipmentService(db).partial_update(ShipmentPatch(id=77, details="x")) is None


class TestInvoiceService:
    def test_save_and_find_one(self, db):
        service = InvoiceService(db)
        stored = service.save(build_invoice())
        assert service.find_one(stored.id) == stored
        assert service.count_all() == 1

    def test_partial_update_copies_non_null_fields(self, db, invoice_factory):
        invoice = invoice_factory()

        result = InvoiceService(db).partial_update(
            InvoicePatch(id=invoice.id, status=InvoiceStatus.PAID, payment_amount=Decimal("10.00"))
        )

        assert result.status is InvoiceStatus.PAID
        assert result.payment_amount == Decimal("10.00")
        assert result.code == invoice.code
        assert result.payment_method == invoice.payment_method
        assert result.payment_date == invoice.payment_date

    def test_partial_update_of_missing_invoice(self, db):
        assert InvoiceService(db).partial_update(InvoicePatch(id=12, code="X")) is None

    def test_delete(self, db, invoice_factory):
        invoice = invoice_factory()
        service = InvoiceService(db)
        service.delete(invoice.id)
        assert not service.exists(invoice.id)
