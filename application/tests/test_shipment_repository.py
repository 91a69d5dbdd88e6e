"""Tests for ShipmentRepository against in-memory SQLite."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from conftest import SHIPMENT_DATE, build_shipment
from invoice.core.exceptions import EntityNotFoundError, InvalidSortError
from invoice.repository.shipments import ShipmentRepository
from invoice.utils.pagination import Pageable


@pytest.fixture()
def repository(db):
    return ShipmentRepository(db)


class TestSave:
    def test_insert_returns_shipment_with_invoice(self, repository, invoice_factory):
        invoice = invoice_factory()
        stored = repository.save(build_shipment(invoice.id))

        assert stored.id is not None
        assert stored.tracking_code == "TRK-001"
        assert stored.date == SHIPMENT_DATE
        assert stored.date.tzinfo is not None
        assert stored.invoice_id == invoice.id
        assert stored.invoice is not None
        assert stored.invoice.code == "INV-001"

    def test_update_overwrites_columns(self, repository, invoice_factory):
        invoice = invoice_factory()
        other = invoice_factory(code="INV-002")
        stored = repository.save(build_shipment(invoice.id))

        stored.details = "delivered"
        stored.invoice = None
        stored.invoice_id = other.id
        updated = repository.save(stored)

        assert updated.id == stored.id
        assert updated.details == "delivered"
        assert updated.invoice.code == "INV-002"

    def test_update_of_missing_row_raises(self, repository, invoice_factory):
        invoice = invoice_factory()
        with pytest.raises(EntityNotFoundError) as excinfo:
            repository.save(build_shipment(invoice.id, id=999))
        assert str(excinfo.value) == "Failed to update table [shipment]; Row with Id [999] does not exist"

    def test_unknown_invoice_violates_foreign_key(self, repository):
        with pytest.raises(IntegrityError):
            repository.save(build_shipment(12345))

    def test_aware_dates_are_stored_as_utc(self, repository, invoice_factory):
        invoice = invoice_factory()
        local = datetime(2024, 3, 5, 10, 15, tzinfo=timezone(timedelta(hours=2)))
        stored = repository.save(build_shipment(invoice.id, date=local))
        assert stored.date == SHIPMENT_DATE


class TestQueries:
    def test_create_query_joins_invoice(self, repository):
        sql = str(repository.create_query(None, None))
        assert "FROM shipment AS e LEFT OUTER JOIN invoice" in sql
        assert "ON e.invoice_id = invoice.id" in sql
        assert "invoice.code AS invoice_code" in sql

    def test_find_by_id(self, repository, invoice_factory, shipment_factory):
        invoice = invoice_factory()
        shipment = shipment_factory(invoice.id)

        found = repository.find_by_id(shipment.id)
        assert found == shipment
        assert repository.find_by_id(shipment.id + 100) is None

    def test_find_one_with_eager_relationships(self, repository, invoice_factory, shipment_factory):
        invoice = invoice_factory()
        shipment = shipment_factory(invoice.id)
        found = repository.find_one_with_eager_relationships(shipment.id)
        assert found.invoice.id == invoice.id

    def test_paging_and_sorting(self, repository, invoice_factory, shipment_factory):
        invoice = invoice_factory()
        for code in ("B", "A", "C"):
            shipment_factory(invoice.id, tracking_code=code)

        first = repository.find_all_with_eager_relationships(Pageable.of(0, 2, ["trackingCode,desc"]))
        second = repository.find_all_with_eager_relationships(Pageable.of(1, 2, ["trackingCode,desc"]))

        assert [s.tracking_code for s in first] == ["C", "B"]
        assert [s.tracking_code for s in second] == ["A"]
        assert all(s.invoice.id == invoice.id for s in first + second)

    def test_find_all_without_paging(self, repository, invoice_factory, shipment_factory):
        invoice = invoice_factory()
        shipment_factory(invoice.id)
        shipment_factory(invoice.id, tracking_code="TRK-002")
        assert len(repository.find_all()) == 2

    def test_unknown_sort_property(self, repository):
        with pytest.raises(InvalidSortError):
            repository.find_all_by(Pageable.of(0, 5, ["weight"]))


class TestCountExistsDelete:
    def test_count_exists_and_delete(self, repository, invoice_factory, shipment_factory):
        invoice = invoice_factory()
        shipment = shipment_factory(invoice.id)
        shipment_factory(invoice.id)

        assert repository.count() == 2
        assert repository.exists_by_id(shipment.id)

        repository.delete_by_id(shipment.id)

        assert repository.count() == 1
        assert not repository.exists_by_id(shipment.id)

    def test_delete_of_missing_row_is_a_no_op(self, repository):
        repository.delete_by_id(42)
        assert repository.count() == 0
