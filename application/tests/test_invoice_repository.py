"""Tests for InvoiceRepository against in-memory SQLite."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from conftest import INVOICE_DATE, build_invoice
from invoice.core.constants import InvoiceStatus, PaymentMethod
from invoice.repository.invoices import InvoiceRepository
from invoice.utils.pagination import Pageable


@pytest.fixture()
def repository(db):
    return InvoiceRepository(db)


def test_insert_round_trips_every_column(repository):
    stored = repository.save(build_invoice())

    assert stored.id is not None
    assert stored.code == "INV-001"
    assert stored.date == INVOICE_DATE
    assert stored.status is InvoiceStatus.ISSUED
    assert stored.payment_method is PaymentMethod.CREDIT_CARD
    assert stored.payment_amount == Decimal("120.50")


def test_update_changes_status(repository):
    stored = repository.save(build_invoice())
    stored.status = InvoiceStatus.PAID
    assert repository.save(stored).status is InvoiceStatus.PAID


def test_sorted_page(repository, invoice_factory):
    invoice_factory(code="B", payment_amount=Decimal("5.00"))
    invoice_factory(code="A", payment_amount=Decimal("50.00"))
    invoice_factory(code="C", payment_amount=Decimal("0.50"))

    page = repository.find_all_by(Pageable.of(0, 2, ["paymentAmount,desc"]))
    assert [i.code for i in page] == ["A", "B"]


def test_count_and_delete(repository, invoice_factory):
    first = invoice_factory()
    invoice_factory(code="INV-002")

    assert repository.count() == 2
    repository.delete_by_id(first.id)
    assert repository.count() == 1
    assert repository.find_by_id(first.id) is None


def test_delete_with_shipments_is_rejected(repository, invoice_factory, shipment_factory):
    invoice = invoice_factory()
    shipment_factory(invoice.id)

    with pytest.raises(IntegrityError):
        repository.delete_by_id(invoice.id)
