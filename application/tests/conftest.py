"""Shared fixtures: in-memory SQLite schema, sessions, API client and entity factories.

Environment variables are set before any `invoice` module is imported because
the config objects read them once at import time.
"""

import os
import tempfile
from datetime import datetime, timezone
from decimal import Decimal

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("DATABASE_READ_URL", None)
os.environ["APPLICATION_PROFILES"] = "dev"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="invoice-logs-")
os.environ["FIREHOSE_ENABLED"] = "false"
os.environ["SENTRY_ENABLED"] = "false"
os.environ["SLACK_WEBHOOK_URL"] = ""
os.environ["DEBUG"] = "true"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from invoice.connections.database import Base, SessionLocal, engine  # noqa: E402
from invoice.core.constants import InvoiceStatus, PaymentMethod  # noqa: E402
from invoice.dto.invoices import InvoiceDTO  # noqa: E402
from invoice.dto.shipments import ShipmentDTO  # noqa: E402
from invoice.main import app  # noqa: E402
from invoice.repository.invoices import InvoiceRepository  # noqa: E402
from invoice.repository.shipments import ShipmentRepository  # noqa: E402

INVOICE_DATE = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
PAYMENT_DATE = datetime(2024, 3, 2, 14, 0, tzinfo=timezone.utc)
SHIPMENT_DATE = datetime(2024, 3, 5, 8, 15, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _schema():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


def build_invoice(**overrides) -> InvoiceDTO:
    fields = {
        "code": "INV-001",
        "date": INVOICE_DATE,
        "details": "first order",
        "status": InvoiceStatus.ISSUED,
        "payment_method": PaymentMethod.CREDIT_CARD,
        "payment_date": PAYMENT_DATE,
        "payment_amount": Decimal("120.50"),
    }
    fields.update(overrides)
    return InvoiceDTO(**fields)


def build_shipment(invoice_id: int, **overrides) -> ShipmentDTO:
    fields = {
        "tracking_code": "TRK-001",
        "date": SHIPMENT_DATE,
        "details": "left warehouse",
        "invoice_id": invoice_id,
    }
    fields.update(overrides)
    return ShipmentDTO(**fields)


@pytest.fixture()
def invoice_factory():
    """Insert and commit invoices; returns the stored DTO."""
    def _create(**overrides) -> InvoiceDTO:
        session = SessionLocal()
        try:
            stored = InvoiceRepository(session).save(build_invoice(**overrides))
            session.commit()
            return stored
        finally:
            session.close()
    return _create


@pytest.fixture()
def shipment_factory():
    """Insert and commit shipments for an existing invoice id."""
    def _create(invoice_id: int, **overrides) -> ShipmentDTO:
        session = SessionLocal()
        try:
            stored = ShipmentRepository(session).save(build_shipment(invoice_id, **overrides))
            session.commit()
            return stored
        finally:
            session.close()
    return _create
