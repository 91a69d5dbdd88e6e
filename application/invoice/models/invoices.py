"""
SQLAlchemy ORM model for the invoice table.
Repositories query it through SQLAlchemy Core using Invoice.__table__.
"""

from sqlalchemy import Column, BigInteger, Integer, String, TIMESTAMP, Numeric, Enum
from sqlalchemy.orm import relationship

from invoice.connections.database import Base
from invoice.core.constants import InvoiceStatus, PaymentMethod

# BIGINT on server databases, INTEGER on SQLite so the rowid autoincrements
IdType = BigInteger().with_variant(Integer(), "sqlite")


class Invoice(Base):
    """A billing record associated with zero or more shipments."""
    __tablename__ = "invoice"

    id = Column(IdType, primary_key=True, autoincrement=True)
    code = Column(String(255), nullable=False)
    date = Column(TIMESTAMP(timezone=True), nullable=False)
    details = Column(String(255), nullable=True)
    status = Column(Enum(InvoiceStatus, name="invoice_status", native_enum=False, length=255), nullable=False)
    payment_method = Column(Enum(PaymentMethod, name="payment_method", native_enum=False, length=255), nullable=False)
    payment_date = Column(TIMESTAMP(timezone=True), nullable=False)
    payment_amount = Column(Numeric(21, 2), nullable=False)

    shipments = relationship("Shipment", back_populates="invoice")

    def __repr__(self):
        return f"<Invoice(id={self.id}, code='{self.code}', status={self.status})>"
