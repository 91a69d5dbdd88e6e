from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import relationship

from invoice.connections.database import Base
from invoice.models.invoices import IdType


class Shipment(Base):
    """
    Shipment model.
    Each shipment belongs to exactly one invoice (shipment.invoice_id).
    """
    __tablename__ = "shipment"

    id = Column(IdType, primary_key=True, autoincrement=True)
    tracking_code = Column(String(255), nullable=True)
    date = Column(TIMESTAMP(timezone=True), nullable=False)
    details = Column(String(255), nullable=True)
    invoice_id = Column(IdType, ForeignKey("invoice.id", name="fk_shipment__invoice_id"), nullable=False)

    invoice = relationship("Invoice", back_populates="shipments")

    def __repr__(self):
        return f"<Shipment(id={self.id}, tracking_code='{self.tracking_code}', invoice_id={self.invoice_id})>"

    __table_args__ = (
        Index('idx_shipment_invoice_id', 'invoice_id'),
    )
