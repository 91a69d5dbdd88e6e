from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from invoice.core.constants import InvoiceStatus, PaymentMethod


class InvoiceDTO(BaseModel):
    """Invoice as read from and written to the invoice table."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    code: str = Field(..., min_length=1, max_length=255)
    date: datetime
    details: Optional[str] = Field(None, max_length=255)
    status: InvoiceStatus
    payment_method: PaymentMethod
    payment_date: datetime
    payment_amount: Decimal = Field(..., max_digits=21, decimal_places=2)


class InvoicePatch(BaseModel):
    """Partial update body: only the non-null fields are applied."""

    id: Optional[int] = None
    code: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[datetime] = None
    details: Optional[str] = Field(None, max_length=255)
    status: Optional[InvoiceStatus] = None
    payment_method: Optional[PaymentMethod] = None
    payment_date: Optional[datetime] = None
    payment_amount: Optional[Decimal] = Field(None, max_digits=21, decimal_places=2)


class InvoiceRef(BaseModel):
    """Reference to an existing invoice by id, as sent in shipment bodies."""

    id: int
