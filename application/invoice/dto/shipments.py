from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from invoice.dto.invoices import InvoiceDTO, InvoiceRef


class ShipmentDTO(BaseModel):
    """
    Shipment with its owning invoice.

    `invoice_id` is what gets persisted; `invoice` is filled in on reads from
    the joined row and ignored on writes. Request bodies may reference the
    invoice by id alone, e.g. {"invoice": {"id": 3}}.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    tracking_code: Optional[str] = Field(None, max_length=255)
    date: datetime
    details: Optional[str] = Field(None, max_length=255)
    invoice_id: Optional[int] = None
    # full invoices first, anything else carrying an id falls back to a reference
    invoice: Optional[Union[InvoiceDTO, InvoiceRef]] = Field(None, union_mode="left_to_right")

    @model_validator(mode="after")
    def sync_invoice_id(self):
        if self.invoice is not None and self.invoice.id is not None:
            self.invoice_id = self.invoice.id
        if self.invoice_id is None:
            raise ValueError("invoice_id must not be null")
        return self

    def set_invoice(self, invoice: Optional[InvoiceDTO]) -> None:
        self.invoice = invoice
        if invoice is not None:
            self.invoice_id = invoice.id


class ShipmentPatch(BaseModel):
    """Partial update body: only tracking_code, date and details are applied."""

    id: Optional[int] = None
    tracking_code: Optional[str] = Field(None, max_length=255)
    date: Optional[datetime] = None
    details: Optional[str] = Field(None, max_length=255)
