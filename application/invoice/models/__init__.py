from invoice.models.invoices import Invoice
from invoice.models.shipments import Shipment

__all__ = ["Invoice", "Shipment"]
