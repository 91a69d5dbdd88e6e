from fastapi import APIRouter
from invoice.routes.api.invoices import invoice_router
from invoice.routes.api.shipments import shipment_router

api_router = APIRouter(tags=["api"])
api_router.include_router(invoice_router)
api_router.include_router(shipment_router)

__all__ = ["api_router"]
