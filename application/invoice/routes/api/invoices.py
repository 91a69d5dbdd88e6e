from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from invoice.connections.database import get_db, get_read_db
from invoice.core.constants import EntityNames, ErrorKeys
from invoice.core.exceptions import BadRequestAlertException
from invoice.dto.invoices import InvoiceDTO, InvoicePatch
from invoice.logging.utils import get_app_logger
from invoice.services.invoice_service import InvoiceService
from invoice.utils.header_utils import (
    create_entity_creation_alert,
    create_entity_deletion_alert,
    create_entity_update_alert,
)
from invoice.utils.pagination import Page, Pageable, generate_pagination_headers

logger = get_app_logger('invoice.routes.invoices')

ENTITY_NAME = EntityNames.INVOICE

invoice_router = APIRouter(prefix="/invoices", tags=["invoices"])


def _check_id(id: int, body_id: Optional[int], service: InvoiceService) -> None:
    if body_id is None:
        raise BadRequestAlertException("Invalid id", ENTITY_NAME, ErrorKeys.ID_NULL)
    if body_id != id:
        raise BadRequestAlertException("Invalid ID", ENTITY_NAME, ErrorKeys.ID_INVALID)
    if not service.exists(id):
        raise BadRequestAlertException("Entity not found", ENTITY_NAME, ErrorKeys.ID_NOT_FOUND)


@invoice_router.post("", response_model=InvoiceDTO, status_code=status.HTTP_201_CREATED)
def create_invoice(invoice: InvoiceDTO, response: Response, db: Session = Depends(get_db)):
    logger.debug(f"REST request to save Invoice : {invoice!r}")
    if invoice.id is not None:
        raise BadRequestAlertException("A new invoice cannot already have an ID", ENTITY_NAME, ErrorKeys.ID_EXISTS)
    result = InvoiceService(db).save(invoice)
    response.headers["Location"] = f"/api/invoices/{result.id}"
    response.headers.update(create_entity_creation_alert(ENTITY_NAME, result.id))
    return result


@invoice_router.put("/{id}", response_model=InvoiceDTO)
def update_invoice(id: int, invoice: InvoiceDTO, response: Response, db: Session = Depends(get_db)):
    logger.debug(f"REST request to update Invoice : {id}, {invoice!r}")
    service = InvoiceService(db)
    _check_id(id, invoice.id, service)
    result = service.update(invoice)
    response.headers.update(create_entity_update_alert(ENTITY_NAME, result.id))
    return result


@invoice_router.patch("/{id}", response_model=InvoiceDTO)
def partial_update_invoice(id: int, invoice: InvoicePatch, response: Response, db: Session = Depends(get_db)):
    logger.debug(f"REST request to partial update Invoice partially : {id}, {invoice!r}")
    service = InvoiceService(db)
    _check_id(id, invoice.id, service)
    result = service.partial_update(invoice)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Invoice {id} not found")
    response.headers.update(create_entity_update_alert(ENTITY_NAME, result.id))
    return result


@invoice_router.get("", response_model=List[InvoiceDTO])
def get_all_invoices(
    request: Request,
    response: Response,
    page: int = Query(0, ge=0, description="Page number (starting from 0)"),
    size: Optional[int] = Query(None, ge=1, description="Number of invoices per page"),
    sort: Optional[List[str]] = Query(None, description="Sort criteria: property[,asc|desc]"),
    db: Session = Depends(get_read_db),
):
    logger.debug("REST request to get a page of Invoices")
    service = InvoiceService(db)
    pageable = Pageable.of(page, size, sort)
    result = Page(service.find_all(pageable), pageable, service.count_all())
    base_url = str(request.url).split('?')[0]
    response.headers.update(generate_pagination_headers(base_url, request.url.query, result))
    return result.content


@invoice_router.get("/{id}", response_model=InvoiceDTO)
def get_invoice(id: int, db: Session = Depends(get_read_db)):
    logger.debug(f"REST request to get Invoice : {id}")
    result = InvoiceService(db).find_one(id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Invoice {id} not found")
    return result


@invoice_router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(id: int, db: Session = Depends(get_db)):
    logger.debug(f"REST request to delete Invoice : {id}")
    InvoiceService(db).delete(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=create_entity_deletion_alert(ENTITY_NAME, id))
