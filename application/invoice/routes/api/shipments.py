from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from invoice.connections.database import get_db, get_read_db
from invoice.core.constants import EntityNames, ErrorKeys
from invoice.core.exceptions import BadRequestAlertException
from invoice.dto.shipments import ShipmentDTO, ShipmentPatch
from invoice.logging.utils import get_app_logger
from invoice.services.shipment_service import ShipmentService
from invoice.utils.header_utils import (
    create_entity_creation_alert,
    create_entity_deletion_alert,
    create_entity_update_alert,
)
from invoice.utils.pagination import Page, Pageable, generate_pagination_headers

logger = get_app_logger('invoice.routes.shipments')

ENTITY_NAME = EntityNames.SHIPMENT

shipment_router = APIRouter(prefix="/shipments", tags=["shipments"])


def _check_id(id: int, body_id: Optional[int], service: ShipmentService) -> None:
    if body_id is None:
        raise BadRequestAlertException("Invalid id", ENTITY_NAME, ErrorKeys.ID_NULL)
    if body_id != id:
        raise BadRequestAlertException("Invalid ID", ENTITY_NAME, ErrorKeys.ID_INVALID)
    if not service.exists(id):
        raise BadRequestAlertException("Entity not found", ENTITY_NAME, ErrorKeys.ID_NOT_FOUND)


@shipment_router.post("", response_model=ShipmentDTO, status_code=status.HTTP_201_CREATED)
def create_shipment(shipment: ShipmentDTO, response: Response, db: Session = Depends(get_db)):
    logger.debug(f"REST request to save Shipment : {shipment!r}")
    if shipment.id is not None:
        raise BadRequestAlertException("A new shipment cannot already have an ID", ENTITY_NAME, ErrorKeys.ID_EXISTS)
    result = ShipmentService(db).save(shipment)
    response.headers["Location"] = f"/api/shipments/{result.id}"
    response.headers.update(create_entity_creation_alert(ENTITY_NAME, result.id))
    return result


@shipment_router.put("/{id}", response_model=ShipmentDTO)
def update_shipment(id: int, shipment: ShipmentDTO, response: Response, db: Session = Depends(get_db)):
    logger.debug(f"REST request to update Shipment : {id}, {shipment!r}")
    service = ShipmentService(db)
    _check_id(id, shipment.id, service)
    result = service.update(shipment)
    response.headers.update(create_entity_update_alert(ENTITY_NAME, result.id))
    return result


@shipment_router.patch("/{id}", response_model=ShipmentDTO)
def partial_update_shipment(id: int, shipment: ShipmentPatch, response: Response, db: Session = Depends(get_db)):
    logger.debug(f"REST request to partial update Shipment partially : {id}, {shipment!r}")
    service = ShipmentService(db)
    _check_id(id, shipment.id, service)
    result = service.partial_update(shipment)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Shipment {id} not found")
    response.headers.update(create_entity_update_alert(ENTITY_NAME, result.id))
    return result


@shipment_router.get("", response_model=List[ShipmentDTO])
def get_all_shipments(
    request: Request,
    response: Response,
    page: int = Query(0, ge=0, description="Page number (starting from 0)"),
    size: Optional[int] = Query(None, ge=1, description="Number of shipments per page"),
    sort: Optional[List[str]] = Query(None, description="Sort criteria: property[,asc|desc]"),
    eagerload: bool = Query(True, description="Load the invoice of every shipment"),
    db: Session = Depends(get_read_db),
):
    logger.debug("REST request to get a page of Shipments")
    service = ShipmentService(db)
    pageable = Pageable.of(page, size, sort)
    if eagerload:
        content = service.find_all_with_eager_relationships(pageable)
    else:
        content = service.find_all(pageable)
    result = Page(content, pageable, service.count_all())
    base_url = str(request.url).split('?')[0]
    response.headers.update(generate_pagination_headers(base_url, request.url.query, result))
    return result.content


@shipment_router.get("/{id}", response_model=ShipmentDTO)
def get_shipment(id: int, db: Session = Depends(get_read_db)):
    logger.debug(f"REST request to get Shipment : {id}")
    result = ShipmentService(db).find_one(id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Shipment {id} not found")
    return result


@shipment_router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shipment(id: int, db: Session = Depends(get_db)):
    logger.debug(f"REST request to delete Shipment : {id}")
    ShipmentService(db).delete(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=create_entity_deletion_alert(ENTITY_NAME, id))
