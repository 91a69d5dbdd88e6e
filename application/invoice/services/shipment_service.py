from typing import List, Optional

from sqlalchemy.orm import Session

from invoice.aop.logging_aspect import loggable
from invoice.connections.database import transaction
from invoice.dto.shipments import ShipmentDTO, ShipmentPatch
from invoice.logging.utils import get_app_logger
from invoice.middlewares.request_context import request_context
from invoice.repository.shipments import ShipmentRepository
from invoice.utils.pagination import Pageable

logger = get_app_logger("invoice.services.shipment_service")


@loggable
class ShipmentService:
    """Service for managing shipments. Writes commit as one transaction each."""

    def __init__(self, db: Session, repository: Optional[ShipmentRepository] = None):
        self.db = db
        self.repository = repository or ShipmentRepository(db)
        request_context.module_name = 'shipment_service'

    def save(self, shipment: ShipmentDTO) -> ShipmentDTO:
        """Save a new shipment and return the persisted entity."""
        logger.debug(f"Request to save Shipment : {shipment!r}")
        with transaction(self.db):
            return self.repository.save(shipment)

    def update(self, shipment: ShipmentDTO) -> ShipmentDTO:
        """Overwrite an existing shipment with every field of `shipment`."""
        logger.debug(f"Request to update Shipment : {shipment!r}")
        request_context.shipment_id = shipment.id
        with transaction(self.db):
            return self.repository.save(shipment)

    def partial_update(self, shipment: ShipmentPatch) -> Optional[ShipmentDTO]:
        """
        Copy the non-null tracking_code, date and details of `shipment` onto
        the stored entity. Returns None when there is no shipment with that id.
        """
        logger.debug(f"Request to partially update Shipment : {shipment!r}")
        request_context.shipment_id = shipment.id
        with transaction(self.db):
            existing = self.repository.find_by_id(shipment.id)
            if existing is None:
                return None
            if shipment.tracking_code is not None:
                existing.tracking_code = shipment.tracking_code
            if shipment.date is not None:
                existing.date = shipment.date
            if shipment.details is not None:
                existing.details = shipment.details
            return self.repository.save(existing)

    def find_all(self, pageable: Optional[Pageable]) -> List[ShipmentDTO]:
        logger.debug("Request to get all Shipments")
        return self.repository.find_all_by(pageable)

    def find_all_with_eager_relationships(self, pageable: Optional[Pageable]) -> List[ShipmentDTO]:
        return self.repository.find_all_with_eager_relationships(pageable)

    def count_all(self) -> int:
        return self.repository.count()

    def find_one(self, id: int) -> Optional[ShipmentDTO]:
        logger.debug(f"Request to get Shipment : {id}")
        request_context.shipment_id = id
        return self.repository.find_one_with_eager_relationships(id)

    def exists(self, id: int) -> bool:
        return self.repository.exists_by_id(id)

    def delete(self, id: int) -> None:
        logger.debug(f"Request to delete Shipment : {id}")
        request_context.shipment_id = id
        with transaction(self.db):
            self.repository.delete_by_id(id)
