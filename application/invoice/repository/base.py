"""
Generic write/count operations shared by the entity repositories.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql.selectable import FromClause

from invoice.core.exceptions import EntityNotFoundError
from invoice.logging.utils import get_app_logger
from invoice.utils.datetime_helpers import as_utc

logger = get_app_logger("invoice.repository")


class SimpleRepository:
    """
    Insert-or-update, count, exists and delete over one table.

    Subclasses set `table` and `columns` (the writable columns) and
    implement `find_by_id`.
    """

    table: FromClause = None
    columns: List[str] = []

    def __init__(self, db: Session):
        self.db = db

    @property
    def table_name(self) -> str:
        return self.table.name

    def find_by_id(self, id: int):
        raise NotImplementedError

    def _to_values(self, entity) -> Dict[str, Any]:
        values = entity.model_dump(include=set(self.columns))
        # naive datetimes are taken as UTC; aware ones are converted
        return {k: as_utc(v) if isinstance(v, datetime) else v for k, v in values.items()}

    def save(self, entity):
        """Insert when the entity has no id, update otherwise; returns the stored row."""
        values = self._to_values(entity)
        try:
            if entity.id is None:
                result = self.db.execute(insert(self.table).values(**values))
                entity_id = result.inserted_primary_key[0]
                logger.info(f"{self.table_name}_inserted | id={entity_id}")
            else:
                entity_id = entity.id
                result = self.db.execute(update(self.table).where(self.table.c.id == entity_id).values(**values))
                if result.rowcount == 0:
                    raise EntityNotFoundError(self.table_name, entity_id)
                logger.info(f"{self.table_name}_updated | id={entity_id}")
        except EntityNotFoundError:
            logger.warning(f"{self.table_name}_update_missing | id={entity.id}")
            raise
        except Exception as e:
            logger.error(f"{self.table_name}_save_error | id={entity.id} error={e}", exc_info=True)
            raise
        return self.find_by_id(entity_id)

    def count(self) -> int:
        return self.db.execute(select(func.count()).select_from(self.table)).scalar_one()

    def exists_by_id(self, id: int) -> bool:
        row = self.db.execute(select(self.table.c.id).where(self.table.c.id == id)).first()
        return row is not None

    def delete_by_id(self, id: int) -> None:
        try:
            result = self.db.execute(delete(self.table).where(self.table.c.id == id))
            logger.info(f"{self.table_name}_deleted | id={id} rows={result.rowcount}")
        except Exception as e:
            logger.error(f"{self.table_name}_delete_error | id={id} error={e}", exc_info=True)
            raise

    def _one_or_none(self, rows: List[Any]) -> Optional[Any]:
        return rows[0] if rows else None
