from fastapi import HTTPException, status


class EntityNotFoundError(LookupError):
    """Raised when an update targets a row that no longer exists."""

    def __init__(self, table: str, entity_id):
        super().__init__(f"Failed to update table [{table}]; Row with Id [{entity_id}] does not exist")
        self.table = table
        self.entity_id = entity_id


class BadRequestAlertException(HTTPException):
    """400 error carrying the entity name and an error key for alert headers."""

    def __init__(self, message: str, entity_name: str, error_key: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
        self.entity_name = entity_name
        self.error_key = error_key


class InvalidSortError(ValueError):
    """Raised when a sort property does not map to a column of the entity."""

    def __init__(self, entity_name: str, prop: str):
        super().__init__(f"No property '{prop}' found for type '{entity_name}'")
        self.entity_name = entity_name
        self.prop = prop
