"""
Completes the SELECT statements built by the repositories with the
WHERE, ORDER BY and LIMIT/OFFSET clauses derived from a Pageable.
"""

from typing import Mapping, Optional

from sqlalchemy import Select
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import FromClause

from invoice.core.exceptions import InvalidSortError
from invoice.utils.pagination import Pageable, to_snake_case

# Alias of the primary entity table in every generated query
ENTITY_ALIAS = "e"


def sortable_columns(table: FromClause) -> Mapping[str, ColumnElement]:
    return {column.name: column for column in table.c}


class EntityManager:

    def resolve_sort_column(self, entity_name: str, columns: Mapping[str, ColumnElement], prop: str) -> ColumnElement:
        # ColumnElement has no truth value, so no `or` chaining here
        column = columns.get(prop)
        if column is None:
            column = columns.get(to_snake_case(prop))
        if column is None:
            raise InvalidSortError(entity_name, prop)
        return column

    def create_select(
        self,
        select_from: Select,
        entity_name: str,
        columns: Mapping[str, ColumnElement],
        pageable: Optional[Pageable] = None,
        where: Optional[ColumnElement] = None,
    ) -> Select:
        statement = select_from
        if where is not None:
            statement = statement.where(where)
        if pageable is None:
            return statement

        sorted_on_id = False
        for order in pageable.sort:
            column = self.resolve_sort_column(entity_name, columns, order.prop)
            sorted_on_id = sorted_on_id or column.name == "id"
            statement = statement.order_by(column.asc() if order.ascending else column.desc())
        if not sorted_on_id and "id" in columns:
            # pages must not overlap when the requested sort has ties
            statement = statement.order_by(columns["id"].asc())

        return statement.limit(pageable.size).offset(pageable.offset)
