"""
Column lists for the hand-written SELECTs. Every column is labelled
`<prefix>_<column>` so the joined tables cannot collide in a result row.
"""

from typing import List

from sqlalchemy.sql.elements import Label
from sqlalchemy.sql.selectable import FromClause


def _labelled(table: FromClause, column_prefix: str, names: List[str]) -> List[Label]:
    return [table.c[name].label(f"{column_prefix}_{name}") for name in names]


class InvoiceSqlHelper:
    COLUMNS = ["id", "code", "date", "details", "status", "payment_method", "payment_date", "payment_amount"]

    @classmethod
    def get_columns(cls, table: FromClause, column_prefix: str) -> List[Label]:
        return _labelled(table, column_prefix, cls.COLUMNS)


class ShipmentSqlHelper:
    COLUMNS = ["id", "tracking_code", "date", "details", "invoice_id"]

    @classmethod
    def get_columns(cls, table: FromClause, column_prefix: str) -> List[Label]:
        return _labelled(table, column_prefix, cls.COLUMNS)
