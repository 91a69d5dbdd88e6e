"""
Row mappers turning prefixed result columns back into DTOs.
"""

from typing import Any, Mapping, Optional

from invoice.dto.invoices import InvoiceDTO
from invoice.dto.shipments import ShipmentDTO
from invoice.utils.datetime_helpers import as_utc


class InvoiceRowMapper:

    def apply(self, row: Mapping[str, Any], prefix: str) -> Optional[InvoiceDTO]:
        """Map `<prefix>_*` columns; None when the id is NULL (unmatched outer join)."""
        if row.get(f"{prefix}_id") is None:
            return None
        return InvoiceDTO(
            id=row[f"{prefix}_id"],
            code=row[f"{prefix}_code"],
            date=as_utc(row[f"{prefix}_date"]),
            details=row[f"{prefix}_details"],
            status=row[f"{prefix}_status"],
            payment_method=row[f"{prefix}_payment_method"],
            payment_date=as_utc(row[f"{prefix}_payment_date"]),
            payment_amount=row[f"{prefix}_payment_amount"],
        )


class ShipmentRowMapper:

    def apply(self, row: Mapping[str, Any], prefix: str) -> ShipmentDTO:
        return ShipmentDTO(
            id=row[f"{prefix}_id"],
            tracking_code=row[f"{prefix}_tracking_code"],
            date=as_utc(row[f"{prefix}_date"]),
            details=row[f"{prefix}_details"],
            invoice_id=row[f"{prefix}_invoice_id"],
        )
