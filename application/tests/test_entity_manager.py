"""Tests for the SELECT builder and the labelled column helpers."""

import pytest
from sqlalchemy import select

from invoice.core.exceptions import InvalidSortError
from invoice.models import Invoice, Shipment
from invoice.repository.entity_manager import ENTITY_ALIAS, EntityManager, sortable_columns
from invoice.repository.sql_helpers import InvoiceSqlHelper, ShipmentSqlHelper
from invoice.utils.pagination import Pageable

table = Shipment.__table__.alias(ENTITY_ALIAS)


@pytest.fixture()
def manager():
    return EntityManager()


def _select():
    return select(*ShipmentSqlHelper.get_columns(table, ENTITY_ALIAS)).select_from(table)


class TestCreateSelect:
    def test_without_pageable_adds_no_order_or_limit(self, manager):
        sql = str(manager.create_select(_select(), "shipment", sortable_columns(table)))
        assert "ORDER BY" not in sql
        assert "LIMIT" not in sql

    def test_where_clause_is_applied(self, manager):
        sql = str(manager.create_select(_select(), "shipment", sortable_columns(table), where=table.c.id == 5))
        assert "WHERE e.id = " in sql

    def test_sort_then_id_tiebreaker(self, manager):
        pageable = Pageable.of(2, 10, ["date,desc"])
        statement = manager.create_select(_select(), "shipment", sortable_columns(table), pageable)
        sql = str(statement)
        assert "ORDER BY e.date DESC, e.id ASC" in sql
        assert "LIMIT" in sql and "OFFSET" in sql
        compiled = statement.compile()
        assert 10 in compiled.params.values()
        assert 20 in compiled.params.values()

    def test_explicit_id_sort_adds_no_tiebreaker(self, manager):
        pageable = Pageable.of(0, 10, ["id,desc"])
        sql = str(manager.create_select(_select(), "shipment", sortable_columns(table), pageable))
        assert "ORDER BY e.id DESC" in sql
        assert "e.id ASC" not in sql

    def test_camel_case_property_resolves_to_column(self, manager):
        pageable = Pageable.of(0, 10, ["trackingCode"])
        sql = str(manager.create_select(_select(), "shipment", sortable_columns(table), pageable))
        assert "ORDER BY e.tracking_code ASC" in sql

    def test_unknown_property_is_rejected(self, manager):
        pageable = Pageable.of(0, 10, ["colour"])
        with pytest.raises(InvalidSortError) as excinfo:
            manager.create_select(_select(), "shipment", sortable_columns(table), pageable)
        assert excinfo.value.entity_name == "shipment"
        assert excinfo.value.prop == "colour"


def test_helpers_label_columns_with_prefix():
    labels = [c.name for c in InvoiceSqlHelper.get_columns(Invoice.__table__.alias("inv"), "inv")]
    assert labels == ["inv_id", "inv_code", "inv_date", "inv_details", "inv_status",
                      "inv_payment_method", "inv_payment_date", "inv_payment_amount"]
    shipment_labels = [c.name for c in ShipmentSqlHelper.get_columns(table, "e")]
    assert shipment_labels == ["e_id", "e_tracking_code", "e_date", "e_details", "e_invoice_id"]
