"""Supplier data access."""

from typing import Any, Dict

from sqlalchemy import select
from sqlalchemy.engine import RowMapping

from inventory_db.dao.base import KeyedDAO, LiveBackend, OfflineBackend, as_int, as_text
from inventory_db.records import Supplier
from inventory_db.sql.models import SupplierModel


class SupplierLiveBackend(LiveBackend[Supplier]):
    table = SupplierModel.__table__
    id_column = "supplier_id"
    unique_key = "name"

    def _map_row(self, row: RowMapping) -> Supplier:
        return Supplier(
            supplier_id=as_int(row, "supplier_id"),
            name=as_text(row, "name"),
            contact_person=as_text(row, "contact_person"),
            phone=as_text(row, "phone"),
            email=as_text(row, "email"),
            address=as_text(row, "address"),
        )

    def _to_values(self, supplier: Supplier) -> Dict[str, Any]:
        return {
            "name": supplier.name,
            "contact_person": supplier.contact_person,
            "phone": supplier.phone,
            "email": supplier.email,
            "address": supplier.address,
        }

    def _select_all(self):
        return select(self.table).order_by(self.table.c.name)


class SupplierOfflineBackend(OfflineBackend[Supplier]):
    table = SupplierModel.__table__
    id_column = "supplier_id"

    def _placeholder(self, supplier_id: int) -> Supplier:
        return Supplier(
            supplier_id=supplier_id,
            name="Test Supplier",
            contact_person="Test Contact",
            phone="000-000-0000",
            email="supplier@example.com",
            address="Test Address",
        )


class SupplierDAO(KeyedDAO[Supplier]):
    """Suppliers, listed by name. The business key is the supplier name."""

    live_backend = SupplierLiveBackend
    offline_backend = SupplierOfflineBackend
