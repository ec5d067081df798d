"""Relational schema for the inventory store."""

from inventory_db.sql.models import (
    Base,
    SupplierModel,
    ProductModel,
    UserModel,
    SaleModel,
    SaleItemModel,
    StockMovementModel,
    LowStockAlertModel,
    AuditLogModel,
)
from inventory_db.sql.schema import create_all_tables, drop_all_tables, recreate_all_tables

__all__ = [
    "Base",
    "SupplierModel",
    "ProductModel",
    "UserModel",
    "SaleModel",
    "SaleItemModel",
    "StockMovementModel",
    "LowStockAlertModel",
    "AuditLogModel",
    "create_all_tables",
    "drop_all_tables",
    "recreate_all_tables",
]
