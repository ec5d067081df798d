"""Data access objects, one per entity."""

from inventory_db.dao.base import BaseDAO, KeyedDAO, LiveBackend, OfflineBackend
from inventory_db.dao.supplier import SupplierDAO
from inventory_db.dao.product import ProductDAO
from inventory_db.dao.sale import SaleDAO
from inventory_db.dao.stock_movement import StockMovementDAO
from inventory_db.dao.alert import AlertDAO
from inventory_db.dao.user import UserDAO

__all__ = [
    "BaseDAO",
    "KeyedDAO",
    "LiveBackend",
    "OfflineBackend",
    "SupplierDAO",
    "ProductDAO",
    "SaleDAO",
    "StockMovementDAO",
    "AlertDAO",
    "UserDAO",
]
