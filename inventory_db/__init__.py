"""Inventory and point-of-sale data-access package."""

from inventory_db.connection import ConnectionManager, DatabaseSettings
from inventory_db.errors import (
    InventoryDBError,
    DatabaseConnectionError,
    StorageError,
    OfflineOperationError,
)
from inventory_db.records import (
    Supplier,
    Product,
    Sale,
    SaleItem,
    StockMovement,
    LowStockAlert,
    User,
    SalesStatistics,
    TopProduct,
    UserRole,
    MovementType,
    PaymentMethod,
    PaymentStatus,
)
from inventory_db.dao import (
    SupplierDAO,
    ProductDAO,
    SaleDAO,
    StockMovementDAO,
    AlertDAO,
    UserDAO,
)
from inventory_db.debug import is_debug_enabled, print_database_status, print_tables, probe_connection
from inventory_db.logging_config import setup_logging

__all__ = [
    "ConnectionManager",
    "DatabaseSettings",
    "InventoryDBError",
    "DatabaseConnectionError",
    "StorageError",
    "OfflineOperationError",
    "Supplier",
    "Product",
    "Sale",
    "SaleItem",
    "StockMovement",
    "LowStockAlert",
    "User",
    "SalesStatistics",
    "TopProduct",
    "UserRole",
    "MovementType",
    "PaymentMethod",
    "PaymentStatus",
    "SupplierDAO",
    "ProductDAO",
    "SaleDAO",
    "StockMovementDAO",
    "AlertDAO",
    "UserDAO",
    "is_debug_enabled",
    "print_database_status",
    "print_tables",
    "probe_connection",
    "setup_logging",
]
