"""Product data access."""

from typing import Any, Dict, List

from sqlalchemy import select, update
from sqlalchemy.engine import RowMapping

from inventory_db.dao.base import (
    KeyedDAO,
    LiveBackend,
    OfflineBackend,
    as_bool,
    as_float,
    as_int,
    as_optional_int,
    as_text,
)
from inventory_db.records import Product
from inventory_db.sql.models import ProductModel


class ProductLiveBackend(LiveBackend[Product]):
    table = ProductModel.__table__
    id_column = "product_id"
    unique_key = "name"

    def _map_row(self, row: RowMapping) -> Product:
        return Product(
            product_id=as_int(row, "product_id"),
            name=as_text(row, "name"),
            category=as_text(row, "category"),
            supplier_id=as_optional_int(row, "supplier_id"),
            price=as_float(row, "price"),
            quantity=as_int(row, "quantity"),
            min_stock=as_int(row, "min_stock"),
            is_active=as_bool(row, "is_active"),
        )

    def _to_values(self, product: Product) -> Dict[str, Any]:
        return {
            "name": product.name,
            "category": product.category,
            "supplier_id": product.supplier_id,
            "price": product.price,
            "quantity": product.quantity,
            "min_stock": product.min_stock,
            "is_active": product.is_active,
        }

    def _active(self):
        return select(self.table).where(self.table.c.is_active.is_(True))

    def _low_stock(self):
        return self.table.c.quantity <= self.table.c.min_stock

    def _select_all(self):
        return self._active().order_by(self.table.c.name)

    def search_by_name(self, fragment: str) -> List[Product]:
        statement = (
            self._active()
            .where(self.table.c.name.ilike(f"%{fragment}%"))
            .order_by(self.table.c.name)
        )
        return self._fetch_all("search_by_name", statement)

    def filter_by_category(self, category: str) -> List[Product]:
        statement = (
            self._active()
            .where(self.table.c.category == category)
            .order_by(self.table.c.name)
        )
        return self._fetch_all("filter_by_category", statement)

    def get_low_stock_products(self) -> List[Product]:
        statement = self._active().where(self._low_stock()).order_by(self.table.c.name)
        return self._fetch_all("get_low_stock_products", statement)

    def count_active(self) -> int:
        return self._count("count_active", self.table.c.is_active.is_(True))

    def count_low_stock(self) -> int:
        return self._count("count_low_stock", self.table.c.is_active.is_(True), self._low_stock())

    def adjust_quantity(self, product_id: int, delta: int) -> bool:
        statement = (
            update(self.table)
            .where(self.table.c.product_id == product_id)
            .values(quantity=self.table.c.quantity + delta)
        )
        return self._rowcount("adjust_quantity", statement) > 0

    def get_stock_level(self, product_id: int) -> int:
        statement = select(self.table.c.quantity).where(
            self.table.c.product_id == product_id,
            self.table.c.is_active.is_(True),
        )
        return int(self._scalar("get_stock_level", statement) or 0)


class ProductOfflineBackend(OfflineBackend[Product]):
    table = ProductModel.__table__
    id_column = "product_id"

    def _placeholder(self, product_id: int) -> Product:
        return Product(product_id=product_id, name="Test Product", category="General")

    def search_by_name(self, fragment: str) -> List[Product]:
        return []

    def filter_by_category(self, category: str) -> List[Product]:
        return []

    def get_low_stock_products(self) -> List[Product]:
        return []

    def count_active(self) -> int:
        return 0

    def count_low_stock(self) -> int:
        return 0

    def adjust_quantity(self, product_id: int, delta: int) -> bool:
        return True

    def get_stock_level(self, product_id: int) -> int:
        return 0


class ProductDAO(KeyedDAO[Product]):
    """Products and their stock levels.

    Listings only include active products and are ordered by name. The
    business key is the product name.
    """

    live_backend = ProductLiveBackend
    offline_backend = ProductOfflineBackend

    def search_by_name(self, fragment: str) -> List[Product]:
        """Active products whose name contains ``fragment``, case-insensitive."""
        return self._backend.search_by_name(fragment)

    def filter_by_category(self, category: str) -> List[Product]:
        return self._backend.filter_by_category(category)

    def get_low_stock_products(self) -> List[Product]:
        """Active products at or below their low-stock threshold."""
        return self._backend.get_low_stock_products()

    def count_active(self) -> int:
        return self._backend.count_active()

    def count_low_stock(self) -> int:
        return self._backend.count_low_stock()

    def adjust_quantity(self, product_id: int, delta: int) -> bool:
        """Add ``delta`` (may be negative) to the stock level in one statement.

        Returns:
            True if the product exists
        """
        return self._backend.adjust_quantity(product_id, delta)

    def get_stock_level(self, product_id: int) -> int:
        """Units in stock of an active product, 0 when it is missing."""
        return self._backend.get_stock_level(product_id)
