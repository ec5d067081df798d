"""Sale and sale item data access, plus sales aggregates."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import Connection, desc, func, insert, select, update
from sqlalchemy.engine import RowMapping

from inventory_db.dao.base import (
    KeyedDAO,
    LiveBackend,
    OfflineBackend,
    as_bool,
    as_datetime,
    as_float,
    as_int,
    as_text,
)
from inventory_db.records import Sale, SaleItem, SalesStatistics, TopProduct, generate_receipt_number
from inventory_db.sql.models import ProductModel, SaleItemModel, SaleModel

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 5


def _day_bounds(start: date, end: date):
    """Half-open datetime range covering the whole days ``start`` to ``end``."""
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


class SaleLiveBackend(LiveBackend[Sale]):
    table = SaleModel.__table__
    id_column = "sale_id"
    unique_key = "receipt_number"
    items_table = SaleItemModel.__table__

    def _map_row(self, row: RowMapping) -> Sale:
        return Sale(
            sale_id=as_int(row, "sale_id"),
            sale_datetime=as_datetime(row, "sale_datetime"),
            user_id=as_int(row, "user_id"),
            user_name=as_text(row, "user_name"),
            subtotal=as_float(row, "subtotal"),
            tax_amount=as_float(row, "tax_amount"),
            discount_amount=as_float(row, "discount_amount"),
            total_amount=as_float(row, "total_amount"),
            payment_method=as_text(row, "payment_method"),
            payment_status=as_text(row, "payment_status"),
            notes=as_text(row, "notes"),
            receipt_number=as_text(row, "receipt_number"),
            is_completed=as_bool(row, "is_completed"),
        )

    @staticmethod
    def _map_item(row: RowMapping) -> SaleItem:
        return SaleItem(
            sale_item_id=as_int(row, "sale_item_id"),
            sale_id=as_int(row, "sale_id"),
            product_id=as_int(row, "product_id"),
            product_name=as_text(row, "product_name"),
            product_category=as_text(row, "product_category"),
            quantity=as_int(row, "quantity"),
            unit_price=as_float(row, "unit_price"),
            line_total=as_float(row, "line_total"),
        )

    def _to_values(self, sale: Sale) -> Dict[str, Any]:
        return {
            "sale_datetime": sale.sale_datetime,
            "user_id": sale.user_id,
            "user_name": sale.user_name,
            "subtotal": sale.subtotal,
            "tax_amount": sale.tax_amount,
            "discount_amount": sale.discount_amount,
            "total_amount": sale.total_amount,
            "payment_method": sale.payment_method,
            "payment_status": sale.payment_status,
            "notes": sale.notes,
            "receipt_number": sale.receipt_number,
            "is_completed": sale.is_completed,
        }

    @staticmethod
    def _item_values(item: SaleItem) -> Dict[str, Any]:
        return {
            "product_id": item.product_id,
            "product_name": item.product_name,
            "product_category": item.product_category,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "line_total": item.line_total,
        }

    def _newest_first(self, *criteria):
        return (
            select(self.table)
            .where(*criteria)
            .order_by(self.table.c.sale_datetime.desc(), self.table.c.sale_id.desc())
        )

    def _in_days(self, start: date, end: date):
        low, high = _day_bounds(start, end)
        return (self.table.c.sale_datetime >= low) & (self.table.c.sale_datetime < high)

    def _completed(self):
        return self.table.c.is_completed.is_(True)

    def _attach_items(self, conn: Connection, sales: List[Sale]) -> None:
        if not sales:
            return
        by_id = {sale.sale_id: sale for sale in sales}
        statement = (
            select(self.items_table)
            .where(self.items_table.c.sale_id.in_(list(by_id)))
            .order_by(self.items_table.c.sale_item_id)
        )
        for row in conn.execute(statement).mappings():
            item = self._map_item(row)
            by_id[item.sale_id].items.append(item)

    def _fetch_sales(self, operation: str, statement) -> List[Sale]:
        with self._transaction(operation) as conn:
            sales = [self._map_row(row) for row in conn.execute(statement).mappings()]
            self._attach_items(conn, sales)
        return sales

    def get_by_id(self, sale_id: int) -> Optional[Sale]:
        sales = self._fetch_sales("get_by_id", select(self.table).where(self.table.c.sale_id == sale_id))
        return sales[0] if sales else None

    def get_all(self) -> List[Sale]:
        return self._fetch_sales("get_all", self._newest_first())

    def create(self, sale: Sale) -> bool:
        with self._transaction("create") as conn:
            result = conn.execute(insert(self.table).values(**self._to_values(sale)))
            if result.rowcount == 0:
                return False
            sale_id = result.inserted_primary_key[0]
            item_ids = [
                conn.execute(
                    insert(self.items_table).values(sale_id=sale_id, **self._item_values(item))
                ).inserted_primary_key[0]
                for item in sale.items
            ]

        sale.sale_id = sale_id
        for item, item_id in zip(sale.items, item_ids):
            item.sale_id = sale_id
            item.sale_item_id = item_id
        logger.debug("Created sale %s with %d items", sale_id, len(item_ids))
        return True

    def get_by_date_range(self, start: date, end: date) -> List[Sale]:
        return self._fetch_sales("get_by_date_range", self._newest_first(self._in_days(start, end)))

    def get_by_user(self, user_id: int) -> List[Sale]:
        return self._fetch_sales("get_by_user", self._newest_first(self.table.c.user_id == user_id))

    def total_sales_amount(self, start: date, end: date) -> float:
        statement = select(func.coalesce(func.sum(self.table.c.total_amount), 0)).where(
            self._in_days(start, end), self._completed()
        )
        return float(self._scalar("total_sales_amount", statement) or 0.0)

    def get_sales_statistics(self, start: date, end: date) -> SalesStatistics:
        sales, items, products = self.table, self.items_table, ProductModel.__table__
        criteria = (self._in_days(start, end), self._completed())

        totals = select(
            func.count(sales.c.sale_id).label("total_sales"),
            func.coalesce(func.sum(sales.c.total_amount), 0).label("total_revenue"),
            func.coalesce(func.avg(sales.c.total_amount), 0).label("average_sale"),
        ).where(*criteria)
        items_sold = (
            select(func.coalesce(func.sum(items.c.quantity), 0))
            .select_from(items.join(sales, items.c.sale_id == sales.c.sale_id))
            .where(*criteria)
        )
        top = (
            select(
                products.c.product_id,
                products.c.name,
                products.c.category,
                func.sum(items.c.quantity).label("total_sold"),
                func.sum(items.c.line_total).label("total_revenue"),
            )
            .select_from(
                items.join(sales, items.c.sale_id == sales.c.sale_id).join(
                    products, items.c.product_id == products.c.product_id
                )
            )
            .where(*criteria)
            .group_by(products.c.product_id, products.c.name, products.c.category)
            .order_by(desc("total_sold"), products.c.product_id)
            .limit(TOP_PRODUCTS_LIMIT)
        )

        with self._transaction("get_sales_statistics") as conn:
            row = conn.execute(totals).mappings().one()
            total_items = conn.execute(items_sold).scalar()
            top_rows = conn.execute(top).mappings().all()

        return SalesStatistics(
            total_sales=as_int(row, "total_sales"),
            total_revenue=as_float(row, "total_revenue"),
            average_sale=as_float(row, "average_sale"),
            total_items=int(total_items or 0),
            top_products=[
                TopProduct(
                    product_id=as_int(r, "product_id"),
                    name=as_text(r, "name"),
                    category=as_text(r, "category"),
                    total_sold=as_int(r, "total_sold"),
                    total_revenue=as_float(r, "total_revenue"),
                )
                for r in top_rows
            ],
        )

    def update_status(self, sale_id: int, status: str, is_completed: bool) -> bool:
        statement = (
            update(self.table)
            .where(self.table.c.sale_id == sale_id)
            .values(payment_status=status, is_completed=is_completed)
        )
        return self._rowcount("update_status", statement) > 0


class SaleOfflineBackend(OfflineBackend[Sale]):
    table = SaleModel.__table__
    id_column = "sale_id"

    def _placeholder(self, sale_id: int) -> Sale:
        return Sale(
            sale_id=sale_id,
            user_id=1,
            user_name="TestUser",
            receipt_number=generate_receipt_number(),
        )

    def create(self, sale: Sale) -> bool:
        sale.sale_id = self.random_id()
        for item_id, item in enumerate(sale.items, start=1):
            item.sale_id = sale.sale_id
            item.sale_item_id = item_id
        logger.debug("Offline create on sales assigned id %s", sale.sale_id)
        return True

    def get_by_date_range(self, start: date, end: date) -> List[Sale]:
        return []

    def get_by_user(self, user_id: int) -> List[Sale]:
        return []

    def total_sales_amount(self, start: date, end: date) -> float:
        return 0.0

    def get_sales_statistics(self, start: date, end: date) -> SalesStatistics:
        return SalesStatistics()

    def update_status(self, sale_id: int, status: str, is_completed: bool) -> bool:
        return True


class SaleDAO(KeyedDAO[Sale]):
    """Sales with their items. Listings are newest first and carry items.

    The business key is the receipt number. ``update`` rewrites the sale row
    only, never its items.
    """

    live_backend = SaleLiveBackend
    offline_backend = SaleOfflineBackend

    def create(self, sale: Sale) -> bool:
        """Insert the sale and its items in one transaction.

        Sets ``sale_id`` on the sale and ``sale_id``/``sale_item_id`` on every
        item. Offline, items are numbered 1..n.
        """
        return self._backend.create(sale)

    def get_by_date_range(self, start: date, end: date) -> List[Sale]:
        """Sales made on any day from ``start`` to ``end``, both included."""
        return self._backend.get_by_date_range(start, end)

    def get_by_user(self, user_id: int) -> List[Sale]:
        return self._backend.get_by_user(user_id)

    def get_today(self) -> List[Sale]:
        today = date.today()
        return self.get_by_date_range(today, today)

    def total_sales_amount(self, start: date, end: date) -> float:
        """Sum of ``total_amount`` over completed sales in the day range."""
        return self._backend.total_sales_amount(start, end)

    def get_sales_statistics(self, start: date, end: date) -> SalesStatistics:
        """Aggregate completed sales in the day range, with the top five products."""
        return self._backend.get_sales_statistics(start, end)

    def update_status(self, sale_id: int, status: str, is_completed: bool) -> bool:
        return self._backend.update_status(sale_id, status, is_completed)
