"""Low-stock alert storage.

Deciding when an alert is due belongs to the caller; this module only
stores, lists and resolves alerts.
"""

from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import select, update
from sqlalchemy.engine import RowMapping

from inventory_db.dao.base import BaseDAO, LiveBackend, OfflineBackend, as_bool, as_datetime, as_int
from inventory_db.records import LowStockAlert
from inventory_db.sql.models import LowStockAlertModel


class AlertLiveBackend(LiveBackend[LowStockAlert]):
    table = LowStockAlertModel.__table__
    id_column = "alert_id"

    def _map_row(self, row: RowMapping) -> LowStockAlert:
        return LowStockAlert(
            alert_id=as_int(row, "alert_id"),
            product_id=as_int(row, "product_id"),
            current_quantity=as_int(row, "current_quantity"),
            min_stock_level=as_int(row, "min_stock_level"),
            alert_date=as_datetime(row, "alert_date"),
            is_resolved=as_bool(row, "is_resolved"),
            resolved_at=row.get("resolved_at"),
        )

    def _to_values(self, alert: LowStockAlert) -> Dict[str, Any]:
        return {
            "product_id": alert.product_id,
            "current_quantity": alert.current_quantity,
            "min_stock_level": alert.min_stock_level,
            "alert_date": alert.alert_date,
            "is_resolved": alert.is_resolved,
            "resolved_at": alert.resolved_at,
        }

    def _newest_first(self, *criteria):
        return (
            select(self.table)
            .where(*criteria)
            .order_by(self.table.c.alert_date.desc(), self.table.c.alert_id.desc())
        )

    def _unresolved(self):
        return self.table.c.is_resolved.is_(False)

    def _select_all(self):
        return self._newest_first()

    def resolve(self, alert_id: int) -> bool:
        statement = (
            update(self.table)
            .where(self.table.c.alert_id == alert_id)
            .values(is_resolved=True, resolved_at=datetime.now())
        )
        return self._rowcount("resolve", statement) > 0

    def get_active(self) -> List[LowStockAlert]:
        return self._fetch_all("get_active", self._newest_first(self._unresolved()))

    def get_by_product(self, product_id: int) -> List[LowStockAlert]:
        statement = self._newest_first(self.table.c.product_id == product_id)
        return self._fetch_all("get_by_product", statement)

    def has_unresolved(self, product_id: int) -> bool:
        return self._count("has_unresolved", self.table.c.product_id == product_id, self._unresolved()) > 0

    def count_active(self) -> int:
        return self._count("count_active", self._unresolved())


class AlertOfflineBackend(OfflineBackend[LowStockAlert]):
    table = LowStockAlertModel.__table__
    id_column = "alert_id"

    def _placeholder(self, alert_id: int) -> LowStockAlert:
        return LowStockAlert(alert_id=alert_id, product_id=1)

    def resolve(self, alert_id: int) -> bool:
        return True

    def get_active(self) -> List[LowStockAlert]:
        return []

    def get_by_product(self, product_id: int) -> List[LowStockAlert]:
        return []

    def has_unresolved(self, product_id: int) -> bool:
        return False

    def count_active(self) -> int:
        return 0


class AlertDAO(BaseDAO[LowStockAlert]):
    """Low-stock alerts. Listings are newest first."""

    live_backend = AlertLiveBackend
    offline_backend = AlertOfflineBackend

    def create(self, alert: LowStockAlert) -> bool:
        """Store a new, unresolved alert dated now."""
        alert.trigger()
        return super().create(alert)

    def resolve(self, alert_id: int) -> bool:
        """Mark an alert resolved now. True if it exists (always True offline)."""
        return self._backend.resolve(alert_id)

    def get_active(self) -> List[LowStockAlert]:
        return self._backend.get_active()

    def get_by_product(self, product_id: int) -> List[LowStockAlert]:
        return self._backend.get_by_product(product_id)

    def has_unresolved(self, product_id: int) -> bool:
        return self._backend.has_unresolved(product_id)

    def count_active(self) -> int:
        return self._backend.count_active()
