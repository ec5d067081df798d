"""Stock movement ledger access."""

from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.engine import RowMapping

from inventory_db.dao.base import (
    BaseDAO,
    LiveBackend,
    OfflineBackend,
    as_datetime,
    as_int,
    as_optional_int,
    as_text,
)
from inventory_db.records import MovementType, StockMovement
from inventory_db.sql.models import StockMovementModel


class StockMovementLiveBackend(LiveBackend[StockMovement]):
    table = StockMovementModel.__table__
    id_column = "movement_id"

    def _map_row(self, row: RowMapping) -> StockMovement:
        return StockMovement(
            movement_id=as_int(row, "movement_id"),
            product_id=as_int(row, "product_id"),
            related_id=as_optional_int(row, "related_id"),
            movement_type=MovementType(row.get("movement_type") or MovementType.ADJUSTMENT.value),
            quantity_changed=as_int(row, "quantity_changed"),
            previous_quantity=as_int(row, "previous_quantity"),
            new_quantity=as_int(row, "new_quantity"),
            reason=as_text(row, "reason"),
            user_id=as_int(row, "user_id"),
            timestamp=as_datetime(row, "timestamp"),
        )

    def _to_values(self, movement: StockMovement) -> Dict[str, Any]:
        return {
            "product_id": movement.product_id,
            "related_id": movement.related_id,
            "movement_type": movement.movement_type.value,
            "quantity_changed": movement.quantity_changed,
            "previous_quantity": movement.previous_quantity,
            "new_quantity": movement.new_quantity,
            "reason": movement.reason,
            "user_id": movement.user_id,
            "timestamp": movement.timestamp,
        }

    def _newest_first(self, *criteria):
        return (
            select(self.table)
            .where(*criteria)
            .order_by(self.table.c.timestamp.desc(), self.table.c.movement_id.desc())
        )

    def _select_all(self):
        return self._newest_first()

    def get_by_product(self, product_id: int) -> List[StockMovement]:
        statement = self._newest_first(self.table.c.product_id == product_id)
        return self._fetch_all("get_by_product", statement)

    def get_by_user(self, user_id: int) -> List[StockMovement]:
        statement = self._newest_first(self.table.c.user_id == user_id)
        return self._fetch_all("get_by_user", statement)

    def get_by_date_range(self, start: datetime, end: datetime) -> List[StockMovement]:
        statement = self._newest_first(self.table.c.timestamp.between(start, end))
        return self._fetch_all("get_by_date_range", statement)

    def count(self) -> int:
        return self._count("count")


class StockMovementOfflineBackend(OfflineBackend[StockMovement]):
    table = StockMovementModel.__table__
    id_column = "movement_id"

    def _placeholder(self, movement_id: int) -> StockMovement:
        return StockMovement(
            movement_id=movement_id,
            product_id=1,
            movement_type=MovementType.ADJUSTMENT,
            reason="Test movement",
        )

    def get_by_product(self, product_id: int) -> List[StockMovement]:
        return []

    def get_by_user(self, user_id: int) -> List[StockMovement]:
        return []

    def get_by_date_range(self, start: datetime, end: datetime) -> List[StockMovement]:
        return []

    def count(self) -> int:
        return 0


class StockMovementDAO(BaseDAO[StockMovement]):
    """Stock movement ledger. Listings are newest first."""

    live_backend = StockMovementLiveBackend
    offline_backend = StockMovementOfflineBackend

    def get_by_product(self, product_id: int) -> List[StockMovement]:
        return self._backend.get_by_product(product_id)

    def get_by_user(self, user_id: int) -> List[StockMovement]:
        return self._backend.get_by_user(user_id)

    def get_by_date_range(self, start: datetime, end: datetime) -> List[StockMovement]:
        """Movements with ``start <= timestamp <= end``."""
        return self._backend.get_by_date_range(start, end)

    def count(self) -> int:
        return self._backend.count()
