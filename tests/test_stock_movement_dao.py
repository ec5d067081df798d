"""Tests for StockMovementDAO."""

from datetime import datetime, timedelta

import pytest

from inventory_db import MovementType, OfflineOperationError, StockMovement, StockMovementDAO


@pytest.fixture
def movements(movement_dao):
    now = datetime.now().replace(microsecond=0)
    rows = [
        StockMovement(product_id=1, movement_type=MovementType.RESTOCK, quantity_changed=20,
                      previous_quantity=5, reason="Weekly delivery", user_id=1,
                      timestamp=now - timedelta(days=3)),
        StockMovement(product_id=1, related_id=77, movement_type=MovementType.SALE, quantity_changed=-2,
                      previous_quantity=25, reason="Sale", user_id=2, timestamp=now - timedelta(days=1)),
        StockMovement(product_id=2, movement_type=MovementType.ADJUSTMENT, quantity_changed=-1,
                      previous_quantity=10, reason="Damaged", user_id=1, timestamp=now),
    ]
    for movement in rows:
        movement_dao.create(movement)
    return rows


def test_create_and_get_by_id(movement_dao, movements):
    sale_movement = movements[1]
    stored = movement_dao.get_by_id(sale_movement.movement_id)
    assert stored == sale_movement
    assert stored.new_quantity == 23
    assert stored.related_id == 77
    assert stored.movement_type is MovementType.SALE


def test_get_all_newest_first(movement_dao, movements):
    assert [m.reason for m in movement_dao.get_all()] == ["Damaged", "Sale", "Weekly delivery"]


def test_get_by_product(movement_dao, movements):
    assert [m.reason for m in movement_dao.get_by_product(1)] == ["Sale", "Weekly delivery"]
    assert movement_dao.get_by_product(99) == []


def test_get_by_user(movement_dao, movements):
    assert [m.reason for m in movement_dao.get_by_user(1)] == ["Damaged", "Weekly delivery"]


def test_get_by_date_range_is_inclusive(movement_dao, movements):
    start = movements[0].timestamp
    end = movements[1].timestamp
    assert [m.reason for m in movement_dao.get_by_date_range(start, end)] == ["Sale", "Weekly delivery"]


def test_count(movement_dao, movements):
    assert movement_dao.count() == 3


def test_offline_mode():
    dao = StockMovementDAO(None)
    assert dao.get_by_id(3).movement_id == 3
    assert dao.get_all() == []
    assert dao.get_by_product(1) == []
    assert dao.get_by_user(1) == []
    assert dao.get_by_date_range(datetime.now() - timedelta(days=1), datetime.now()) == []
    assert dao.count() == 0

    movement = StockMovement(product_id=1, quantity_changed=5, previous_quantity=1)
    assert dao.create(movement) is True
    assert movement.movement_id > 0
    with pytest.raises(OfflineOperationError):
        dao.update(movement)
