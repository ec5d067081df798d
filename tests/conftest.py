"""Shared test fixtures: a file-backed SQLite store and one DAO per entity."""

import pytest

from inventory_db import (
    AlertDAO,
    ConnectionManager,
    DatabaseSettings,
    ProductDAO,
    SaleDAO,
    StockMovementDAO,
    SupplierDAO,
    UserDAO,
)
from inventory_db.sql import create_all_tables


@pytest.fixture
def settings(tmp_path) -> DatabaseSettings:
    """Settings pointing at a temporary SQLite database."""
    return DatabaseSettings(
        url=f"sqlite:///{tmp_path / 'inventory.db'}",
        echo=False,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def manager(settings):
    """Connection manager with all tables created."""
    manager = ConnectionManager(settings)
    create_all_tables(manager.get_connection())
    yield manager
    manager.close_connection()


@pytest.fixture
def connection(manager):
    return manager.get_connection()


@pytest.fixture
def supplier_dao(connection) -> SupplierDAO:
    return SupplierDAO(connection)


@pytest.fixture
def product_dao(connection) -> ProductDAO:
    return ProductDAO(connection)


@pytest.fixture
def sale_dao(connection) -> SaleDAO:
    return SaleDAO(connection)


@pytest.fixture
def movement_dao(connection) -> StockMovementDAO:
    return StockMovementDAO(connection)


@pytest.fixture
def alert_dao(connection) -> AlertDAO:
    return AlertDAO(connection)


@pytest.fixture
def user_dao(connection) -> UserDAO:
    return UserDAO(connection)
