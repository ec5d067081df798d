"""Tests for database settings and the connection manager."""

import logging
import threading

import pytest

from inventory_db import ConnectionManager, DatabaseConnectionError, DatabaseSettings
from inventory_db.debug import probe_connection


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("URL", "USER", "PASSWORD", "ECHO", "CONNECT_ARGS"):
        monkeypatch.delenv(f"INVENTORY_DB_{name}", raising=False)


def test_database_settings(clean_env):
    """Test database settings defaults."""
    settings = DatabaseSettings(_env_file=None)
    assert settings.url == "postgresql://localhost:5432/nardos_inventory"
    assert settings.user == "root"
    assert settings.password == ""
    assert settings.echo is None
    assert settings.connect_args == {}


def test_database_settings_from_environment(clean_env, monkeypatch):
    """Test settings are read from INVENTORY_DB_* variables."""
    monkeypatch.setenv("INVENTORY_DB_URL", "postgresql://db.internal:6543/shop")
    monkeypatch.setenv("INVENTORY_DB_USER", "cashier")
    settings = DatabaseSettings(_env_file=None)
    assert settings.url == "postgresql://db.internal:6543/shop"
    assert settings.user == "cashier"


def test_credentials_are_merged_into_url():
    settings = DatabaseSettings(url="postgresql://localhost:5432/nardos_inventory", user="root", password="secret")
    url = settings.sqlalchemy_url()
    assert url.username == "root"
    assert url.password == "secret"
    assert url.database == "nardos_inventory"


def test_credentials_in_url_win():
    settings = DatabaseSettings(url="postgresql://alice:pw@localhost/shop", user="root", password="secret")
    url = settings.sqlalchemy_url()
    assert url.username == "alice"
    assert url.password == "pw"


def test_sqlite_url_is_untouched(tmp_path):
    settings = DatabaseSettings(url=f"sqlite:///{tmp_path / 'x.db'}", user="root", password="secret")
    assert settings.sqlalchemy_url().username is None


def test_display_url_hides_password():
    manager = ConnectionManager(DatabaseSettings(url="postgresql://localhost/shop", password="secret"))
    assert "secret" not in manager.display_url
    assert "***" in manager.display_url


def test_connection_manager_initialization(settings):
    """Test connection manager initialization does not connect."""
    manager = ConnectionManager(settings)
    assert manager.settings is settings
    assert manager.is_connected() is False


def test_connection_lifecycle(settings):
    manager = ConnectionManager(settings)
    assert manager.is_connected() is False

    connection = manager.get_connection()
    assert manager.is_connected() is True
    assert manager.get_connection() is connection

    manager.close_connection()
    assert manager.is_connected() is False
    assert connection.closed


def test_close_connection_is_idempotent(settings):
    manager = ConnectionManager(settings)
    manager.close_connection()
    manager.get_connection()
    manager.close_connection()
    manager.close_connection()
    assert manager.is_connected() is False


def test_closed_connection_is_replaced(settings):
    manager = ConnectionManager(settings)
    first = manager.get_connection()
    first.close()
    assert manager.is_connected() is False

    second = manager.get_connection()
    assert second is not first
    assert not second.closed
    manager.close_connection()


def test_context_manager_closes_connection(settings):
    with ConnectionManager(settings) as manager:
        connection = manager.get_connection()
        assert manager.is_connected()
    assert connection.closed
    assert manager.is_connected() is False


def test_unknown_dialect_raises_connection_error():
    manager = ConnectionManager(DatabaseSettings(url="nosuchdialect://localhost/shop"))
    with pytest.raises(DatabaseConnectionError) as excinfo:
        manager.get_connection()
    assert excinfo.value.stage == "engine"
    assert excinfo.value.__cause__ is not None
    assert isinstance(excinfo.value, ConnectionError)


def test_failed_connect_raises_connection_error(tmp_path):
    missing = tmp_path / "missing" / "dir" / "inventory.db"
    manager = ConnectionManager(DatabaseSettings(url=f"sqlite:///{missing}"))
    with pytest.raises(DatabaseConnectionError) as excinfo:
        manager.get_connection()
    assert excinfo.value.stage == "connect"
    assert manager.is_connected() is False


def test_try_get_connection_returns_none_when_unreachable(caplog):
    manager = ConnectionManager(DatabaseSettings(url="nosuchdialect://localhost/shop"))
    with caplog.at_level(logging.WARNING, logger="inventory_db.connection"):
        assert manager.try_get_connection() is None
    assert "offline mode" in caplog.text


def test_try_get_connection_returns_shared_connection(settings):
    manager = ConnectionManager(settings)
    assert manager.try_get_connection() is manager.get_connection()
    manager.close_connection()


def test_close_connection_swallows_close_errors(settings, monkeypatch, caplog):
    manager = ConnectionManager(settings)
    connection = manager.get_connection()

    def broken_close():
        raise RuntimeError("driver went away")

    monkeypatch.setattr(connection, "close", broken_close)
    with caplog.at_level(logging.ERROR, logger="inventory_db.connection"):
        manager.close_connection()

    assert manager.is_connected() is False
    assert "Error closing database connection" in caplog.text


def test_concurrent_get_connection_returns_one_handle(settings):
    manager = ConnectionManager(settings)
    barrier = threading.Barrier(8)
    handles = []

    def worker():
        barrier.wait()
        handles.append(manager.get_connection())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(handles) == 8
    assert len({id(handle) for handle in handles}) == 1
    manager.close_connection()


def test_probe_connection(settings):
    manager = ConnectionManager(settings)
    assert probe_connection(manager) is True
    manager.close_connection()

    assert probe_connection(ConnectionManager(DatabaseSettings(url="nosuchdialect://localhost/x"))) is False
