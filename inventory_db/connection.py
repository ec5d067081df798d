"""Connection management for the inventory store."""

import logging
import threading
from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import Connection, Engine, create_engine
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.pool import NullPool

from inventory_db.debug import is_debug_enabled
from inventory_db.errors import DatabaseConnectionError

logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """Database configuration settings.

    Read from ``INVENTORY_DB_*`` environment variables or a ``.env`` file.
    """

    url: str = "postgresql://localhost:5432/nardos_inventory"
    user: str = "root"
    password: str = ""
    echo: Optional[bool] = None
    connect_args: Dict[str, Any] = Field(default_factory=dict)

    model_config = SettingsConfigDict(
        env_prefix="INVENTORY_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def sqlalchemy_url(self) -> URL:
        """Return the configured URL with the credentials merged in.

        Credentials already present in ``url`` win. File-based URLs such as
        SQLite have no host and are returned untouched.
        """
        url = make_url(self.url)
        if url.host and url.username is None:
            url = url.set(username=self.user, password=self.password or None)
        return url


class ConnectionManager:
    """Owns the single shared connection to the inventory store.

    Build one per process and hand it to whatever constructs DAOs::

        manager = ConnectionManager()
        suppliers = SupplierDAO(manager.try_get_connection())
        ...
        manager.close_connection()
    """

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        """Initialize connection manager.

        Args:
            settings: Database settings, defaults to loading from environment
        """
        self.settings = settings or DatabaseSettings()
        self._engine: Optional[Engine] = None
        self._connection: Optional[Connection] = None
        self._lock = threading.RLock()

    @property
    def display_url(self) -> str:
        try:
            return self.settings.sqlalchemy_url().render_as_string(hide_password=True)
        except ArgumentError:
            return "<invalid url>"

    def _get_engine(self) -> Engine:
        if self._engine is None:
            echo = self.settings.echo if self.settings.echo is not None else is_debug_enabled()
            try:
                self._engine = create_engine(
                    self.settings.sqlalchemy_url(),
                    echo=echo,
                    poolclass=NullPool,
                    connect_args=self.settings.connect_args,
                )
            except (ArgumentError, ImportError) as e:
                logger.error("Database driver could not be loaded: %s", e)
                raise DatabaseConnectionError(
                    f"Database driver could not be loaded: {e}",
                    url=self.display_url,
                    stage="engine",
                ) from e
        return self._engine

    @staticmethod
    def _is_open(connection: Optional[Connection]) -> bool:
        return connection is not None and not connection.closed and not connection.invalidated

    def get_connection(self) -> Connection:
        """Return the shared connection, opening a new one when needed.

        A closed or invalidated handle is closed and replaced.

        Returns:
            SQLAlchemy connection

        Raises:
            DatabaseConnectionError: If the driver is missing or connect fails
        """
        with self._lock:
            if self._is_open(self._connection):
                return self._connection

            stale, self._connection = self._connection, None
            if stale is not None:
                logger.info("Replacing stale database connection")
                self._close_quietly(stale)

            engine = self._get_engine()
            try:
                self._connection = engine.connect()
            except SQLAlchemyError as e:
                logger.error("Database connection failed: %s", e)
                raise DatabaseConnectionError(
                    f"Database connection failed: {e}",
                    url=self.display_url,
                    stage="connect",
                ) from e

            logger.info("Database connection established: %s", self.display_url)
            return self._connection

    def try_get_connection(self) -> Optional[Connection]:
        """Return the shared connection, or None when the store is unreachable.

        DAOs built with the None result run in offline mode.
        """
        try:
            return self.get_connection()
        except DatabaseConnectionError as e:
            logger.warning("Running in offline mode: %s", e)
            return None

    def is_connected(self) -> bool:
        """Check whether a connection exists and is open. Never raises."""
        try:
            with self._lock:
                return self._is_open(self._connection)
        except Exception:
            return False

    def close_connection(self) -> None:
        """Close the shared connection and dispose the engine.

        Errors are logged, not raised.
        """
        with self._lock:
            connection, self._connection = self._connection, None
            engine, self._engine = self._engine, None

        if connection is not None and self._close_quietly(connection):
            logger.info("Database connection closed")
        if engine is not None:
            try:
                engine.dispose()
            except Exception as e:
                logger.error("Error disposing database engine: %s", e)

    @staticmethod
    def _close_quietly(connection: Connection) -> bool:
        try:
            connection.close()
        except Exception as e:
            logger.error("Error closing database connection: %s", e)
            return False
        return True

    def __enter__(self) -> "ConnectionManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close_connection()
