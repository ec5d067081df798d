"""Shared DAO machinery: live and offline backends and the DAO base classes.

A DAO picks its backend once, when it is built. With a connection it runs
parameterized statements through a ``LiveBackend``; without one it answers
from an ``OfflineBackend`` that never touches storage::

    suppliers = SupplierDAO(manager.try_get_connection())
    if suppliers.offline:
        ...
"""

import logging
import random
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Generic, Iterator, List, Optional, Type, TypeVar

from sqlalchemy import Connection, Table, func, insert, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.expression import Executable, Select

from inventory_db.errors import OfflineOperationError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_OFFLINE_ID = 99999


# Row readers: NULL or missing columns become the field's zero value.

def as_text(row: RowMapping, key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value)


def as_int(row: RowMapping, key: str) -> int:
    value = row.get(key)
    return 0 if value is None else int(value)


def as_optional_int(row: RowMapping, key: str) -> Optional[int]:
    value = row.get(key)
    return None if value is None else int(value)


def as_float(row: RowMapping, key: str) -> float:
    value = row.get(key)
    return 0.0 if value is None else float(value)


def as_bool(row: RowMapping, key: str) -> bool:
    return bool(row.get(key) or False)


def as_datetime(row: RowMapping, key: str) -> datetime:
    value = row.get(key)
    return datetime.min if value is None else value


class LiveBackend(Generic[T]):
    """Runs DAO operations against a live connection.

    Subclasses name their ``table``, its ``id_column`` (also the record
    attribute holding the id) and optionally a ``unique_key`` column, and
    implement ``_map_row`` and ``_to_values``. Every public method runs in its
    own transaction; any SQLAlchemy failure surfaces as ``StorageError``.
    """

    table: Table
    id_column: str
    unique_key: Optional[str] = None

    def __init__(self, connection: Connection):
        self.connection = connection

    def _map_row(self, row: RowMapping) -> T:
        raise NotImplementedError

    def _to_values(self, record: T) -> Dict[str, Any]:
        """Column values for INSERT and UPDATE, without the id column."""
        raise NotImplementedError

    def _select_all(self) -> Select:
        return select(self.table).order_by(self.table.c[self.id_column])

    @contextmanager
    def _transaction(self, operation: str, table: Optional[Table] = None) -> Iterator[Connection]:
        table_name = (table if table is not None else self.table).name
        try:
            with self.connection.begin():
                yield self.connection
        except SQLAlchemyError as e:
            logger.error("%s on %s failed: %s", operation, table_name, e)
            raise StorageError(
                f"{operation} on {table_name} failed: {e}",
                operation=operation,
                table=table_name,
            ) from e

    def _fetch_one(self, operation: str, statement: Select) -> Optional[T]:
        with self._transaction(operation) as conn:
            row = conn.execute(statement).mappings().first()
        return None if row is None else self._map_row(row)

    def _fetch_all(self, operation: str, statement: Select) -> List[T]:
        with self._transaction(operation) as conn:
            rows = conn.execute(statement).mappings().all()
        return [self._map_row(row) for row in rows]

    def _scalar(self, operation: str, statement: Select) -> Any:
        with self._transaction(operation) as conn:
            return conn.execute(statement).scalar()

    def _count(self, operation: str, *criteria) -> int:
        statement = select(func.count()).select_from(self.table).where(*criteria)
        return int(self._scalar(operation, statement) or 0)

    def _rowcount(self, operation: str, statement: Executable, table: Optional[Table] = None) -> int:
        with self._transaction(operation, table) as conn:
            return conn.execute(statement).rowcount

    def get_by_id(self, record_id: int) -> Optional[T]:
        statement = select(self.table).where(self.table.c[self.id_column] == record_id)
        return self._fetch_one("get_by_id", statement)

    def get_all(self) -> List[T]:
        return self._fetch_all("get_all", self._select_all())

    def create(self, record: T) -> bool:
        statement = insert(self.table).values(**self._to_values(record))
        with self._transaction("create") as conn:
            result = conn.execute(statement)
            if result.rowcount == 0:
                return False
            new_id = result.inserted_primary_key[0]
        setattr(record, self.id_column, new_id)
        logger.debug("Created %s row %s", self.table.name, new_id)
        return True

    def update(self, record: T) -> bool:
        record_id = getattr(record, self.id_column)
        statement = (
            update(self.table)
            .where(self.table.c[self.id_column] == record_id)
            .values(**self._to_values(record))
        )
        updated = self._rowcount("update", statement) > 0
        logger.debug("Updated %s row %s: %s", self.table.name, record_id, updated)
        return updated

    def exists_by_unique_key(self, key: str) -> bool:
        return self._count("exists_by_unique_key", self.table.c[self.unique_key] == key) > 0


class OfflineBackend(Generic[T]):
    """Answers DAO operations without storage.

    Lookups return a placeholder record built by ``_placeholder``, listings
    are empty and creates hand out random positive ids.
    """

    table: Table
    id_column: str

    def _placeholder(self, record_id: int) -> T:
        raise NotImplementedError

    @staticmethod
    def random_id() -> int:
        return random.randint(1, MAX_OFFLINE_ID)

    def get_by_id(self, record_id: int) -> Optional[T]:
        if record_id is None or record_id <= 0:
            record_id = self.random_id()
        return self._placeholder(record_id)

    def get_all(self) -> List[T]:
        return []

    def create(self, record: T) -> bool:
        setattr(record, self.id_column, self.random_id())
        logger.debug("Offline create on %s assigned id %s", self.table.name, getattr(record, self.id_column))
        return True

    def update(self, record: T) -> bool:
        raise OfflineOperationError("update", self.table.name)

    def exists_by_unique_key(self, key: str) -> bool:
        return False


class BaseDAO(Generic[T]):
    """Base class for entity DAOs.

    Args:
        connection: Shared connection from ConnectionManager, or None for
            offline mode. The DAO never closes it.
    """

    live_backend: Type[LiveBackend]
    offline_backend: Type[OfflineBackend]

    def __init__(self, connection: Optional[Connection]):
        if connection is None:
            self._backend = self.offline_backend()
        else:
            self._backend = self.live_backend(connection)

    @property
    def offline(self) -> bool:
        return isinstance(self._backend, OfflineBackend)

    def get_by_id(self, record_id: int) -> Optional[T]:
        """Return the record with this id, or None when there is none.

        Offline, a placeholder record carrying ``record_id`` is returned (a
        random positive id when ``record_id`` is not positive).
        """
        return self._backend.get_by_id(record_id)

    def get_all(self) -> List[T]:
        return self._backend.get_all()

    def create(self, record: T) -> bool:
        """Insert the record and set its id from the store.

        Returns:
            True if a row was inserted
        """
        return self._backend.create(record)

    def update(self, record: T) -> bool:
        """Replace the full row keyed by the record's id.

        Returns:
            True if at least one row changed

        Raises:
            OfflineOperationError: If the DAO has no connection
        """
        return self._backend.update(record)


class KeyedDAO(BaseDAO[T]):
    """DAO for an entity with a business key that callers keep unique."""

    def exists_by_unique_key(self, key: str) -> bool:
        """Check whether a row with this business key exists. False offline."""
        return self._backend.exists_by_unique_key(key)
