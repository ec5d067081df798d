"""Exceptions raised by the inventory data-access layer."""

from typing import Optional


class InventoryDBError(Exception):
    """Base class for every error raised by inventory_db."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DatabaseConnectionError(InventoryDBError, ConnectionError):
    """The store could not be reached or its driver could not be loaded.

    Args:
        message: Human readable description
        url: Connection URL with the password hidden
        stage: Where it failed ("engine" while loading the dialect/driver,
            "connect" while opening the connection)
    """

    def __init__(self, message: str, url: Optional[str] = None, stage: str = "connect"):
        super().__init__(message)
        self.url = url
        self.stage = stage

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} (stage={self.stage}, url={self.url})"
        return f"{self.message} (stage={self.stage})"


class StorageError(InventoryDBError):
    """A statement failed against a live connection.

    Args:
        message: Human readable description
        operation: DAO operation that issued the statement (e.g. "create")
        table: Table the statement targeted
    """

    def __init__(self, message: str, operation: Optional[str] = None, table: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
        self.table = table


class OfflineOperationError(InventoryDBError):
    """A live-only DAO operation was called without a connection."""

    def __init__(self, operation: str, table: Optional[str] = None):
        super().__init__(f"'{operation}' requires a live database connection")
        self.operation = operation
        self.table = table
