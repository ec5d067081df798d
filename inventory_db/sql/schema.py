"""Schema initialization utilities."""

from sqlalchemy import Connection

from inventory_db.sql.models import Base


def create_all_tables(connection: Connection) -> None:
    """Create all tables that do not exist yet.

    Args:
        connection: Shared connection from ConnectionManager

    Example:
        ```python
        from inventory_db import ConnectionManager
        from inventory_db.sql import create_all_tables

        manager = ConnectionManager()
        create_all_tables(manager.get_connection())
        ```
    """
    with connection.begin():
        Base.metadata.create_all(bind=connection)


def drop_all_tables(connection: Connection) -> None:
    """Drop all tables from the database.

    Warning: This will delete all data!

    Args:
        connection: Shared connection from ConnectionManager
    """
    with connection.begin():
        Base.metadata.drop_all(bind=connection)


def recreate_all_tables(connection: Connection) -> None:
    """Drop and recreate all tables.

    Warning: This will delete all data!
    """
    drop_all_tables(connection)
    create_all_tables(connection)
