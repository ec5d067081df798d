"""Debug utilities for database operations."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from sqlalchemy import inspect, text

if TYPE_CHECKING:
    from inventory_db.connection import ConnectionManager


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled.

    Returns:
        True if DEBUG environment variable is set to 'true', '1' or 'yes'
    """
    debug = os.getenv("DEBUG", "false").lower()
    return debug in ("true", "1", "yes")


def probe_connection(manager: ConnectionManager) -> bool:
    """Run ``SELECT 1`` on the shared connection.

    Args:
        manager: Connection manager to probe

    Returns:
        True if the store answered, False otherwise
    """
    try:
        connection = manager.get_connection()
        with connection.begin():
            connection.execute(text("SELECT 1")).fetchone()
        if is_debug_enabled():
            print("✅ Inventory database connection: OK")
        return True
    except Exception as e:
        if is_debug_enabled():
            print(f"❌ Inventory database connection failed: {e}")
        return False


def print_database_status(manager: ConnectionManager) -> None:
    """Print status of the inventory database connection."""
    if not is_debug_enabled():
        return

    print("\n" + "=" * 80)
    print("🗄️  DATABASE CONNECTION STATUS")
    print("=" * 80)
    print(f"URL:        {manager.display_url}")
    probe_connection(manager)
    print(f"Connected:  {manager.is_connected()}")
    print("=" * 80 + "\n")


def print_tables(manager: ConnectionManager) -> None:
    """Print the tables visible on the shared connection."""
    if not is_debug_enabled():
        return

    try:
        connection = manager.get_connection()
        with connection.begin():
            tables = sorted(inspect(connection).get_table_names())

        print("\n" + "=" * 80)
        print("📊 INVENTORY TABLES")
        print("=" * 80)
        if tables:
            for table in tables:
                print(f"  ✓ {table}")
        else:
            print("  (no tables found)")
        print("=" * 80 + "\n")
    except Exception as e:
        print(f"❌ Error listing tables: {e}")
