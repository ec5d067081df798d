"""Initialize database tables."""

from inventory_db import ConnectionManager, print_tables, setup_logging
from inventory_db.sql import create_all_tables

if __name__ == "__main__":
    setup_logging()
    print("Creating all database tables...")
    with ConnectionManager() as manager:
        try:
            create_all_tables(manager.get_connection())
            print("✅ All tables created successfully!")
            print_tables(manager)
        except Exception as e:
            print(f"❌ Error creating tables: {e}")
            raise
