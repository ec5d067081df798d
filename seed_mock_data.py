"""Seed the database with mock data for local development.

Safe to run more than once: suppliers, products and users are looked up by
their business key and only created when missing.

- Creates a few demo suppliers
- Creates demo products with stock, some of them below their threshold
- Creates an owner and a staff account

Run:
    python seed_mock_data.py

Prereqs:
- Database reachable through the INVENTORY_DB_* settings
- Tables created (python init_db.py)
"""

from __future__ import annotations

import logging
from typing import Dict

from inventory_db import (
    ConnectionManager,
    Product,
    ProductDAO,
    Supplier,
    SupplierDAO,
    User,
    UserDAO,
    UserRole,
    setup_logging,
)

logger = logging.getLogger("inventory_db.seed")

# Placeholder hashes; real ones come from the login layer.
DEMO_PASSWORD_HASH = "seeded-password-hash"


def seed_suppliers(suppliers: SupplierDAO) -> Dict[str, int]:
    rows = [
        Supplier(
            name="Addis Beverages",
            contact_person="Hana Tesfaye",
            phone="+251-11-555-0101",
            email="orders@addisbev.example",
            address="Bole Road, Addis Ababa",
        ),
        Supplier(
            name="Merkato Wholesale",
            contact_person="Dawit Alemu",
            phone="+251-11-555-0202",
            email="sales@merkato.example",
            address="Merkato, Addis Ababa",
        ),
        Supplier(
            name="Highland Dairy",
            contact_person="Sara Bekele",
            phone="+251-11-555-0303",
            email="supply@highlanddairy.example",
            address="Sululta",
        ),
    ]

    for supplier in rows:
        if suppliers.exists_by_unique_key(supplier.name):
            continue
        suppliers.create(supplier)
        logger.info("Seeded supplier %s", supplier.name)

    return {s.name: s.supplier_id for s in suppliers.get_all()}


def seed_products(products: ProductDAO, supplier_ids: Dict[str, int]) -> None:
    rows = [
        ("Bottled Water 1L", "Beverages", "Addis Beverages", 0.50, 120, 24),
        ("Mango Juice 500ml", "Beverages", "Addis Beverages", 1.20, 40, 12),
        ("Cola 330ml", "Beverages", "Addis Beverages", 0.80, 8, 12),
        ("Teff Flour 5kg", "Groceries", "Merkato Wholesale", 9.75, 15, 5),
        ("Berbere 250g", "Groceries", "Merkato Wholesale", 3.40, 3, 6),
        ("Lentils 1kg", "Groceries", "Merkato Wholesale", 2.10, 30, 10),
        ("Fresh Milk 1L", "Dairy", "Highland Dairy", 1.10, 25, 10),
        ("Butter 250g", "Dairy", "Highland Dairy", 2.60, 4, 5),
        ("Yogurt 500g", "Dairy", "Highland Dairy", 1.50, 18, 6),
    ]

    for name, category, supplier, price, quantity, min_stock in rows:
        if products.exists_by_unique_key(name):
            continue
        products.create(
            Product(
                name=name,
                category=category,
                supplier_id=supplier_ids.get(supplier),
                price=price,
                quantity=quantity,
                min_stock=min_stock,
            )
        )
        logger.info("Seeded product %s", name)


def seed_users(users: UserDAO) -> None:
    rows = [
        User(username="owner", password=DEMO_PASSWORD_HASH, role=UserRole.OWNER, email="owner@nardos.example"),
        User(username="cashier", password=DEMO_PASSWORD_HASH, role=UserRole.STAFF, email="cashier@nardos.example"),
    ]

    for user in rows:
        if users.exists_by_unique_key(user.username):
            continue
        users.create(user)
        logger.info("Seeded user %s", user.username)


def main() -> None:
    setup_logging()
    with ConnectionManager() as manager:
        connection = manager.get_connection()
        supplier_ids = seed_suppliers(SupplierDAO(connection))
        seed_products(ProductDAO(connection), supplier_ids)
        seed_users(UserDAO(connection))
        print("✅ Seeded mock data for the inventory store")


if __name__ == "__main__":
    main()
