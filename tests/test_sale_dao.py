"""Tests for SaleDAO."""

from datetime import date, datetime, timedelta

import pytest

from inventory_db import OfflineOperationError, PaymentStatus, Product, Sale, SaleDAO, SaleItem


@pytest.fixture
def products(product_dao):
    injera = Product(name="Injera", category="Bakery", price=2.5, quantity=100, min_stock=10)
    coffee = Product(name="Coffee 250g", category="Groceries", price=4.0, quantity=50, min_stock=5)
    product_dao.create(injera)
    product_dao.create(coffee)
    return injera, coffee


def make_sale(*lines, user_id=1, when=None, completed=True) -> Sale:
    sale = Sale.new(user_id=user_id, user_name=f"user{user_id}")
    if when is not None:
        sale.sale_datetime = when
    for product, quantity in lines:
        sale.add_item(
            SaleItem(
                product_id=product.product_id,
                product_name=product.name,
                product_category=product.category,
                quantity=quantity,
                unit_price=product.price,
            )
        )
    sale.is_completed = completed
    return sale


def test_create_stores_sale_and_items(sale_dao, products):
    injera, coffee = products
    sale = make_sale((injera, 4), (coffee, 1))

    assert sale_dao.create(sale) is True
    assert sale.sale_id > 0
    assert all(item.sale_id == sale.sale_id for item in sale.items)
    assert len({item.sale_item_id for item in sale.items}) == 2

    stored = sale_dao.get_by_id(sale.sale_id)
    assert stored == sale
    assert stored.subtotal == pytest.approx(14.0)
    assert stored.tax_amount == pytest.approx(1.4)
    assert stored.total_amount == pytest.approx(15.4)
    assert stored.total_items == 5


def test_get_by_id_missing_returns_none(sale_dao):
    assert sale_dao.get_by_id(404) is None


def test_receipt_number_is_the_unique_key(sale_dao, products):
    sale = make_sale((products[0], 1))
    sale_dao.create(sale)
    assert sale_dao.exists_by_unique_key(sale.receipt_number) is True
    assert sale_dao.exists_by_unique_key("NAR-19990101-00000") is False


def test_get_all_newest_first_with_items(sale_dao, products):
    injera, coffee = products
    now = datetime.now()
    older = make_sale((injera, 1), when=now - timedelta(hours=2))
    newer = make_sale((coffee, 2), (injera, 1), when=now)
    sale_dao.create(older)
    sale_dao.create(newer)

    sales = sale_dao.get_all()
    assert [s.sale_id for s in sales] == [newer.sale_id, older.sale_id]
    assert [len(s.items) for s in sales] == [2, 1]


def test_date_range_includes_both_days(sale_dao, products):
    injera = products[0]
    today = date.today()
    noon = datetime.combine(today, datetime.min.time()).replace(hour=12)
    this_morning = make_sale((injera, 1), when=noon - timedelta(hours=3))
    two_days_ago = make_sale((injera, 1), when=noon - timedelta(days=2))
    last_week = make_sale((injera, 1), when=noon - timedelta(days=7))
    for sale in (this_morning, two_days_ago, last_week):
        sale_dao.create(sale)

    found = sale_dao.get_by_date_range(today - timedelta(days=2), today)
    assert [s.sale_id for s in found] == [this_morning.sale_id, two_days_ago.sale_id]
    assert [s.sale_id for s in sale_dao.get_today()] == [this_morning.sale_id]


def test_get_by_user(sale_dao, products):
    injera = products[0]
    mine = make_sale((injera, 1), user_id=1)
    theirs = make_sale((injera, 1), user_id=2)
    sale_dao.create(mine)
    sale_dao.create(theirs)

    assert [s.sale_id for s in sale_dao.get_by_user(2)] == [theirs.sale_id]


def test_total_sales_amount_counts_completed_only(sale_dao, products):
    injera, coffee = products
    sale_dao.create(make_sale((injera, 4), (coffee, 1)))
    sale_dao.create(make_sale((coffee, 2)))
    sale_dao.create(make_sale((injera, 10), completed=False))

    today = date.today()
    assert sale_dao.total_sales_amount(today, today) == pytest.approx(15.4 + 8.8)
    assert sale_dao.total_sales_amount(today - timedelta(days=9), today - timedelta(days=1)) == 0.0


def test_sales_statistics(sale_dao, products):
    injera, coffee = products
    sale_dao.create(make_sale((injera, 4), (coffee, 1)))
    sale_dao.create(make_sale((coffee, 2)))
    sale_dao.create(make_sale((injera, 10), completed=False))

    today = date.today()
    stats = sale_dao.get_sales_statistics(today, today)

    assert stats.total_sales == 2
    assert stats.total_revenue == pytest.approx(24.2)
    assert stats.average_sale == pytest.approx(12.1)
    assert stats.total_items == 7
    assert [(p.name, p.total_sold) for p in stats.top_products] == [("Injera", 4), ("Coffee 250g", 3)]
    assert stats.top_products[0].total_revenue == pytest.approx(10.0)
    assert stats.top_products[1].total_revenue == pytest.approx(12.0)


def test_sales_statistics_for_empty_period(sale_dao):
    stats = sale_dao.get_sales_statistics(date(2000, 1, 1), date(2000, 1, 31))
    assert stats.total_sales == 0
    assert stats.total_revenue == 0.0
    assert stats.total_items == 0
    assert stats.top_products == []


def test_update_status(sale_dao, products):
    sale = make_sale((products[0], 1), completed=True)
    sale_dao.create(sale)

    assert sale_dao.update_status(sale.sale_id, PaymentStatus.REFUNDED.value, False) is True
    stored = sale_dao.get_by_id(sale.sale_id)
    assert stored.payment_status == "REFUNDED"
    assert stored.is_completed is False

    assert sale_dao.update_status(9999, PaymentStatus.CANCELLED.value, False) is False


def test_update_rewrites_sale_row_only(sale_dao, products):
    sale = make_sale((products[0], 2))
    sale_dao.create(sale)

    sale.notes = "Customer paid exact change"
    sale.clear_items()
    assert sale_dao.update(sale) is True

    stored = sale_dao.get_by_id(sale.sale_id)
    assert stored.notes == "Customer paid exact change"
    assert len(stored.items) == 1


def test_offline_mode():
    dao = SaleDAO(None)

    placeholder = dao.get_by_id(5)
    assert placeholder.sale_id == 5
    assert placeholder.user_name == "TestUser"

    sale = Sale.new(user_id=1, user_name="cashier")
    sale.add_item(SaleItem(product_id=1, quantity=1, unit_price=2.0))
    sale.add_item(SaleItem(product_id=2, quantity=3, unit_price=1.0))
    assert dao.create(sale) is True
    assert sale.sale_id > 0
    assert [item.sale_item_id for item in sale.items] == [1, 2]
    assert all(item.sale_id == sale.sale_id for item in sale.items)

    today = date.today()
    assert dao.get_all() == []
    assert dao.get_today() == []
    assert dao.get_by_user(1) == []
    assert dao.total_sales_amount(today, today) == 0.0
    assert dao.get_sales_statistics(today, today).total_sales == 0
    assert dao.update_status(sale.sale_id, "REFUNDED", False) is True
    assert dao.exists_by_unique_key(sale.receipt_number) is False
    with pytest.raises(OfflineOperationError):
        dao.update(sale)
