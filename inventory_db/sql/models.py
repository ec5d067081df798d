"""SQLAlchemy models for the inventory schema.

The DAOs issue Core statements against ``Model.__table__``; these classes are
the single definition of table and column names.
"""

from datetime import datetime
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


def _money() -> Numeric:
    return Numeric(10, 2, asdecimal=False)


class SupplierModel(Base):
    """Supplier model - companies products are bought from."""

    __tablename__ = "suppliers"

    supplier_id = Column(Integer, primary_key=True, autoincrement=True, comment="Supplier ID")
    # Uniqueness is checked by callers through SupplierDAO.exists_by_unique_key
    name = Column(Text, nullable=False, comment="Supplier name")
    contact_person = Column(Text, nullable=True, comment="Contact person")
    phone = Column(Text, nullable=True, comment="Phone number")
    email = Column(Text, nullable=True, comment="Email address")
    address = Column(Text, nullable=True, comment="Postal address")

    def __repr__(self):
        return f"<SupplierModel(supplier_id={self.supplier_id}, name={self.name})>"


class ProductModel(Base):
    """Product model - items on sale and their stock level."""

    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True, autoincrement=True, comment="Product ID")
    name = Column(Text, nullable=False, comment="Product name")
    category = Column(Text, nullable=True, comment="Product category")
    supplier_id = Column(
        Integer,
        ForeignKey("suppliers.supplier_id", ondelete="SET NULL"),
        nullable=True,
        comment="Which supplier delivers the product",
    )
    price = Column(_money(), nullable=False, default=0, comment="Unit price")
    quantity = Column(Integer, nullable=False, default=0, comment="Units in stock")
    min_stock = Column(Integer, nullable=False, default=0, comment="Low-stock threshold")
    is_active = Column(Boolean, nullable=False, default=True, comment="Listed for sale")

    def __repr__(self):
        return f"<ProductModel(product_id={self.product_id}, name={self.name})>"


class UserModel(Base):
    """User model - staff accounts operating the till."""

    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True, comment="User ID")
    username = Column(String(100), nullable=False, comment="Login name")
    password = Column(Text, nullable=False, comment="Password hash")
    role = Column(String(20), nullable=False, default="STAFF", comment="OWNER or STAFF")
    email = Column(Text, nullable=True, comment="Email address")
    is_active = Column(Boolean, nullable=False, default=True, comment="Account enabled")

    def __repr__(self):
        return f"<UserModel(user_id={self.user_id}, username={self.username})>"


class SaleModel(Base):
    """Sale model - one till transaction."""

    __tablename__ = "sales"

    sale_id = Column(Integer, primary_key=True, autoincrement=True, comment="Sale ID")
    sale_datetime = Column(DateTime, nullable=False, default=datetime.utcnow, comment="Sale time")
    user_id = Column(Integer, nullable=False, comment="Cashier user ID")
    user_name = Column(Text, nullable=True, comment="Cashier name at sale time")
    subtotal = Column(_money(), nullable=False, default=0, comment="Sum of line totals")
    tax_amount = Column(_money(), nullable=False, default=0, comment="Tax")
    discount_amount = Column(_money(), nullable=False, default=0, comment="Discount")
    total_amount = Column(_money(), nullable=False, default=0, comment="Amount due")
    payment_method = Column(String(20), nullable=False, default="CASH", comment="Payment method")
    payment_status = Column(String(20), nullable=False, default="COMPLETED", comment="Payment status")
    notes = Column(Text, nullable=True, comment="Free-form notes")
    receipt_number = Column(String(32), nullable=True, comment="Printed receipt number")
    is_completed = Column(Boolean, nullable=False, default=False, comment="Sale finalised")

    def __repr__(self):
        return f"<SaleModel(sale_id={self.sale_id}, receipt_number={self.receipt_number})>"


class SaleItemModel(Base):
    """SaleItem model - one product line of a sale."""

    __tablename__ = "sale_items"

    sale_item_id = Column(Integer, primary_key=True, autoincrement=True, comment="Sale item ID")
    sale_id = Column(
        Integer,
        ForeignKey("sales.sale_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Sale the line belongs to",
    )
    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False, comment="Product sold")
    product_name = Column(Text, nullable=True, comment="Product name at sale time")
    product_category = Column(Text, nullable=True, comment="Product category at sale time")
    quantity = Column(Integer, nullable=False, comment="Units sold")
    unit_price = Column(_money(), nullable=False, comment="Unit price at sale time")
    line_total = Column(_money(), nullable=False, comment="quantity * unit_price")

    def __repr__(self):
        return f"<SaleItemModel(sale_item_id={self.sale_item_id}, sale_id={self.sale_id})>"


class StockMovementModel(Base):
    """StockMovement model - ledger of stock level changes."""

    __tablename__ = "stock_movements"

    movement_id = Column(Integer, primary_key=True, autoincrement=True, comment="Movement ID")
    product_id = Column(
        Integer,
        ForeignKey("products.product_id"),
        nullable=False,
        index=True,
        comment="Product whose stock changed",
    )
    related_id = Column(Integer, nullable=True, comment="Related record, e.g. the sale ID")
    movement_type = Column(String(20), nullable=False, comment="SALE, RESTOCK, ADJUSTMENT or RETURN")
    quantity_changed = Column(Integer, nullable=False, comment="Signed change")
    previous_quantity = Column(Integer, nullable=False, comment="Stock before the change")
    new_quantity = Column(Integer, nullable=False, comment="Stock after the change")
    reason = Column(Text, nullable=True, comment="Why the stock changed")
    user_id = Column(Integer, nullable=True, comment="User who made the change")
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow, comment="When it happened")

    def __repr__(self):
        return f"<StockMovementModel(movement_id={self.movement_id}, product_id={self.product_id})>"


class LowStockAlertModel(Base):
    """LowStockAlert model - raised when a product falls to its threshold."""

    __tablename__ = "low_stock_alerts"

    alert_id = Column(Integer, primary_key=True, autoincrement=True, comment="Alert ID")
    product_id = Column(
        Integer,
        ForeignKey("products.product_id"),
        nullable=False,
        index=True,
        comment="Product running low",
    )
    current_quantity = Column(Integer, nullable=False, comment="Stock when raised")
    min_stock_level = Column(Integer, nullable=False, comment="Threshold when raised")
    alert_date = Column(DateTime, nullable=False, default=datetime.utcnow, comment="When raised")
    is_resolved = Column(Boolean, nullable=False, default=False, comment="Resolved flag")
    resolved_at = Column(DateTime, nullable=True, comment="When resolved")

    def __repr__(self):
        return f"<LowStockAlertModel(alert_id={self.alert_id}, product_id={self.product_id})>"


class AuditLogModel(Base):
    """AuditLog model - who changed what."""

    __tablename__ = "audit_log"

    audit_id = Column(Integer, primary_key=True, autoincrement=True, comment="Audit entry ID")
    user_id = Column(Integer, nullable=False, comment="Acting user")
    action = Column(String(50), nullable=False, comment="create, update, ...")
    table_name = Column(String(50), nullable=False, comment="Affected table")
    record_id = Column(Integer, nullable=True, comment="Affected row")
    old_values = Column(Text, nullable=True, comment="Values before")
    new_values = Column(Text, nullable=True, comment="Values after")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, comment="Entry time")

    def __repr__(self):
        return f"<AuditLogModel(audit_id={self.audit_id}, action={self.action})>"
