"""Pydantic records exchanged between the DAOs and their callers."""

import random
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, List, Optional

from pydantic import BaseModel, Field, model_validator


class UserRole(str, Enum):
    """Role of a till user."""

    OWNER = "OWNER"
    STAFF = "STAFF"


class MovementType(str, Enum):
    """Kind of stock movement."""

    SALE = "SALE"
    RESTOCK = "RESTOCK"
    ADJUSTMENT = "ADJUSTMENT"
    RETURN = "RETURN"


class PaymentMethod(str, Enum):
    """Accepted payment methods."""

    CASH = "CASH"
    CARD = "CARD"
    MOBILE = "MOBILE"
    OTHER = "OTHER"


class PaymentStatus(str, Enum):
    """Payment status of a sale."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


class Supplier(BaseModel):
    """A company the shop buys stock from."""

    supplier_id: Optional[int] = Field(None, description="Store-assigned supplier ID")
    name: str = Field("", description="Supplier name, unique among suppliers")
    contact_person: str = Field("", description="Contact person")
    phone: str = Field("", description="Phone number")
    email: str = Field("", description="Email address")
    address: str = Field("", description="Postal address")


class Product(BaseModel):
    """A product on sale and its stock level."""

    product_id: Optional[int] = Field(None, description="Store-assigned product ID")
    name: str = Field("", description="Product name")
    category: str = Field("", description="Product category")
    supplier_id: Optional[int] = Field(None, description="Supplier ID (FK to suppliers)")
    price: float = Field(0.0, description="Unit price")
    quantity: int = Field(0, description="Units in stock")
    min_stock: int = Field(0, description="Low-stock threshold")
    is_active: bool = Field(True, description="Listed for sale")

    @property
    def line_total(self) -> float:
        return self.quantity * self.price

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_stock


class User(BaseModel):
    """A till user. The password is stored as handed in, already hashed."""

    user_id: Optional[int] = Field(None, description="Store-assigned user ID")
    username: str = Field("", description="Login name, unique among users")
    password: str = Field("", description="Password hash")
    role: UserRole = Field(UserRole.STAFF, description="User role")
    email: str = Field("", description="Email address")
    is_active: bool = Field(True, description="Account enabled")


class SaleItem(BaseModel):
    """One product line of a sale."""

    sale_item_id: Optional[int] = Field(None, description="Store-assigned sale item ID")
    sale_id: Optional[int] = Field(None, description="Sale ID (FK to sales)")
    product_id: int = Field(0, description="Product sold")
    product_name: str = Field("", description="Product name at sale time")
    product_category: str = Field("", description="Product category at sale time")
    quantity: int = Field(0, description="Units sold")
    unit_price: float = Field(0.0, description="Unit price at sale time")
    line_total: float = Field(0.0, description="quantity * unit_price")

    @model_validator(mode="before")
    @classmethod
    def _default_line_total(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("line_total") is None:
            data = dict(data)
            data["line_total"] = round(data.get("quantity", 0) * data.get("unit_price", 0.0), 2)
        return data

    def _recalculate(self) -> None:
        self.line_total = round(self.quantity * self.unit_price, 2)

    def update_quantity(self, quantity: int) -> None:
        self.quantity = quantity
        self._recalculate()

    def increase_quantity(self, amount: int) -> None:
        self.quantity += amount
        self._recalculate()

    def decrease_quantity(self, amount: int) -> None:
        """Decrease the quantity; ignored when it would go below zero."""
        if self.quantity >= amount:
            self.quantity -= amount
            self._recalculate()


class Sale(BaseModel):
    """A till transaction with its product lines.

    Totals follow the till rules: tax is ``TAX_RATE`` of the subtotal and the
    total never goes below zero. They are recomputed by the item and discount
    helpers, not on plain attribute assignment.
    """

    TAX_RATE: ClassVar[float] = 0.10

    sale_id: Optional[int] = Field(None, description="Store-assigned sale ID")
    sale_datetime: datetime = Field(default_factory=datetime.now, description="Sale time")
    user_id: int = Field(0, description="Cashier user ID")
    user_name: str = Field("", description="Cashier name")
    items: List[SaleItem] = Field(default_factory=list, description="Product lines")
    subtotal: float = Field(0.0, description="Sum of line totals")
    tax_amount: float = Field(0.0, description="Tax")
    discount_amount: float = Field(0.0, description="Discount")
    total_amount: float = Field(0.0, description="Amount due")
    payment_method: str = Field(PaymentMethod.CASH.value, description="Payment method")
    payment_status: str = Field(PaymentStatus.COMPLETED.value, description="Payment status")
    notes: str = Field("", description="Free-form notes")
    receipt_number: str = Field("", description="Receipt number, NAR-YYYYMMDD-NNNNN")
    is_completed: bool = Field(False, description="Sale finalised")

    @classmethod
    def new(cls, user_id: int, user_name: str) -> "Sale":
        """Start a sale for a cashier with a fresh receipt number."""
        return cls(user_id=user_id, user_name=user_name, receipt_number=generate_receipt_number())

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    def add_item(self, item: SaleItem) -> None:
        """Add a line, merging it into an existing line for the same product."""
        for existing in self.items:
            if existing.product_id == item.product_id:
                existing.increase_quantity(item.quantity)
                self.recalculate_totals()
                return
        item.sale_id = self.sale_id
        self.items.append(item)
        self.recalculate_totals()

    def remove_item(self, product_id: int) -> None:
        self.items = [item for item in self.items if item.product_id != product_id]
        self.recalculate_totals()

    def update_item_quantity(self, product_id: int, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        for item in self.items:
            if item.product_id == product_id:
                if quantity <= 0:
                    self.remove_item(product_id)
                else:
                    item.update_quantity(quantity)
                    self.recalculate_totals()
                return

    def clear_items(self) -> None:
        self.items = []
        self.recalculate_totals()

    def recalculate_totals(self) -> None:
        self.subtotal = round(sum(item.line_total for item in self.items), 2)
        self.tax_amount = round(self.subtotal * self.TAX_RATE, 2)
        self._recalculate_total()

    def _recalculate_total(self) -> None:
        self.total_amount = max(round(self.subtotal + self.tax_amount - self.discount_amount, 2), 0.0)

    def apply_discount(self, percent: float) -> None:
        """Apply a percentage discount of the subtotal (0 to 100)."""
        if 0 <= percent <= 100:
            self.discount_amount = round(self.subtotal * percent / 100, 2)
            self._recalculate_total()

    def apply_fixed_discount(self, amount: float) -> None:
        """Apply a fixed discount no larger than the subtotal."""
        if 0 <= amount <= self.subtotal:
            self.discount_amount = amount
            self._recalculate_total()


def generate_receipt_number(now: Optional[datetime] = None) -> str:
    """Return a receipt number such as ``NAR-20250314-04217``."""
    now = now or datetime.now()
    return f"NAR-{now:%Y%m%d}-{random.randint(0, 99999):05d}"


class StockMovement(BaseModel):
    """One change to a product's stock level."""

    movement_id: Optional[int] = Field(None, description="Store-assigned movement ID")
    product_id: int = Field(0, description="Product whose stock changed")
    related_id: Optional[int] = Field(None, description="Related record, e.g. the sale ID")
    movement_type: MovementType = Field(MovementType.ADJUSTMENT, description="Movement type")
    quantity_changed: int = Field(0, description="Signed change")
    previous_quantity: int = Field(0, description="Stock before the change")
    new_quantity: int = Field(0, description="Stock after the change")
    reason: str = Field("", description="Why the stock changed")
    user_id: int = Field(0, description="User who made the change")
    timestamp: datetime = Field(default_factory=datetime.now, description="When it happened")

    @model_validator(mode="before")
    @classmethod
    def _default_new_quantity(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("new_quantity") is None:
            data = dict(data)
            data["new_quantity"] = data.get("previous_quantity", 0) + data.get("quantity_changed", 0)
        return data


class LowStockAlert(BaseModel):
    """A product that fell to or below its low-stock threshold."""

    alert_id: Optional[int] = Field(None, description="Store-assigned alert ID")
    product_id: int = Field(0, description="Product running low")
    current_quantity: int = Field(0, description="Stock when raised")
    min_stock_level: int = Field(0, description="Threshold when raised")
    alert_date: datetime = Field(default_factory=datetime.now, description="When raised")
    is_resolved: bool = Field(False, description="Resolved flag")
    resolved_at: Optional[datetime] = Field(None, description="When resolved")

    def trigger(self) -> None:
        self.alert_date = datetime.now()
        self.is_resolved = False
        self.resolved_at = None

    def resolve(self) -> None:
        self.is_resolved = True
        self.resolved_at = datetime.now()


class TopProduct(BaseModel):
    """Best-selling product in a period."""

    product_id: int = Field(0, description="Product ID")
    name: str = Field("", description="Product name")
    category: str = Field("", description="Product category")
    total_sold: int = Field(0, description="Units sold")
    total_revenue: float = Field(0.0, description="Sum of line totals")


class SalesStatistics(BaseModel):
    """Aggregates over completed sales in a period."""

    total_sales: int = Field(0, description="Number of completed sales")
    total_revenue: float = Field(0.0, description="Sum of sale totals")
    average_sale: float = Field(0.0, description="Average sale total")
    total_items: int = Field(0, description="Units sold")
    top_products: List[TopProduct] = Field(default_factory=list, description="Best sellers")
