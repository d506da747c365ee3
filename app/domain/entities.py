"""
Domain value types for the storefront.

Plain pydantic models: no persistence concerns live here (see models.py for
the ORM table). Money is always a Decimal amount in rupees, except on
GatewayOrder where the gateway works in minor units (paise).
"""
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------
# CATALOG
# ---------------------------------------------------------
class ProductSpecifications(BaseModel):
    material: str
    weight: str
    dimensions: str
    purity: Optional[str] = None
    gemstones: List[str] = []


class Product(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    id: int
    name: str
    price: Decimal = Field(..., ge=0)
    original_price: Decimal = Field(..., ge=0)
    image: str
    model_image: Optional[str] = None  # jewelry shown on a model
    category: str
    subcategory: Optional[str] = None
    rating: float = Field(4.0, ge=0, le=5)
    reviews: int = 0
    description: str = ""
    specifications: Optional[ProductSpecifications] = None
    images: List[str] = []
    in_stock: bool = True
    featured: bool = False
    tags: List[str] = []


class Subcategory(BaseModel):
    id: str
    name: str
    description: str
    image: str


class Category(BaseModel):
    id: str
    name: str
    description: str
    image: str
    subcategories: List[Subcategory] = []


# ---------------------------------------------------------
# CART & FAVORITES
# ---------------------------------------------------------
class CartLine(BaseModel):
    id: int
    name: str
    unit_price: Decimal
    original_unit_price: Decimal
    image_ref: str
    category: str
    quantity: int = Field(1, ge=1)
    rating: float = 0.0
    review_count: int = 0

    @classmethod
    def from_product(cls, product: Product) -> "CartLine":
        return cls(
            id=product.id,
            name=product.name,
            unit_price=product.price,
            original_unit_price=product.original_price,
            image_ref=product.image,
            category=product.category,
            quantity=1,
            rating=product.rating,
            review_count=product.reviews,
        )

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class CartSnapshot(BaseModel):
    lines: List[CartLine]
    total: Decimal
    line_count: int
    drawer_open: bool


class FavoriteEntry(BaseModel):
    id: int
    name: str
    unit_price: Decimal
    original_unit_price: Decimal
    image_ref: str
    category: str
    rating: float = 0.0
    review_count: int = 0
    date_added: datetime

    @classmethod
    def from_product(cls, product: Product, date_added: datetime) -> "FavoriteEntry":
        return cls(
            id=product.id,
            name=product.name,
            unit_price=product.price,
            original_unit_price=product.original_price,
            image_ref=product.image,
            category=product.category,
            rating=product.rating,
            review_count=product.reviews,
            date_added=date_added,
        )


class FavoritesSnapshot(BaseModel):
    items: List[FavoriteEntry]
    count: int
    drawer_open: bool


# ---------------------------------------------------------
# ORDERS
# ---------------------------------------------------------
class PaymentMethod(str, Enum):
    GATEWAY = "gateway"
    COD = "cod"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = {OrderStatus.COMPLETED, OrderStatus.FAILED, OrderStatus.CANCELLED}


class CustomerInfo(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""


class OrderLineItem(BaseModel):
    id: int
    name: str
    unit_price: Decimal
    quantity: int = Field(..., ge=1)
    image_ref: Optional[str] = None

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "OrderLineItem":
        return cls(
            id=line.id,
            name=line.name,
            unit_price=line.unit_price,
            quantity=line.quantity,
            image_ref=line.image_ref,
        )


class OrderRecord(BaseModel):
    order_id: str
    amount: Decimal
    currency: str = "INR"
    customer_info: CustomerInfo
    line_items: List[OrderLineItem]
    payment_method: PaymentMethod
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime
    gateway_order_id: Optional[str] = None
    payment_id: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class CODOrder(OrderRecord):
    payment_method: PaymentMethod = PaymentMethod.COD
    handling_fee: Decimal
    total_amount: Decimal
    estimated_delivery_date: date

    @classmethod
    def create(
        cls,
        order_id: str,
        amount: Decimal,
        customer_info: CustomerInfo,
        line_items: List[OrderLineItem],
        created_at: datetime,
        handling_fee: Decimal,
        delivery_days: int,
        currency: str = "INR",
    ) -> "CODOrder":
        return cls(
            order_id=order_id,
            amount=amount,
            currency=currency,
            customer_info=customer_info,
            line_items=line_items,
            status=OrderStatus.PROCESSING,
            created_at=created_at,
            handling_fee=handling_fee,
            total_amount=amount + handling_fee,
            estimated_delivery_date=(created_at + timedelta(days=delivery_days)).date(),
        )


# ---------------------------------------------------------
# PAYMENT GATEWAY
# ---------------------------------------------------------
class GatewayOrder(BaseModel):
    id: str
    entity: str = "order"
    amount: int  # minor units
    amount_paid: int = 0
    amount_due: int
    currency: str
    receipt: str
    status: str = "created"
    attempts: int = 0
    created_at: int


class CheckoutPrefill(BaseModel):
    name: str
    email: str
    contact: str


class HostedCheckoutOptions(BaseModel):
    """What the hosted checkout UI is opened with. Cosmetic apart from order_id."""
    key: str
    amount: int
    currency: str
    name: str
    description: str
    order_id: str
    prefill: CheckoutPrefill
    notes: Dict[str, str] = {}
    theme: Dict[str, str] = {}
    method: Dict[str, Any] = {}


class HostedCheckoutOutcome(BaseModel):
    dismissed: bool = False
    payment_id: Optional[str] = None
    gateway_order_id: Optional[str] = None
    signature: Optional[str] = None


class QRPayment(BaseModel):
    order_id: str
    amount: Decimal
    upi_uri: str
    qr_code_url: str


class PaymentResult(BaseModel):
    success: bool
    message: str
    order_id: Optional[str] = None
    payment_id: Optional[str] = None
    signature: Optional[str] = None
    error: Optional[str] = None
