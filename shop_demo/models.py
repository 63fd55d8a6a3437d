from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Dict, FrozenSet, List, Optional

from shop_demo.errors import InvalidStateTransition, ShopError

if TYPE_CHECKING:
    from shop_demo.orders import OrderService


class Role(Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class OrderStatus(Enum):
    NEW = "NEW"
    PLACED = "PLACED"
    PAID = "PAID"
    IN_DELIVERY = "IN_DELIVERY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentType(Enum):
    CARD = "CARD"
    E_WALLET = "E_WALLET"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class ShipmentStatus(Enum):
    PENDING = "PENDING"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    RETURNED = "RETURNED"


ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.NEW: frozenset({OrderStatus.PLACED, OrderStatus.CANCELLED}),
    OrderStatus.PLACED: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.IN_DELIVERY}),
    OrderStatus.IN_DELIVERY: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


# --- people ---------------------------------------------------------------


@dataclass(slots=True)
class Profile:
    """Contact data shared by customers and administrators."""

    name: str
    email: str
    address: str
    phone: str

    def update(self, name: str, address: str, phone: str) -> None:
        self.name = name
        self.address = address
        self.phone = phone


@dataclass(slots=True)
class LoyaltyAccount:
    points: int = 0

    def add_points(self, points: int) -> None:
        if points < 0:
            raise ValueError("points must be >= 0")
        self.points += points

    def redeem_points(self, points: int) -> bool:
        if self.points >= points:
            self.points -= points
            return True
        return False


@dataclass(slots=True, eq=False)
class Customer:
    id: str
    profile: Profile
    orders: List[Order] = field(default_factory=list, repr=False)
    loyalty: LoyaltyAccount = field(default_factory=LoyaltyAccount)
    cart: Cart = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.cart = Cart(id=f"CART-{self.id}", owner=self)

    @property
    def role(self) -> Role:
        return Role.CUSTOMER

    def place_order(self, order_service: OrderService) -> Outcome:
        outcome = order_service.create_order_from_cart(self.cart)
        if outcome.success and outcome.order is not None:
            self.orders.append(outcome.order)
            self.cart.clear()
        return outcome


@dataclass(slots=True, eq=False)
class Administrator:
    id: str
    profile: Profile
    actions: List[AdminActionLog] = field(default_factory=list, repr=False)

    @property
    def role(self) -> Role:
        return Role.ADMIN


@dataclass(slots=True)
class AdminActionLog:
    id: str
    admin: Administrator = field(repr=False)
    action: str
    timestamp: datetime

    def __str__(self) -> str:
        return f"[{self.timestamp.isoformat()}] {self.admin.profile.name}: {self.action}"


# --- catalog --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Category:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Product:
    id: str
    name: str
    price: Decimal
    sku: str
    category: Optional[Category] = None
    digital: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(f"Product {self.sku} price must be >= 0, got {self.price}")

    def __str__(self) -> str:
        return f"{self.name} ({self.sku}) {self.price}"


# --- cart -----------------------------------------------------------------


@dataclass(slots=True)
class PromoCode:
    code: str
    discount_percent: Decimal
    valid_until: datetime
    usage_left: int

    def is_valid(self, now: datetime) -> bool:
        return now < self.valid_until and self.usage_left > 0

    def apply(self, total: Decimal, now: datetime) -> Decimal:
        """Returns the discount for ``total`` and consumes one use."""
        if not self.is_valid(now):
            return Decimal("0.00")
        self.usage_left -= 1
        return (total * self.discount_percent / Decimal(100)).quantize(Decimal("0.01"))


@dataclass(slots=True)
class CartItem:
    product: Product
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity


@dataclass(slots=True, eq=False)
class Cart:
    id: str
    owner: Customer = field(repr=False)
    items: Dict[str, CartItem] = field(default_factory=dict)  # key = sku
    promo: Optional[PromoCode] = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    def add_item(self, product: Product, qty: int) -> None:
        if qty <= 0:
            raise ValueError("qty must be > 0")
        item = self.items.get(product.sku)
        if item is None:
            self.items[product.sku] = CartItem(product=product, quantity=qty)
        else:
            item.quantity += qty

    def remove_item(self, sku: str) -> None:
        self.items.pop(sku, None)

    def get_items(self) -> List[CartItem]:
        return [CartItem(product=i.product, quantity=i.quantity) for i in self.items.values()]

    def apply_promo(self, promo: Optional[PromoCode], now: datetime) -> bool:
        if promo is not None and promo.is_valid(now):
            self.promo = promo
            return True
        return False

    def calculate_total(self, now: datetime) -> Decimal:
        total = sum((i.subtotal for i in self.items.values()), Decimal("0.00"))
        if self.promo is not None and self.promo.is_valid(now):
            total -= self.promo.apply(total, now)
        return total

    def clear(self) -> None:
        self.items.clear()
        self.promo = None


# --- order ----------------------------------------------------------------


@dataclass(slots=True)
class Payment:
    id: str
    type: PaymentType
    amount: Decimal
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None


@dataclass(slots=True)
class Shipment:
    id: str
    address: str
    created_at: datetime
    status: ShipmentStatus = ShipmentStatus.PENDING
    courier_name: Optional[str] = None
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class OrderItem:
    product: Product
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(slots=True, eq=False)
class Order:
    """
    Snapshot of a cart at placement time.

    Customer and items are fixed once the order is built; status, payment and
    shipment are moved only by ``OrderService``.
    """

    id: str
    customer: Customer = field(repr=False)
    created_at: datetime
    items: List[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.NEW
    payment: Optional[Payment] = None
    shipment: Optional[Shipment] = None
    # True while the warehouses hold this order's lines
    stock_reserved: bool = False

    @property
    def total(self) -> Decimal:
        return sum((i.subtotal for i in self.items), Decimal("0.00"))

    def can_move_to(self, status: OrderStatus) -> bool:
        return status in ORDER_TRANSITIONS[self.status]

    def ensure_can(self, status: OrderStatus, action: str) -> None:
        if not self.can_move_to(status):
            raise InvalidStateTransition(self.id, self.status.value, action)

    def move_to(self, status: OrderStatus, action: str) -> None:
        self.ensure_can(status, action)
        self.status = status

    def __str__(self) -> str:
        return f"Order{{{self.id}, status={self.status.value}, total={self.total}, items={len(self.items)}}}"


# --- collaborator results ---------------------------------------------------


@dataclass(frozen=True, slots=True)
class PaymentResult:
    success: bool
    transaction_id: Optional[str]
    message: str


@dataclass(frozen=True, slots=True)
class RefundResult:
    success: bool
    message: str
    error: Optional[ShopError] = None


@dataclass(slots=True)
class Outcome:
    """What an ``OrderService`` operation reports back to its caller."""

    success: bool
    order: Optional[Order] = None
    error: Optional[ShopError] = None

    def __bool__(self) -> bool:
        return self.success
