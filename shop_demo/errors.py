"""Error taxonomy for shop_demo.

Orchestration steps raise these; ``OrderService`` catches them at its boundary
and hands them back inside an ``Outcome``.
"""

from __future__ import annotations


class ShopError(Exception):
    """Base exception for all shop_demo errors."""

    pass


class EmptyCart(ShopError):
    def __init__(self, cart_id: str):
        self.cart_id = cart_id
        super().__init__(f"Cart {cart_id} is empty")


class InsufficientStock(ShopError):
    def __init__(self, sku: str, qty: int):
        self.sku = sku
        self.qty = qty
        super().__init__(f"Insufficient stock for {sku}: no warehouse has qty={qty}")


class PaymentDeclined(ShopError):
    def __init__(self, payment_id: str, reason: str):
        self.payment_id = payment_id
        self.reason = reason
        super().__init__(f"Payment {payment_id} declined: {reason}")


class NoTransaction(ShopError):
    def __init__(self, payment_id: str):
        self.payment_id = payment_id
        super().__init__(f"Payment {payment_id} was never charged, nothing to refund")


class InvalidStateTransition(ShopError):
    def __init__(self, order_id: str, status: str, action: str):
        self.order_id = order_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} order {order_id} in status {status}")


class DuplicateSku(ShopError):
    """Raised when a second product is registered under an existing SKU."""

    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f"SKU {sku} already exists in catalog")


class AlreadyRefunded(ShopError):
    def __init__(self, payment_id: str):
        self.payment_id = payment_id
        super().__init__(f"Payment {payment_id} is already refunded")
