from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Mapping, Sequence

from shop_demo.errors import EmptyCart, InsufficientStock, InvalidStateTransition, PaymentDeclined, ShopError
from shop_demo.models import Cart, CartItem, Order, OrderItem, OrderStatus, Outcome, Payment, PaymentType, Shipment
from shop_demo.services import InventoryService, PaymentService, ShipmentService
from shop_demo.store import Store


class Step(ABC):
    """One reversible action; ``scope`` prefixes every log line it writes."""

    def __init__(self, store: Store, scope: str):
        self.store = store
        self.scope = scope

    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def execute(self) -> None: ...

    @abstractmethod
    def compensate(self) -> None: ...

    def run(self) -> None:
        self.store.log(f"{self.scope} STEP {self.name()}")
        self.execute()
        self.store.log(f"{self.scope} STEP {self.name()} OK")

    def run_compensation(self) -> None:
        self.store.log(f"{self.scope} COMPENSATE {self.name()}")
        self.compensate()
        self.store.log(f"{self.scope} COMPENSATE {self.name()} OK")


class ReserveStock(Step):
    def __init__(self, store: Store, order_id: str, inventory: InventoryService, sku: str, qty: int):
        super().__init__(store, f"[order={order_id}]")
        self.order_id = order_id
        self.inventory = inventory
        self.sku = sku
        self.qty = qty

    def name(self) -> str:
        return f"ReserveStock[{self.sku}]"

    def execute(self) -> None:
        if not self.inventory.reserve_across_warehouses(self.sku, self.qty, order_id=self.order_id):
            raise InsufficientStock(self.sku, self.qty)

    def compensate(self) -> None:
        self.inventory.release(self.sku, self.qty, order_id=self.order_id)


class OrderService:
    """
    Moves an order through NEW -> PLACED -> PAID -> IN_DELIVERY -> COMPLETED.

    Every operation returns an ``Outcome``; failures come back inside it,
    after the stock taken for the order has been put back where needed.
    """

    def __init__(
        self,
        store: Store,
        inventory: InventoryService,
        payments: PaymentService,
        shipments: ShipmentService,
    ):
        self.store = store
        self.inventory = inventory
        self.payments = payments
        self.shipments = shipments

    def _reserve_all(self, order_id: str, lines: Sequence[CartItem | OrderItem]) -> None:
        """Reserves every line or none: on failure the lines already taken go back and the error is re-raised."""
        completed: List[Step] = []
        try:
            for line in lines:
                step = ReserveStock(self.store, order_id, self.inventory, line.product.sku, line.quantity)
                step.run()
                completed.append(step)
        except ShopError:
            for step in reversed(completed):
                step.run_compensation()
            raise

    def _release_all(self, order: Order) -> None:
        if not order.stock_reserved:
            return
        for item in order.items:
            ReserveStock(self.store, order.id, self.inventory, item.product.sku, item.quantity).run_compensation()
        order.stock_reserved = False

    def _reject(self, order: Order, err: ShopError) -> Outcome:
        self.store.log(f"[order={order.id}] REJECTED: {err}")
        return Outcome(success=False, order=order, error=err)

    def create_order_from_cart(self, cart: Cart) -> Outcome:
        lines = cart.get_items()
        if not lines:
            err = EmptyCart(cart.id)
            self.store.log(f"[cart={cart.id}] ORDER NOT CREATED: {err}")
            return Outcome(success=False, error=err)

        order = Order(id=self.store.ids.new_id("ORD"), customer=cart.owner, created_at=self.store.now())
        self.store.log(f"[order={order.id}] CREATE START customer={cart.owner.id} lines={len(lines)}")

        try:
            self._reserve_all(order.id, lines)
        except ShopError as e:
            self.store.log(f"[order={order.id}] CREATE FAILED: {e}")
            self.store.log(f"[order={order.id}] CREATE END (failed)")
            return Outcome(success=False, error=e)

        # Unit prices are frozen here; later repricing does not touch the order.
        order.items = [
            OrderItem(product=line.product, quantity=line.quantity, unit_price=line.product.price) for line in lines
        ]
        order.stock_reserved = True
        order.move_to(OrderStatus.PLACED, "place")
        self.store.log(f"[order={order.id}] CREATE OK {order}")
        return Outcome(success=True, order=order)

    def pay_order(self, order: Order, payment_type: PaymentType, details: Mapping[str, str]) -> Outcome:
        try:
            order.ensure_can(OrderStatus.PAID, "pay")
        except InvalidStateTransition as e:
            return self._reject(order, e)

        if not order.stock_reserved:
            # a declined charge gave the stock back; take it again before charging
            try:
                self._reserve_all(order.id, order.items)
            except ShopError as e:
                return self._reject(order, e)
            order.stock_reserved = True

        payment = Payment(id=self.store.ids.new_id("PAY"), type=payment_type, amount=order.total)
        self.store.log(f"[order={order.id}] PAY START payment={payment.id} type={payment_type.value} amount={payment.amount}")
        result = self.payments.charge(payment, details)

        if not result.success:
            err = PaymentDeclined(payment.id, result.message)
            self.store.log(f"[order={order.id}] PAY FAILED: {err}")
            self._release_all(order)
            self.store.log(f"[order={order.id}] PAY END (failed)")
            return Outcome(success=False, order=order, error=err)

        order.payment = payment
        order.move_to(OrderStatus.PAID, "pay")
        # 1 point per whole currency unit
        points = int(order.total)
        order.customer.loyalty.add_points(points)
        self.store.log(f"[order={order.id}] PAY OK tx={payment.transaction_id} loyalty +{points}")
        return Outcome(success=True, order=order)

    def ship_order(self, order: Order) -> Outcome:
        try:
            order.ensure_can(OrderStatus.IN_DELIVERY, "ship")
        except InvalidStateTransition as e:
            return self._reject(order, e)

        shipment = Shipment(
            id=self.store.ids.new_id("SHP"),
            address=order.customer.profile.address,
            created_at=self.store.now(),
        )
        self.shipments.dispatch(shipment)
        order.shipment = shipment
        order.move_to(OrderStatus.IN_DELIVERY, "ship")
        self.store.log(f"[order={order.id}] SHIP OK tracking={shipment.tracking_number}")
        return Outcome(success=True, order=order)

    def complete_order(self, order: Order) -> Outcome:
        if order.status is not OrderStatus.IN_DELIVERY:
            return Outcome(success=False, order=order)
        order.move_to(OrderStatus.COMPLETED, "complete")
        self.store.log(f"[order={order.id}] COMPLETED")
        return Outcome(success=True, order=order)

    def cancel_order(self, order: Order) -> Outcome:
        try:
            order.ensure_can(OrderStatus.CANCELLED, "cancel")
        except InvalidStateTransition as e:
            return self._reject(order, e)

        order.move_to(OrderStatus.CANCELLED, "cancel")
        self._release_all(order)
        self.store.log(f"[order={order.id}] CANCELLED, stock released")
        return Outcome(success=True, order=order)
