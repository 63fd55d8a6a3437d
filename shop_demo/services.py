from __future__ import annotations

from datetime import timedelta
from typing import Dict, Mapping, Optional

from shop_demo.errors import AlreadyRefunded, NoTransaction
from shop_demo.gateways import CourierIntegration, PaymentGateway
from shop_demo.models import Payment, PaymentResult, PaymentStatus, RefundResult, Shipment, ShipmentStatus
from shop_demo.store import Store
from shop_demo.warehouse import Warehouse

ESTIMATED_DELIVERY = timedelta(days=3)


def _tag(order_id: Optional[str]) -> str:
    return f"[order={order_id}] " if order_id else ""


class InventoryService:
    def __init__(self, store: Store):
        self.store = store

    @property
    def warehouses(self) -> Dict[str, Warehouse]:
        return self.store.warehouses

    def add_warehouse(self, warehouse: Warehouse) -> None:
        self.store.warehouses[warehouse.name] = warehouse

    def reserve_across_warehouses(self, sku: str, qty: int, order_id: Optional[str] = None) -> bool:
        # Whole quantity from a single warehouse; never split across several.
        for warehouse in self.warehouses.values():
            if warehouse.reserve(sku, qty):
                self.store.log(f"{_tag(order_id)}inventory reserved: {sku} qty={qty} in {warehouse}")
                return True
        self.store.log(f"{_tag(order_id)}inventory: not enough stock for {sku} qty={qty}")
        return False

    def release(self, sku: str, qty: int, order_id: Optional[str] = None) -> None:
        # Goes back to the first warehouse, whichever one it was taken from.
        for warehouse in self.warehouses.values():
            warehouse.release(sku, qty)
            self.store.log(f"{_tag(order_id)}inventory released: {sku} qty={qty} to {warehouse}")
            return

    def total_stock(self, sku: str) -> int:
        return sum(w.get_stock(sku) for w in self.warehouses.values())


class PaymentService:
    def __init__(self, store: Store, gateway: PaymentGateway):
        self.store = store
        self.gateway = gateway

    def charge(self, payment: Payment, details: Mapping[str, str]) -> PaymentResult:
        result = self.gateway.charge(payment, details)
        payment.transaction_id = result.transaction_id
        if result.success:
            payment.status = PaymentStatus.SUCCESS
            payment.paid_at = self.store.now()
            self.store.log(f"payment {payment.id} charged amount={payment.amount} tx={result.transaction_id}")
        else:
            payment.status = PaymentStatus.FAILED
            self.store.log(f"payment {payment.id} failed amount={payment.amount}: {result.message}")
        return result

    def refund(self, payment: Payment) -> RefundResult:
        if payment.transaction_id is None or payment.status is PaymentStatus.FAILED:
            err = NoTransaction(payment.id)
            self.store.log(f"refund rejected: {err}")
            return RefundResult(success=False, message=str(err), error=err)
        if payment.status is PaymentStatus.REFUNDED:
            err = AlreadyRefunded(payment.id)
            self.store.log(f"refund rejected: {err}")
            return RefundResult(success=False, message=str(err), error=err)
        payment.status = PaymentStatus.REFUNDED
        self.store.log(f"payment {payment.id} refunded amount={payment.amount} tx={payment.transaction_id}")
        return self.gateway.refund(payment.transaction_id, payment.amount)


class ShipmentService:
    def __init__(self, store: Store, courier: CourierIntegration):
        self.store = store
        self.courier = courier

    def dispatch(self, shipment: Shipment) -> None:
        shipment.tracking_number = self.courier.create_shipment(shipment)
        shipment.courier_name = self.courier.name
        shipment.status = ShipmentStatus.IN_TRANSIT
        shipment.estimated_delivery = shipment.created_at + ESTIMATED_DELIVERY
        self.store.log(
            f"shipment {shipment.id} dispatched via {shipment.courier_name}: "
            f"tracking={shipment.tracking_number} eta={shipment.estimated_delivery.isoformat()}"
        )

    def track(self, tracking_number: str) -> ShipmentStatus:
        return self.courier.get_status(tracking_number)
