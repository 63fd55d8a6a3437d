from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import List, Optional

from shop_demo.config import ShopSettings, configure_logging
from shop_demo.factories import DigitalProductFactory, PhysicalProductFactory
from shop_demo.gateways import MockCourierIntegration, MockPaymentGateway
from shop_demo.models import Customer, OrderStatus, PaymentType, Product, PromoCode
from shop_demo.orders import OrderService
from shop_demo.services import InventoryService, PaymentService, ShipmentService
from shop_demo.store import Store


@dataclass(slots=True)
class Shop:
    store: Store
    orders: OrderService
    alice: Customer
    phone: Product
    ebook: Product
    promo: PromoCode


def seed(settings: ShopSettings, store: Optional[Store] = None) -> Shop:
    store = store or Store()

    electronics = store.add_category("Electronics")
    phone = store.add_product(
        PhysicalProductFactory(store.ids),
        name="Smartphone X",
        description="Flagship smartphone",
        price=Decimal("450.00"),
        sku="SMX-001",
        category=electronics,
    )
    ebook = store.add_product(
        DigitalProductFactory(store.ids),
        name="Ebook: Java Patterns",
        price=Decimal("19.99"),
        sku="EB-001",
        category=electronics,
    )

    # digital goods are counted like physical ones
    store.add_warehouse("WH-A", "Almaty", {"SMX-001": 10, "EB-001": 1000})
    store.add_warehouse("WH-B", "Nur-Sultan", {"SMX-001": 5})

    inventory = InventoryService(store)
    payments = PaymentService(store, MockPaymentGateway(store.ids, decline=settings.decline_payments))
    shipments = ShipmentService(store, MockCourierIntegration(store.ids, name=settings.courier_name))
    orders = OrderService(store, inventory, payments, shipments)

    alice = store.add_customer("Alice", "alice@example.com", "Almaty, 123", "+7701")
    admin = store.add_admin("Admin", "admin@example.com", "HQ", "+7700")
    store.log_admin_action(admin, "created product SMX-001")

    promo = PromoCode("WELCOME10", Decimal("10"), store.now() + timedelta(days=5), 100)
    return Shop(store=store, orders=orders, alice=alice, phone=phone, ebook=ebook, promo=promo)


def run(shop: Shop, phones: int, ebooks: int, cancel: bool) -> bool:
    store, orders, alice = shop.store, shop.orders, shop.alice

    if phones:
        alice.cart.add_item(shop.phone, phones)
    if ebooks:
        alice.cart.add_item(shop.ebook, ebooks)
    if alice.cart.apply_promo(shop.promo, store.now()):
        store.log(f"Promo applied: {shop.promo.code}")
    else:
        store.log("Promo invalid")
    store.log(f"Cart total: {alice.cart.calculate_total(store.now())}")

    placed = alice.place_order(orders)
    if not placed or placed.order is None:
        store.log(f"Order failed: {placed.error}")
        return False
    order = placed.order

    if cancel:
        return bool(orders.cancel_order(order))

    paid = orders.pay_order(order, PaymentType.CARD, {"cardNumber": "4242-..."})
    if paid:
        orders.ship_order(order)
        store.log(f"Order status after ship: {order.status.value}")
    store.log(f"Loyalty account: {alice.loyalty}")
    orders.complete_order(order)
    store.log(f"Final order status: {order.status.value}")
    return order.status is OrderStatus.COMPLETED


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Run the shop demo scenario and print logs.")
    p.add_argument("--phones", type=int, default=1)
    p.add_argument("--ebooks", type=int, default=1)
    p.add_argument("--decline-payment", action="store_true", help="Mock gateway declines the charge")
    p.add_argument("--cancel", action="store_true", help="Cancel the order instead of paying for it")
    p.add_argument("--log-level", type=str, default=None)
    args = p.parse_args(argv)

    overrides = {}
    if args.decline_payment:
        overrides["decline_payments"] = True
    if args.log_level:
        overrides["log_level"] = args.log_level
    settings = ShopSettings(**overrides)
    configure_logging(settings)

    shop = seed(settings)
    ok = run(shop, phones=args.phones, ebooks=args.ebooks, cancel=args.cancel)

    print("\n=== RESULT ===")
    print("success:", ok)
    print("orders:", [str(o) for o in shop.alice.orders])
    print("warehouses:", [w.snapshot() for w in shop.store.warehouses.values()])
    print("loyalty:", shop.alice.loyalty)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
