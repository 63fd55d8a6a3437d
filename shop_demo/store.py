from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from shop_demo.errors import DuplicateSku
from shop_demo.factories import ProductFactory
from shop_demo.ids import IdGenerator, UuidIdGenerator
from shop_demo.models import AdminActionLog, Administrator, Category, Customer, Product, Profile
from shop_demo.warehouse import Warehouse

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Store:
    """
    In-memory registry of the shop.

    Holds:
    - the catalog (products by SKU, categories)
    - warehouses by name, in registration order
    - customers and administrators
    - the list of log lines (for the demo and for tests)

    Orders are not stored here: they live on their customer.
    """

    def __init__(self, ids: Optional[IdGenerator] = None, clock: Callable[[], datetime] = utc_now) -> None:
        self.ids = ids or UuidIdGenerator()
        self.clock = clock

        self.categories: Dict[str, Category] = {}
        self.products: Dict[str, Product] = {}
        self.warehouses: Dict[str, Warehouse] = {}
        self.customers: Dict[str, Customer] = {}
        self.admins: Dict[str, Administrator] = {}

        self.logs: List[str] = []

    def log(self, message: str) -> None:
        self.logs.append(message)
        logger.info(message)

    def now(self) -> datetime:
        return self.clock()

    # Seed helpers
    def add_category(self, name: str) -> Category:
        category = Category(id=self.ids.new_id("CAT"), name=name)
        self.categories[name] = category
        return category

    def add_product(self, factory: ProductFactory, **params: Any) -> Product:
        product = factory.create(params)
        if product.sku in self.products:
            raise DuplicateSku(product.sku)
        self.products[product.sku] = product
        return product

    def replace_product(self, product: Product) -> None:
        """Swap in a new version of a product under the same SKU (e.g. a repricing)."""
        if product.sku not in self.products:
            raise KeyError(f"Product {product.sku} not found")
        self.products[product.sku] = product

    def add_warehouse(self, name: str, location: str, stock: Optional[Dict[str, int]] = None) -> Warehouse:
        warehouse = Warehouse(id=self.ids.new_id("WH"), name=name, location=location)
        for sku, qty in (stock or {}).items():
            warehouse.set_stock(sku, qty)
        self.warehouses[name] = warehouse
        return warehouse

    def add_customer(self, name: str, email: str, address: str, phone: str) -> Customer:
        customer = Customer(
            id=self.ids.new_id("CUS"),
            profile=Profile(name=name, email=email, address=address, phone=phone),
        )
        self.customers[customer.id] = customer
        return customer

    def add_admin(self, name: str, email: str, address: str, phone: str) -> Administrator:
        admin = Administrator(
            id=self.ids.new_id("ADM"),
            profile=Profile(name=name, email=email, address=address, phone=phone),
        )
        self.admins[admin.id] = admin
        return admin

    def log_admin_action(self, admin: Administrator, action: str) -> AdminActionLog:
        entry = AdminActionLog(id=self.ids.new_id("LOG"), admin=admin, action=action, timestamp=self.now())
        admin.actions.append(entry)
        self.log(f"ADMIN LOG: {entry}")
        return entry
