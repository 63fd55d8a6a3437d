"""Pytest fixtures for the shop demo (in-memory, deterministic ids and clock)."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from shop_demo.factories import DigitalProductFactory, PhysicalProductFactory
from shop_demo.gateways import MockCourierIntegration, MockPaymentGateway
from shop_demo.ids import SequentialIdGenerator
from shop_demo.orders import OrderService
from shop_demo.services import InventoryService, PaymentService, ShipmentService
from shop_demo.store import Store

FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> Store:
    store = Store(ids=SequentialIdGenerator(), clock=lambda: FIXED_NOW)

    books = store.add_category("Books")
    store.add_product(PhysicalProductFactory(store.ids), name="Phone", price=Decimal("100.00"), sku="ITEM001")
    store.add_product(PhysicalProductFactory(store.ids), name="Case", price=Decimal("25.50"), sku="ITEM002")
    store.add_product(DigitalProductFactory(store.ids), name="Ebook", price=Decimal("9.99"), sku="EBOOK", category=books)
    store.add_product(PhysicalProductFactory(store.ids), name="Rare", price=Decimal("50.00"), sku="ITEM003")

    store.add_warehouse("WH-A", "Almaty", {"ITEM001": 10, "ITEM002": 5, "EBOOK": 100})
    store.add_warehouse("WH-B", "Nur-Sultan", {"ITEM001": 5})

    return store


@pytest.fixture
def gateway(store: Store) -> MockPaymentGateway:
    return MockPaymentGateway(store.ids)


@pytest.fixture
def courier(store: Store) -> MockCourierIntegration:
    return MockCourierIntegration(store.ids)


@pytest.fixture
def inventory(store: Store) -> InventoryService:
    return InventoryService(store)


@pytest.fixture
def orders(store, inventory, gateway, courier) -> OrderService:
    return OrderService(store, inventory, PaymentService(store, gateway), ShipmentService(store, courier))


@pytest.fixture
def customer(store: Store):
    return store.add_customer("Alice", "alice@example.com", "Almaty, 123", "+7701")


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW
