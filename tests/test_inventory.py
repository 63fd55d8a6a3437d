"""Tests for reservation across warehouses."""
from shop_demo.services import InventoryService
from shop_demo.store import Store
from shop_demo.warehouse import Warehouse


def test_total_stock_sums_all_warehouses(inventory):
    assert inventory.total_stock("ITEM001") == 15
    assert inventory.total_stock("ITEM002") == 5
    assert inventory.total_stock("UNKNOWN") == 0


def test_reserve_takes_from_first_warehouse_that_fits(store, inventory):
    assert inventory.reserve_across_warehouses("ITEM001", 8) is True
    assert store.warehouses["WH-A"].get_stock("ITEM001") == 2
    assert store.warehouses["WH-B"].get_stock("ITEM001") == 5


def test_reserve_falls_through_to_next_warehouse(store, inventory):
    assert inventory.reserve_across_warehouses("ITEM001", 8) is True
    # WH-A has 2 left, WH-B covers the next 4
    assert inventory.reserve_across_warehouses("ITEM001", 4) is True
    assert store.warehouses["WH-A"].get_stock("ITEM001") == 2
    assert store.warehouses["WH-B"].get_stock("ITEM001") == 1


def test_no_split_reservation():
    store = Store()
    store.add_warehouse("A", "here", {"X": 10})
    store.add_warehouse("B", "there", {"X": 5})
    inventory = InventoryService(store)

    assert inventory.total_stock("X") == 15
    assert inventory.reserve_across_warehouses("X", 12) is False
    assert store.warehouses["A"].get_stock("X") == 10
    assert store.warehouses["B"].get_stock("X") == 5
    assert any("not enough stock for X" in line for line in store.logs)


def test_release_goes_to_first_warehouse(store, inventory):
    # Taken from WH-B (WH-A has none of it after the first reservation)...
    assert inventory.reserve_across_warehouses("ITEM001", 10) is True
    assert inventory.reserve_across_warehouses("ITEM001", 5) is True
    assert store.warehouses["WH-B"].get_stock("ITEM001") == 0

    # ...but returned to WH-A.
    inventory.release("ITEM001", 5)
    assert store.warehouses["WH-A"].get_stock("ITEM001") == 5
    assert store.warehouses["WH-B"].get_stock("ITEM001") == 0
    assert inventory.total_stock("ITEM001") == 5


def test_release_without_warehouses_is_noop():
    store = Store()
    inventory = InventoryService(store)
    inventory.release("X", 1)
    assert inventory.total_stock("X") == 0
    assert store.logs == []


def test_add_warehouse_registers_by_name(store, inventory):
    inventory.add_warehouse(Warehouse(id="WH-X", name="WH-C", location="Shymkent"))
    assert list(inventory.warehouses) == ["WH-A", "WH-B", "WH-C"]
