from __future__ import annotations

import logging
import threading
from typing import Dict

logger = logging.getLogger(__name__)


class Warehouse:
    """
    Stock ledger of one warehouse: SKU -> quantity on hand.

    ``reserve`` and ``release`` hold this warehouse's lock, so concurrent
    callers on the same warehouse never oversell. Different warehouses do not
    share a lock.
    """

    def __init__(self, id: str, name: str, location: str) -> None:
        self.id = id
        self.name = name
        self.location = location
        self._stock: Dict[str, int] = {}
        self._lock = threading.Lock()

    def set_stock(self, sku: str, qty: int) -> None:
        if qty < 0:
            raise ValueError(f"Stock for {sku} must be >= 0, got {qty}")
        with self._lock:
            self._stock[sku] = qty

    def get_stock(self, sku: str) -> int:
        return self._stock.get(sku, 0)

    def reserve(self, sku: str, qty: int) -> bool:
        if qty < 0:
            raise ValueError("qty must be >= 0")
        with self._lock:
            available = self._stock.get(sku, 0)
            if available < qty:
                return False
            self._stock[sku] = available - qty
        logger.debug("%s: reserved %s x %s (left=%s)", self, qty, sku, available - qty)
        return True

    def release(self, sku: str, qty: int) -> None:
        # No upper bound: releasing more than was ever reserved inflates stock.
        if qty < 0:
            raise ValueError("qty must be >= 0")
        with self._lock:
            self._stock[sku] = self._stock.get(sku, 0) + qty

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._stock)

    def __str__(self) -> str:
        return f"{self.name}@{self.location}"

    def __repr__(self) -> str:
        return f"Warehouse(name={self.name!r}, location={self.location!r}, stock={self._stock!r})"
