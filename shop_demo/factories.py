from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Mapping

from shop_demo.ids import IdGenerator
from shop_demo.models import Product


class ProductFactory(ABC):
    digital: bool = False
    default_description: str = ""

    def __init__(self, ids: IdGenerator):
        self.ids = ids

    @abstractmethod
    def create(self, params: Mapping[str, Any]) -> Product: ...

    def _build(self, params: Mapping[str, Any]) -> Product:
        for key in ("name", "sku"):
            if not params.get(key):
                raise ValueError(f"Product param {key!r} is required")
        return Product(
            id=self.ids.new_id("PRD"),
            name=params["name"],
            description=params.get("description", self.default_description),
            price=Decimal(str(params.get("price", "0.00"))),
            sku=params["sku"],
            category=params.get("category"),
            digital=self.digital,
        )


class PhysicalProductFactory(ProductFactory):
    def create(self, params: Mapping[str, Any]) -> Product:
        return self._build(params)


class DigitalProductFactory(ProductFactory):
    digital = True
    default_description = "(digital)"

    def create(self, params: Mapping[str, Any]) -> Product:
        return self._build(params)
