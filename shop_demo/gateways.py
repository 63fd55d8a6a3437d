from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, Mapping

from shop_demo.ids import IdGenerator
from shop_demo.models import Payment, PaymentResult, RefundResult, Shipment, ShipmentStatus

logger = logging.getLogger(__name__)


class PaymentGateway(ABC):
    @abstractmethod
    def charge(self, payment: Payment, details: Mapping[str, str]) -> PaymentResult:
        """Charge ``payment.amount``; the result carries the gateway's transaction id."""
        pass

    @abstractmethod
    def refund(self, transaction_id: str, amount: Decimal) -> RefundResult:
        pass


class CourierIntegration(ABC):
    name: str = "courier"

    @abstractmethod
    def create_shipment(self, shipment: Shipment) -> str:
        """Register the shipment with the courier and return its tracking number."""
        pass

    @abstractmethod
    def get_status(self, tracking_number: str) -> ShipmentStatus:
        pass


class MockPaymentGateway(PaymentGateway):
    """
    Accepts every charge unless built with ``decline=True``.
    Declined charges still get a transaction id, like a real acquirer would.
    """

    def __init__(self, ids: IdGenerator, decline: bool = False):
        self.ids = ids
        self.decline = decline
        self.charges: Dict[str, Decimal] = {}
        self.refunds: Dict[str, Decimal] = {}

    def charge(self, payment: Payment, details: Mapping[str, str]) -> PaymentResult:
        tx = self.ids.new_id("TX")
        if self.decline:
            logger.info("MockPaymentGateway: declined %s, tx=%s", payment.amount, tx)
            return PaymentResult(success=False, transaction_id=tx, message="Declined by mock gateway")
        self.charges[tx] = payment.amount
        logger.info("MockPaymentGateway: charged %s, tx=%s", payment.amount, tx)
        return PaymentResult(success=True, transaction_id=tx, message="OK")

    def refund(self, transaction_id: str, amount: Decimal) -> RefundResult:
        self.refunds[transaction_id] = amount
        logger.info("MockPaymentGateway: refund %s for tx=%s", amount, transaction_id)
        return RefundResult(success=True, message="Refunded")


class MockCourierIntegration(CourierIntegration):
    def __init__(self, ids: IdGenerator, name: str = "MockCourier"):
        self.ids = ids
        self.name = name
        self.shipments: Dict[str, Shipment] = {}

    def create_shipment(self, shipment: Shipment) -> str:
        tracking_number = self.ids.new_id("TRK")
        self.shipments[tracking_number] = shipment
        logger.info("%s: created shipment, tracking=%s", self.name, tracking_number)
        return tracking_number

    def get_status(self, tracking_number: str) -> ShipmentStatus:
        return ShipmentStatus.IN_TRANSIT
