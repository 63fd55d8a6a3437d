"""Tests for the payment and shipment services over the mock collaborators."""
from datetime import timedelta
from decimal import Decimal

import pytest

from shop_demo.errors import AlreadyRefunded, NoTransaction
from shop_demo.gateways import MockCourierIntegration, MockPaymentGateway
from shop_demo.models import Payment, PaymentResult, PaymentStatus, PaymentType, Shipment, ShipmentStatus
from shop_demo.services import PaymentService, ShipmentService


@pytest.fixture
def payments(store, gateway) -> PaymentService:
    return PaymentService(store, gateway)


@pytest.fixture
def payment() -> Payment:
    return Payment(id="PAY-1", type=PaymentType.CARD, amount=Decimal("42.00"))


def test_charge_success_records_transaction(payments, payment, gateway, now):
    result = payments.charge(payment, {"cardNumber": "4242"})

    assert result.success is True
    assert result.transaction_id == "TX-0001"
    assert payment.status is PaymentStatus.SUCCESS
    assert payment.transaction_id == "TX-0001"
    assert payment.paid_at == now
    assert gateway.charges == {"TX-0001": Decimal("42.00")}


def test_charge_failure_marks_payment_failed(payments, payment, gateway):
    gateway.decline = True

    result = payments.charge(payment, {})

    assert result.success is False
    assert result.message == "Declined by mock gateway"
    assert payment.status is PaymentStatus.FAILED
    assert payment.paid_at is None
    assert gateway.charges == {}


def test_refund_of_uncharged_payment_fails(payments, payment, gateway):
    result = payments.refund(payment)

    assert result.success is False
    assert isinstance(result.error, NoTransaction)
    assert payment.status is PaymentStatus.PENDING
    assert gateway.refunds == {}


def test_refund_of_declined_payment_fails(payments, payment, gateway):
    gateway.decline = True
    payments.charge(payment, {})

    result = payments.refund(payment)

    assert isinstance(result.error, NoTransaction)
    assert payment.status is PaymentStatus.FAILED


def test_refund_after_charge(payments, payment, gateway):
    payments.charge(payment, {})

    result = payments.refund(payment)

    assert result.success is True
    assert result.message == "Refunded"
    assert payment.status is PaymentStatus.REFUNDED
    assert gateway.refunds == {"TX-0001": Decimal("42.00")}


def test_dispatch_sets_tracking_and_eta(store, courier, now):
    shipments = ShipmentService(store, courier)
    shipment = Shipment(id="SHP-1", address="Almaty, 123", created_at=now)

    shipments.dispatch(shipment)

    assert shipment.tracking_number == "TRK-0001"
    assert shipment.status is ShipmentStatus.IN_TRANSIT
    assert shipment.courier_name == "MockCourier"
    assert shipment.estimated_delivery == now + timedelta(days=3)
    assert courier.shipments["TRK-0001"] is shipment
    assert any("dispatched via MockCourier" in line for line in store.logs)


def test_track_passes_through_to_courier(store, courier):
    shipments = ShipmentService(store, courier)
    assert shipments.track("TRK-0001") is ShipmentStatus.IN_TRANSIT


def test_gateways_are_swappable(store, now):
    class StubCourier(MockCourierIntegration):
        def get_status(self, tracking_number):
            return ShipmentStatus.DELIVERED

    class AlwaysDecline(MockPaymentGateway):
        def charge(self, payment, details):
            return PaymentResult(success=False, transaction_id=None, message="nope")

    shipments = ShipmentService(store, StubCourier(store.ids, name="Stub"))
    payments = PaymentService(store, AlwaysDecline(store.ids))
    payment = Payment(id="PAY-2", type=PaymentType.E_WALLET, amount=Decimal("1.00"))

    assert shipments.track("anything") is ShipmentStatus.DELIVERED
    assert payments.charge(payment, {}).success is False
    assert payment.status is PaymentStatus.FAILED
    assert payment.transaction_id is None


def test_second_refund_is_rejected(payments, payment, gateway):
    payments.charge(payment, {})
    assert payments.refund(payment).success

    result = payments.refund(payment)

    assert result.success is False
    assert isinstance(result.error, AlreadyRefunded)
    assert payment.status is PaymentStatus.REFUNDED
    assert len(gateway.refunds) == 1
