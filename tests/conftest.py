from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from logistics import services
from logistics.models import Customer, DeliveryPartner, PickupPartner


@pytest.fixture
def api() -> APIClient:
    return APIClient()


@pytest.fixture
def make_sender():
    def _make(name: str = "Acme Traders", **extra) -> Customer:
        return Customer.objects.create(
            customer_type=Customer.SENDER, name=name, phone="+91 90000 00001", location="Surat", **extra
        )
    return _make


@pytest.fixture
def make_receiver():
    def _make(name: str = "Global Imports", **extra) -> Customer:
        extra.setdefault("country", "UAE")
        extra.setdefault("branches", [{"branch_name": "Dubai"}, {"branch_name": "Sharjah"}])
        return Customer.objects.create(customer_type=Customer.RECEIVER, name=name, **extra)
    return _make


@pytest.fixture
def make_pickup_partner():
    def _make(name: str = "Fast Pickup", price: str = "250", **extra) -> PickupPartner:
        return PickupPartner.objects.create(name=name, phone_number="9800000000", price=Decimal(price), **extra)
    return _make


@pytest.fixture
def make_delivery_partner():
    def _make(name: str = "Gulf Cargo", price: str = "50", **extra) -> DeliveryPartner:
        extra.setdefault("from_country", "India")
        extra.setdefault("to_country", "UAE")
        return DeliveryPartner.objects.create(name=name, phone_number="9811111111", price=Decimal(price), **extra)
    return _make


@pytest.fixture
def make_booking(make_sender, make_receiver, make_pickup_partner):
    def _make(sender=None, receiver=None, pickup="Self", booking_date=date(2024, 1, 10), **extra):
        data = {
            "sender": (sender or make_sender()).pk,
            "receiver": (receiver or make_receiver()).pk,
            "pickup_partner": pickup,
            "date": booking_date,
            "expected_receiving_date": date(2024, 1, 25),
            "bundle_count": 3,
        }
        data.update(extra)
        return services.create_booking(data)
    return _make


@pytest.fixture
def make_container():
    def _make(charge: str = "1000", advance: str = "300", **extra):
        data = {
            "company_name": "Maersk",
            "booking_date": date(2024, 3, 5),
            "booking_charge": Decimal(charge),
            "advance_payment": Decimal(advance),
        }
        data.update(extra)
        return services.create_container(data)
    return _make


@pytest.fixture
def make_packing_list(make_booking):
    def _make(booking=None, bundles=None, **extra):
        data = {
            "booking_reference": (booking or make_booking()).pk,
            "net_weight": Decimal("120"),
            "gross_weight": Decimal("130"),
            "packed_by": "Ravi",
            "planned_bundle_count": 2,
            "bundles": bundles if bundles is not None else [
                {"bundle_number": "B1", "quantity": Decimal("10"), "net_weight": Decimal("50")},
                {"bundle_number": "B2", "quantity": Decimal("5"), "net_weight": Decimal("70")},
            ],
        }
        data.update(extra)
        return services.create_packing_list(data)
    return _make
