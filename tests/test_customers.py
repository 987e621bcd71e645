import pytest

from logistics.models import Customer

pytestmark = pytest.mark.django_db


def test_create_receiver_with_branches_and_payments(api) -> None:
    response = api.post("/api/customers/", {
        "customer_type": "Receiver",
        "name": "Global Imports",
        "country": "UAE",
        "credit": "1000",
        "discount": "5",
        "branches": [{"branch_name": "Dubai", "location": "Deira"}],
        "payment_history": [{"date": "2024-01-05", "amount": 250, "payment_method": "cash"}],
    }, format="json")

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["branches"][0]["branch_name"] == "Dubai"
    assert data["payment_history"][0]["amount"] == 250
    assert data["payment_history"][0]["date"] == "2024-01-05"
    assert data["credit"] == "1000.00"
    assert response.json()["message"] == "Customer created successfully"


def test_sender_ignores_receiver_fields(api) -> None:
    response = api.post("/api/customers/", {
        "customer_type": "Sender",
        "name": "Acme Traders",
        "location": "Surat",
        "gst_number": "24AAACA1234A1Z5",
        "country": "UAE",
        "credit": "500",
    }, format="json")

    assert response.status_code == 201
    customer = Customer.objects.get()
    assert customer.location == "Surat"
    assert customer.country == ""
    assert customer.credit == 0


def test_receiver_ignores_sender_fields(api, make_receiver) -> None:
    receiver = make_receiver()

    response = api.patch(f"/api/customers/{receiver.pk}/", {"gst_number": "X1", "country": "Oman"}, format="json")

    assert response.status_code == 200
    receiver.refresh_from_db()
    assert receiver.gst_number == ""
    assert receiver.country == "Oman"


def test_discount_out_of_range(api) -> None:
    response = api.post("/api/customers/", {
        "customer_type": "Receiver", "name": "Too Generous", "discount": "150",
    }, format="json")

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Validation failed: ")
    assert not Customer.objects.exists()


def test_unknown_customer_type(api) -> None:
    response = api.post("/api/customers/", {"customer_type": "Broker", "name": "Nobody"}, format="json")

    assert response.status_code == 400
    assert "customer_type" in response.json()["errors"]


def test_filter_and_search(api, make_sender, make_receiver) -> None:
    make_sender()
    make_receiver()
    make_receiver(name="Muscat Fabrics", country="Oman")

    receivers = api.get("/api/customers/?customerType=Receiver").json()
    oman = api.get("/api/customers/?search=oman").json()
    everyone = api.get("/api/customers/?customerType=all").json()

    assert receivers["meta"]["total"] == 2
    assert [c["name"] for c in oman["data"]] == ["Muscat Fabrics"]
    assert everyone["meta"]["total"] == 3


def test_customer_in_use_cannot_be_deleted(api, make_booking) -> None:
    booking = make_booking()

    response = api.delete(f"/api/customers/{booking.sender_id}/")

    assert response.status_code == 409
    assert Customer.objects.filter(pk=booking.sender_id).exists()
