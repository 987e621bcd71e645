import pytest

from logistics.models import PickupPartner, Store

pytestmark = pytest.mark.django_db


def test_pickup_partner_crud(api) -> None:
    created = api.post("/api/pickup-partners/", {
        "name": "Fast Pickup", "phone_number": "9800000000", "price": "250",
    }, format="json")
    partner_id = created.json()["data"]["id"]

    updated = api.put(f"/api/pickup-partners/{partner_id}/", {"price": "300"}, format="json")
    fetched = api.get(f"/api/pickup-partners/{partner_id}/")
    deleted = api.delete(f"/api/pickup-partners/{partner_id}/")

    assert created.status_code == 201
    assert created.json()["message"] == "Pickup partner created successfully"
    assert updated.json()["data"]["price"] == "300.00"
    assert fetched.json()["data"]["name"] == "Fast Pickup"
    assert deleted.json()["message"] == "Pickup partner deleted successfully"
    assert not PickupPartner.objects.exists()


def test_negative_price_rejected(api) -> None:
    response = api.post("/api/pickup-partners/", {
        "name": "Cheap", "phone_number": "1", "price": "-5",
    }, format="json")

    assert response.status_code == 400
    assert "price" in response.json()["errors"]


def test_partner_used_by_booking_cannot_be_deleted(api, make_booking, make_pickup_partner) -> None:
    partner = make_pickup_partner()
    make_booking(pickup=str(partner.pk))

    response = api.delete(f"/api/pickup-partners/{partner.pk}/")

    assert response.status_code == 409


def test_delivery_partner_route_filter(api, make_delivery_partner) -> None:
    make_delivery_partner()
    make_delivery_partner(name="Muscat Line", to_country="Oman", status="Inactive")

    oman = api.get("/api/delivery-partners/?toCountry=Oman").json()
    active = api.get("/api/delivery-partners/?status=Active").json()

    assert [p["name"] for p in oman["data"]] == ["Muscat Line"]
    assert [p["name"] for p in active["data"]] == ["Gulf Cargo"]


def test_store_code_conflict(api) -> None:
    first = api.post("/api/stores/", {"name": "Surat Hub", "code": "SRT"}, format="json")
    second = api.post("/api/stores/", {"name": "Other", "code": "SRT"}, format="json")

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["detail"] == "Store with this code already exists"
    assert Store.objects.count() == 1


def test_store_rename_keeps_own_code(api) -> None:
    store = Store.objects.create(name="Surat Hub", code="SRT")

    response = api.patch(f"/api/stores/{store.pk}/", {"name": "Surat Main", "code": "SRT"}, format="json")

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Surat Main"


def test_store_list_shows_active_only(api) -> None:
    Store.objects.create(name="Surat Hub", code="SRT")
    closed = Store.objects.create(name="Old Depot", code="OLD", is_active=False)

    listed = api.get("/api/stores/").json()
    fetched = api.get(f"/api/stores/{closed.pk}/")

    assert [s["code"] for s in listed["data"]] == ["SRT"]
    assert fetched.status_code == 200


def test_booking_links_store(api, make_booking) -> None:
    store = Store.objects.create(name="Surat Hub", code="SRT")

    booking = make_booking(store=store.pk)

    assert api.get(f"/api/bookings/{booking.pk}/").json()["data"]["store"]["code"] == "SRT"
