import pytest
from django.utils import timezone

from logistics import services
from logistics.models import Bundle, PackingList

pytestmark = pytest.mark.django_db


def packing_payload(booking, **extra) -> dict:
    payload = {
        "booking_reference": booking.pk,
        "net_weight": "120",
        "gross_weight": "130",
        "packed_by": "Ravi",
        "planned_bundle_count": 2,
        "bundles": [
            {
                "bundle_number": "B1",
                "quantity": "10",
                "products": [{"id": "P1", "product_name": "Cotton saree", "product_quantity": 20}],
            },
            {"bundle_number": "B2", "quantity": "5", "priority": "high"},
        ],
    }
    payload.update(extra)
    return payload


def test_create_with_bundles(api, make_booking) -> None:
    booking = make_booking()

    response = api.post("/api/packing-lists/", packing_payload(booking), format="json")

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["packing_list_code"] == f"PL-{timezone.localdate().year}-001"
    assert data["booking_reference"]["booking_code"] == booking.booking_code
    assert sorted(b["bundle_number"] for b in data["bundles"]) == ["B1", "B2"]
    products = Bundle.objects.get(bundle_number="B1").products
    assert products == [{
        "id": "P1", "product_name": "Cotton saree", "product_quantity": 20, "fabric": "", "description": "",
    }]


def test_one_packing_list_per_booking(api, make_packing_list) -> None:
    packing_list = make_packing_list()

    response = api.post("/api/packing-lists/", packing_payload(packing_list.booking_reference), format="json")

    assert response.status_code == 409
    assert response.json()["detail"] == "Packing list already exists for this booking"
    assert PackingList.objects.count() == 1


def test_unknown_booking_reference(api, make_booking) -> None:
    payload = packing_payload(make_booking(), booking_reference=999)

    response = api.post("/api/packing-lists/", payload, format="json")

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid booking reference"


def test_duplicate_bundle_numbers_roll_back(api, make_booking) -> None:
    booking = make_booking()
    payload = packing_payload(booking, bundles=[
        {"bundle_number": "B1", "quantity": "1"},
        {"bundle_number": "B1", "quantity": "2"},
    ])

    response = api.post("/api/packing-lists/", payload, format="json")

    assert response.status_code == 409
    assert response.json()["detail"] == "Bundle number B1 already exists for this packing list"
    assert not PackingList.objects.exists()
    assert not Bundle.objects.exists()


def test_bad_product_rolls_back(api, make_booking) -> None:
    payload = packing_payload(make_booking(), bundles=[
        {"bundle_number": "B1", "quantity": "1", "products": [{"id": "P1", "product_quantity": 2}]},
    ])

    response = api.post("/api/packing-lists/", payload, format="json")

    assert response.status_code == 400
    assert response.json()["detail"] == "Product 1: product_name is required"
    assert not PackingList.objects.exists()


def test_update_replaces_bundles(api, make_packing_list) -> None:
    packing_list = make_packing_list()

    response = api.put(f"/api/packing-lists/{packing_list.pk}/", {
        "packed_by": "Meena",
        "bundles": [{"bundle_number": "C1", "quantity": "7"}],
    }, format="json")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["packed_by"] == "Meena"
    assert [b["bundle_number"] for b in data["bundles"]] == ["C1"]
    assert Bundle.objects.filter(packing_list=packing_list).count() == 1


def test_update_without_bundles_keeps_them(api, make_packing_list) -> None:
    packing_list = make_packing_list()

    api.patch(f"/api/packing-lists/{packing_list.pk}/", {"packing_status": "in_progress"}, format="json")

    assert packing_list.bundles.count() == 2


def test_completed_packing_list_cannot_be_deleted(api, make_packing_list) -> None:
    packing_list = make_packing_list(packing_status="completed")

    response = api.delete(f"/api/packing-lists/{packing_list.pk}/")

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete completed packing lists"
    assert PackingList.objects.filter(pk=packing_list.pk).exists()


def test_delete_cascades_to_bundles(api, make_packing_list) -> None:
    packing_list = make_packing_list()

    response = api.delete(f"/api/packing-lists/{packing_list.pk}/")

    assert response.status_code == 200
    assert response.json()["message"] == "Packing list deleted successfully"
    assert not Bundle.objects.exists()


def test_code_continues_after_gaps(make_booking, make_packing_list) -> None:
    first = make_packing_list()
    second = make_packing_list(booking=make_booking())
    PackingList.objects.filter(pk=first.pk).update(packing_list_code="PL-2030-001")
    PackingList.objects.filter(pk=second.pk).update(packing_list_code="PL-2030-005")

    assert services.generate_packing_list_code(2030) == "PL-2030-006"
    assert services.generate_packing_list_code(2031) == "PL-2031-001"


def test_list_filters(api, make_booking, make_packing_list) -> None:
    make_packing_list()
    make_packing_list(booking=make_booking(), packing_status="completed", packed_by="Meena")

    completed = api.get("/api/packing-lists/?packingStatus=completed").json()
    meena = api.get("/api/packing-lists/?search=meen").json()

    assert completed["meta"]["total"] == 1
    assert meena["data"][0]["packed_by"] == "Meena"
