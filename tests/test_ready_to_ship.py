import pytest

from logistics.models import Bundle

pytestmark = pytest.mark.django_db


@pytest.fixture
def shipment(make_packing_list):
    packing_list = make_packing_list(bundles=[
        {"bundle_number": "B1", "quantity": 10, "net_weight": 40, "status": "completed"},
        {"bundle_number": "B2", "quantity": 4, "status": "pending"},
    ])
    return {b.bundle_number: b for b in packing_list.bundles.all()}


def test_lists_completed_bundles_only(api, shipment) -> None:
    body = api.get("/api/ready-to-ship/").json()

    assert [b["bundle_number"] for b in body["data"]] == ["B1"]
    assert body["data"][0]["packing_list"]["booking_reference"]["booking_code"].startswith("ACM_GLO_")


def test_pending_bundle_is_hidden(api, shipment) -> None:
    response = api.get(f"/api/ready-to-ship/{shipment['B2'].pk}/")

    assert response.status_code == 400
    assert response.json()["detail"] == "Bundle is not in completed status and cannot be viewed in Ready to Ship"


def test_pending_bundle_cannot_be_updated(api, shipment) -> None:
    response = api.put(f"/api/ready-to-ship/{shipment['B2'].pk}/", {"priority": "high"}, format="json")

    assert response.status_code == 400
    assert "cannot be updated in Ready to Ship" in response.json()["detail"]


def test_container_lifecycle(api, shipment, make_container) -> None:
    bundle = shipment["B1"]
    container = make_container()
    url = f"/api/ready-to-ship/{bundle.pk}/"

    stuffed = api.put(url, {"ready_to_ship_status": "stuffed", "container": str(container.pk)}, format="json")
    assert stuffed.status_code == 200
    assert stuffed.json()["data"]["container"]["container_code"] == container.container_code
    assert stuffed.json()["message"] == "Bundle updated successfully"

    dispatched = api.put(url, {"ready_to_ship_status": "dispatched"}, format="json")
    assert dispatched.json()["data"]["container"]["id"] == container.pk

    back = api.put(url, {"ready_to_ship_status": "pending", "container": str(container.pk)}, format="json")
    assert back.json()["data"]["container"] is None
    bundle.refresh_from_db()
    assert bundle.container_id is None


def test_update_without_status_clears_container(api, shipment, make_container) -> None:
    bundle = shipment["B1"]
    bundle.ready_to_ship_status = Bundle.RTS_STUFFED
    bundle.container = make_container()
    bundle.save()

    response = api.patch(f"/api/ready-to-ship/{bundle.pk}/", {"priority": "high"}, format="json")

    assert response.json()["data"]["priority"] == "high"
    assert response.json()["data"]["container"] is None


def test_invalid_container(api, shipment) -> None:
    response = api.put(
        f"/api/ready-to-ship/{shipment['B1'].pk}/", {"ready_to_ship_status": "stuffed", "container": "777"},
        format="json",
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid container ID"


def test_filters(api, shipment) -> None:
    Bundle.objects.filter(pk=shipment["B1"].pk).update(priority="high", ready_to_ship_status="stuffed")

    assert api.get("/api/ready-to-ship/?priority=high").json()["meta"]["total"] == 1
    assert api.get("/api/ready-to-ship/?priority=low").json()["meta"]["total"] == 0
    assert api.get("/api/ready-to-ship/?readyToShipStatus=stuffed").json()["meta"]["total"] == 1
    assert api.get("/api/ready-to-ship/?readyToShipStatus=all&search=B1").json()["meta"]["total"] == 1


def test_stats(api, shipment) -> None:
    stats = api.get("/api/ready-to-ship/stats/").json()["data"]

    assert stats["total_bundles"] == 1
    assert stats["total_quantity"] == 10
    assert stats["total_net_weight"] == 40


def test_no_create_or_delete(api, shipment) -> None:
    assert api.post("/api/ready-to-ship/", {}, format="json").status_code == 405
    assert api.delete(f"/api/ready-to-ship/{shipment['B1'].pk}/").status_code == 405
