import pytest

pytestmark = pytest.mark.django_db


@pytest.fixture
def partners(make_pickup_partner):
    return [make_pickup_partner(name=f"Partner {i:02d}", price=str(i)) for i in range(1, 13)]


def test_meta(api, partners) -> None:
    body = api.get("/api/pickup-partners/?page=2&limit=5").json()

    assert len(body["data"]) == 5
    assert body["meta"] == {
        "total": 12, "page": 2, "limit": 5, "totalPages": 3, "hasNextPage": True, "hasPrevPage": True,
    }


def test_default_page_size(api, partners) -> None:
    body = api.get("/api/pickup-partners/").json()

    assert len(body["data"]) == 10
    assert body["meta"]["hasPrevPage"] is False
    assert body["meta"]["hasNextPage"] is True


def test_last_page(api, partners) -> None:
    body = api.get("/api/pickup-partners/?page=3&limit=5").json()

    assert [p["name"] for p in body["data"]] == ["Partner 02", "Partner 01"]
    assert body["meta"]["hasNextPage"] is False


def test_default_order_is_newest_first(api, partners) -> None:
    body = api.get("/api/pickup-partners/?limit=3").json()

    assert [p["name"] for p in body["data"]] == ["Partner 12", "Partner 11", "Partner 10"]


def test_sort_by_field(api, partners) -> None:
    asc = api.get("/api/pickup-partners/?sortBy=price&sortOrder=asc&limit=2").json()
    desc = api.get("/api/pickup-partners/?sortField=price&sortOrder=desc&limit=2").json()
    created = api.get("/api/pickup-partners/?sortBy=createdAt&sortOrder=asc&limit=1").json()

    assert [p["name"] for p in asc["data"]] == ["Partner 01", "Partner 02"]
    assert [p["name"] for p in desc["data"]] == ["Partner 12", "Partner 11"]
    assert created["data"][0]["name"] == "Partner 01"


def test_unknown_sort_field_falls_back(api, partners) -> None:
    body = api.get("/api/pickup-partners/?sortBy=password&limit=1").json()

    assert body["data"][0]["name"] == "Partner 12"


def test_limit_is_capped(api, partners) -> None:
    body = api.get("/api/pickup-partners/?limit=1000").json()

    assert body["meta"]["limit"] == 100
    assert body["meta"]["totalPages"] == 1
