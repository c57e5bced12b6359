import pytest
from uuid import uuid4

DETAIL_URL = "/api/checkout/orders/{tn}/"
LIST_URL = "/api/checkout/orders/"
PURCHASE_URL = "/api/checkout/purchase/"


def place(client, payload):
    r = client.post(PURCHASE_URL, data=payload, content_type="application/json")
    assert r.status_code == 201
    return r.json()["order_tracking_number"]


@pytest.mark.django_db
def test_get_order_by_tracking_number(client, purchase_payload):
    tn = place(client, purchase_payload())

    r = client.get(DETAIL_URL.format(tn=tn))
    assert r.status_code == 200
    body = r.json()
    assert body["tracking_number"] == tn
    assert body["total_quantity"] == 3
    assert body["total_price"] == "39.98"
    assert [i["product_id"] for i in body["items"]] == ["1001", "1002"]
    assert body["items"][0]["image_url"] == "/img/1001.png"
    assert "date_created" in body


@pytest.mark.django_db
def test_get_order_not_found_returns_404(client):
    r = client.get(DETAIL_URL.format(tn=str(uuid4())))
    assert r.status_code == 404
    assert r.json()["detail"] == "NOT_FOUND"


@pytest.mark.django_db
def test_get_order_with_malformed_tracking_number_returns_404(client):
    r = client.get(DETAIL_URL.format(tn="12345"))
    assert r.status_code == 404


@pytest.mark.django_db
def test_order_history_lists_customer_orders_newest_first(client, purchase_payload):
    first = place(client, purchase_payload())
    second = place(client, purchase_payload(email="ADA@example.com"))
    place(client, purchase_payload(email="someone@else.com"))

    r = client.get(LIST_URL, {"email": "Ada@Example.com"})
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 2
    assert [o["tracking_number"] for o in body["results"]] == [second, first]


@pytest.mark.django_db
def test_order_history_paginates(client, purchase_payload):
    for _ in range(3):
        place(client, purchase_payload())

    r = client.get(LIST_URL, {"email": "ada@example.com", "page": 2, "page_size": 2})
    body = r.json()
    assert body["count"] == 3
    assert body["page"] == 2
    assert len(body["results"]) == 1


@pytest.mark.django_db
def test_order_history_requires_email(client):
    r = client.get(LIST_URL)
    assert r.status_code == 400
    assert r.json()["detail"] == "EMAIL_REQUIRED"


@pytest.mark.parametrize(
    "params",
    [
        {"page": "abc"},
        {"page": "0"},
        {"page_size": "0"},
        {"page_size": "-1"},
        {"page_size": "x"},
    ],
)
@pytest.mark.django_db
def test_order_history_rejects_invalid_pagination(client, params):
    r = client.get(LIST_URL, {"email": "ada@example.com", **params})
    assert r.status_code == 400
    assert r.json()["detail"] == "INVALID_PAGINATION"


@pytest.mark.django_db
def test_order_history_caps_page_size(client, purchase_payload):
    place(client, purchase_payload())

    r = client.get(LIST_URL, {"email": "ada@example.com", "page_size": 1000})
    assert r.status_code == 200
    assert r.json()["page_size"] == 100
    assert r.json()["count"] == 1
