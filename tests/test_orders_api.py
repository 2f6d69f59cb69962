import pytest

API = "/api/v1"


def checkout_payload(**overrides):
    payload = {
        "customer_name": "Alice Example",
        "customer_email": "Alice@Example.com",
        "shipping_address": {
            "name": "Alice Example",
            "line1": "1 Main St",
            "city": "Springfield",
            "state": "IL",
            "postal_code": "62701",
            "country": "US",
        },
        "items": [
            {"product_id": "1", "name": "Stale name", "price": 1.0, "quantity": 2},
            {"product_id": "3", "quantity": 1},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def place_order(client):
    def _place(headers=None, **overrides):
        res = client.post(f"{API}/orders/checkout", json=checkout_payload(**overrides), headers=headers or {})
        assert res.status_code == 201, res.text
        return res.json()

    return _place


def test_guest_checkout_snapshots_catalog(client, place_order):
    order = place_order()

    assert order["id"] == "1"
    assert order["user_id"] is None
    assert order["status"] == "pending"
    assert order["payment_status"] == "pending"
    assert order["customer_email"] == "alice@example.com"

    first, second = order["items"]
    assert first["id"] == "item-1-0"
    assert first["product_name"] == "Custom Phone Stand"
    assert first["price_at_purchase"] == 12.99
    assert first["product_image"] == "/api/placeholder/300/300"
    assert second["product_name"] == "Desk Organizer"
    assert order["total_amount"] == pytest.approx(2 * 12.99 + 24.99)


def test_checkout_of_deleted_product_uses_client_snapshot(client, place_order):
    order = place_order(items=[{"product_id": "77", "name": "Retired Mug", "price": 8.5, "quantity": 2}])

    item = order["items"][0]
    assert item["product_name"] == "Retired Mug"
    assert item["price_at_purchase"] == 8.5
    assert item["product_image"] == "/api/placeholder/300/300"
    assert order["total_amount"] == 17.0


def test_checkout_keeps_price_at_purchase_after_catalog_change(client, place_order, admin_headers):
    order = place_order()
    client.patch(f"{API}/products/1", json={"price": 99.0}, headers=admin_headers)

    stored = client.get(f"{API}/orders/{order['id']}").json()

    assert stored["items"][0]["price_at_purchase"] == 12.99


def test_empty_cart_is_rejected(client):
    res = client.post(f"{API}/orders/checkout", json=checkout_payload(items=[]))
    assert res.status_code == 400
    assert res.json()["detail"] == "Cart is empty"


def test_checkout_validates_email_and_quantity(client):
    bad_email = client.post(f"{API}/orders/checkout", json=checkout_payload(customer_email="nope"))
    bad_qty = client.post(
        f"{API}/orders/checkout",
        json=checkout_payload(items=[{"product_id": "1", "quantity": 0}]),
    )
    assert bad_email.status_code == 422
    assert bad_qty.status_code == 422


def test_customer_checkout_is_linked_to_user(client, place_order, customer_headers, other_customer_headers):
    mine = place_order(headers=customer_headers)
    place_order(headers=other_customer_headers)
    place_order()

    assert mine["user_id"] == "user-1"

    res = client.get(f"{API}/orders/me", headers=customer_headers)
    assert res.status_code == 200
    assert [o["id"] for o in res.json()] == [mine["id"]]


def test_my_orders_requires_auth(client):
    assert client.get(f"{API}/orders/me").status_code == 401


def test_order_visibility(client, place_order, customer_headers, other_customer_headers, admin_headers):
    order = place_order(headers=customer_headers)
    url = f"{API}/orders/{order['id']}"

    assert client.get(url, headers=customer_headers).status_code == 200
    assert client.get(url, headers=admin_headers).status_code == 200
    assert client.get(url).status_code == 200
    assert client.get(url, headers=other_customer_headers).status_code == 403


def test_missing_order_is_404(client):
    assert client.get(f"{API}/orders/42").status_code == 404


def test_admin_list_with_filters(client, place_order, admin_headers):
    place_order()
    place_order(payment_status="paid", payment_reference="pi_123")
    place_order(payment_status="paid")
    client.patch(f"{API}/orders/3", json={"status": "shipped"}, headers=admin_headers)

    everything = client.get(f"{API}/orders", headers=admin_headers).json()
    assert everything["total"] == 3

    paid = client.get(f"{API}/orders", params={"payment_status": "paid"}, headers=admin_headers).json()
    assert [o["id"] for o in paid["orders"]] == ["2", "3"]

    shipped_paid = client.get(
        f"{API}/orders",
        params={"status": "shipped", "payment_status": "paid"},
        headers=admin_headers,
    ).json()
    assert [o["id"] for o in shipped_paid["orders"]] == ["3"]

    no_filter = client.get(
        f"{API}/orders",
        params={"status": "all", "payment_status": "all"},
        headers=admin_headers,
    ).json()
    assert no_filter["total"] == 3


def test_admin_list_requires_admin(client, customer_headers):
    assert client.get(f"{API}/orders").status_code == 401
    assert client.get(f"{API}/orders", headers=customer_headers).status_code == 403


def test_sequential_status_updates(client, place_order, admin_headers):
    order = place_order()
    url = f"{API}/orders/{order['id']}"

    first = client.patch(url, json={"status": "processing"}, headers=admin_headers).json()
    assert (first["status"], first["payment_status"]) == ("processing", "pending")

    second = client.patch(url, json={"payment_status": "paid"}, headers=admin_headers).json()
    assert (second["status"], second["payment_status"]) == ("processing", "paid")
    assert second["created_at"] == order["created_at"]
    assert second["items"] == order["items"]


def test_update_requires_some_field(client, place_order, admin_headers):
    order = place_order()
    res = client.patch(f"{API}/orders/{order['id']}", json={}, headers=admin_headers)

    assert res.status_code == 400
    assert res.json()["detail"] == "No valid update fields provided"


def test_update_rejects_unknown_status(client, place_order, admin_headers):
    order = place_order()
    res = client.patch(f"{API}/orders/{order['id']}", json={"status": "lost"}, headers=admin_headers)
    assert res.status_code == 422


def test_update_missing_order_is_404(client, admin_headers):
    res = client.patch(f"{API}/orders/9", json={"status": "shipped"}, headers=admin_headers)
    assert res.status_code == 404


def test_update_requires_admin(client, place_order, customer_headers):
    order = place_order(headers=customer_headers)
    res = client.patch(f"{API}/orders/{order['id']}", json={"status": "cancelled"}, headers=customer_headers)
    assert res.status_code == 403


def test_checkout_rejects_non_finite_price(client):
    body = (
        '{"customer_name": "Alice", "customer_email": "alice@example.com", '
        '"shipping_address": {"name": "Alice", "line1": "1 Main St", "city": "Springfield", '
        '"state": "IL", "postal_code": "62701", "country": "US"}, '
        '"items": [{"product_id": "77", "name": "Gone", "price": 1e999, "quantity": 1}]}'
    )

    res = client.post(
        f"{API}/orders/checkout",
        content=body,
        headers={"Content-Type": "application/json"},
    )

    assert res.status_code == 422
