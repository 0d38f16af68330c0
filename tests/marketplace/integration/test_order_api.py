"""Integration tests for order listing, status changes and the admin surface."""

from decimal import Decimal

import pytest

BUYER = {"X-User-Id": "buyer-001", "X-User-Role": "buyer"}
SELLER = {"X-User-Id": "seller-001", "X-User-Role": "seller"}
OTHER_SELLER = {"X-User-Id": "seller-002", "X-User-Role": "seller"}
ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "admin"}


@pytest.fixture()
def placed(client, catalog):
    """Check out one shirt from seller-001 and one scarf from seller-002."""
    client.post("/cart/items", json={"product_id": "p1"}, headers=BUYER)
    client.post("/cart/items", json={"product_id": "p2"}, headers=BUYER)
    response = client.post("/cart/checkout", json={"payment_method": "bank_transfer"}, headers=BUYER)
    assert response.status_code == 201

    orders = client.get("/orders", headers=BUYER).json()
    return {order["seller_id"]: order["order_id"] for order in orders}


class TestListingOrders:
    def test_buyer_sees_own_orders_with_the_seller_panel(self, client, placed):
        response = client.get("/orders", headers=BUYER)

        assert response.status_code == 200
        orders = {order["seller_id"]: order for order in response.json()}
        shirt = orders["seller-001"]
        assert shirt["product_name"] == "Linen Shirt"
        assert shirt["status"] == "pending"
        assert shirt["payment_method"] == "bank_transfer"
        assert Decimal(shirt["total_price"]) == Decimal("10.00")
        assert shirt["counterpart"] == {"side": "seller", "display_name": "Sam's Linens", "email": "sam@example.com"}
        assert shirt["actions"] == []

    def test_seller_sees_only_their_orders_with_actions(self, client, placed):
        [order] = client.get("/orders", headers=SELLER).json()

        assert order["order_id"] == placed["seller-001"]
        assert order["actions"] == ["confirm"]
        assert order["counterpart"]["side"] == "buyer"
        assert order["counterpart"]["display_name"] == "Bea Buyer"

    def test_uninvolved_user_sees_nothing(self, client, placed):
        response = client.get("/orders", headers={"X-User-Id": "someone", "X-User-Role": "buyer"})
        assert response.json() == []


class TestStatusChanges:
    def test_seller_confirms_then_completes(self, client, placed):
        order_id = placed["seller-001"]

        response = client.post(f"/orders/{order_id}/confirm", headers=SELLER)
        assert response.status_code == 200
        assert response.json() == {"order_id": order_id, "status": "confirmed"}

        [order] = client.get("/orders", headers=SELLER).json()
        assert order["actions"] == ["complete"]

        response = client.post(f"/orders/{order_id}/complete", headers=SELLER)
        assert response.json()["status"] == "completed"

        [order] = client.get("/orders", headers=SELLER).json()
        assert order["actions"] == []

    def test_complete_before_confirm_conflicts(self, client, placed):
        response = client.post(f"/orders/{placed['seller-001']}/complete", headers=SELLER)
        assert response.status_code == 409

    def test_buyer_cannot_confirm(self, client, placed):
        response = client.post(f"/orders/{placed['seller-001']}/confirm", headers=BUYER)
        assert response.status_code == 409

    def test_other_seller_cannot_confirm(self, client, placed):
        response = client.post(f"/orders/{placed['seller-001']}/confirm", headers=OTHER_SELLER)
        assert response.status_code == 409

    def test_unknown_order(self, client):
        assert client.post("/orders/missing/confirm", headers=SELLER).status_code == 404


class TestSummaries:
    def test_seller_summary_follows_status_changes(self, client, placed):
        client.post(f"/orders/{placed['seller-001']}/confirm", headers=SELLER)

        response = client.get("/orders/summary", headers=SELLER)

        assert response.json() == {"total": 1, "pending": 0, "confirmed": 1, "completed": 0}

    def test_admin_totals(self, client, placed):
        response = client.get("/admin/orders/totals", headers=ADMIN)

        assert response.status_code == 200
        assert response.json() == {"total": 2, "pending": 2, "confirmed": 0, "completed": 0}

    def test_totals_are_admin_only(self, client, placed):
        assert client.get("/admin/orders/totals", headers=SELLER).status_code == 403


class TestAdminOrders:
    def test_admin_sees_every_order_with_both_parties(self, client, placed):
        response = client.get("/admin/orders", headers=ADMIN)

        assert response.status_code == 200
        rows = {row["order_id"]: row for row in response.json()}
        assert set(rows) == set(placed.values())
        scarf = rows[placed["seller-002"]]
        assert scarf["buyer_name"] == "Bea Buyer"
        assert scarf["seller_name"] == "Kim Seller"
        assert scarf["seller_brand_name"] is None

    def test_non_admins_are_forbidden(self, client, placed):
        assert client.get("/admin/orders", headers=BUYER).status_code == 403
        assert client.get("/admin/orders", headers=SELLER).status_code == 403


class TestDirectorySync:
    def test_member_and_product_push(self, client):
        response = client.put(
            "/directory/members/seller-009",
            json={"name": "Nia", "email": "nia@example.com", "role": "seller", "brand_name": "Nia Knits"},
        )
        assert response.status_code == 200

        response = client.put(
            "/directory/products/p9",
            json={"name": "Knit Cap", "price": "12.00", "seller_id": "seller-009", "stock": 2},
        )
        assert response.status_code == 200

        added = client.post("/cart/items", json={"product_id": "p9"}, headers=BUYER)
        assert added.json()["items"][0]["max_quantity"] == 2

    def test_negative_stock_is_rejected(self, client):
        response = client.put(
            "/directory/products/p9",
            json={"name": "Knit Cap", "price": "12.00", "seller_id": "seller-009", "stock": -1},
        )
        assert response.status_code == 422
