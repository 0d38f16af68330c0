"""Tests for the order gateway: batch writes and joined, role-filtered reads."""

import time
from decimal import Decimal

import pytest
from marketplace.access.viewer import Role, Viewer
from marketplace.directory.cards import record_member, record_product
from marketplace.errors import IllegalTransition
from marketplace.order.gateway import OrderGateway
from marketplace.order.lifecycle import OrderStatus
from marketplace.order.placement import OrderRequest


def _request(buyer_id, seller_id, product_id="prod-001", quantity=1, total_price="10.00"):
    return OrderRequest(
        buyer_id=buyer_id,
        seller_id=seller_id,
        product_id=product_id,
        quantity=quantity,
        total_price=Decimal(total_price),
        payment_method="cash",
    )


def _place(*requests):
    return OrderGateway().insert_orders(requests)


@pytest.fixture()
def directory():
    record_member("buyer-001", name="Bea Buyer", email="bea@example.com", role=Role.BUYER)
    record_member("seller-001", name="Sam Seller", email="sam@example.com", role=Role.SELLER, brand_name="Sam's Linens")
    record_product("prod-001", name="Linen Shirt", price=Decimal("10.00"), seller_id="seller-001", stock=3)


class TestInsertOrders:
    def test_returns_one_id_per_request(self):
        ids = _place(_request("b1", "s1"), _request("b1", "s2", product_id="prod-002"))
        assert len(ids) == 2
        assert len(set(ids)) == 2

    def test_empty_batch_writes_nothing(self):
        assert OrderGateway().insert_orders([]) == []
        assert OrderGateway().fetch_all_orders() == []


class TestUpdateStatus:
    def test_pending_is_never_a_target(self, seller):
        [order_id] = _place(_request("b1", "seller-001"))
        with pytest.raises(IllegalTransition):
            OrderGateway().update_order_status(order_id, OrderStatus.PENDING, seller)

    def test_applies_a_legal_step(self, seller):
        [order_id] = _place(_request("b1", "seller-001"))
        order = OrderGateway().update_order_status(order_id, "confirmed", seller)
        assert order.status == OrderStatus.CONFIRMED.value


class TestFetchForViewer:
    def test_only_participant_orders_are_returned(self):
        _place(_request("u1", "s1"))
        _place(_request("u2", "u1"))
        _place(_request("u2", "s1"))

        views = OrderGateway().fetch_orders_for_viewer(Viewer.of("u1", Role.BUYER))

        assert sorted((v.buyer_id, v.seller_id) for v in views) == [("u1", "s1"), ("u2", "u1")]

    def test_newest_first(self, buyer):
        [older] = _place(_request("buyer-001", "s1"))
        time.sleep(0.01)
        [newer] = _place(_request("buyer-001", "s2"))

        views = OrderGateway().fetch_orders_for_viewer(buyer)

        assert [v.order_id for v in views] == [newer, older]

    def test_rows_are_joined_with_directory_cards(self, directory, buyer):
        _place(_request("buyer-001", "seller-001", quantity=2, total_price="20.00"))

        [view] = OrderGateway().fetch_orders_for_viewer(buyer)

        assert view.product_name == "Linen Shirt"
        assert view.buyer_name == "Bea Buyer"
        assert view.buyer_email == "bea@example.com"
        assert view.seller_name == "Sam Seller"
        assert view.seller_brand_name == "Sam's Linens"
        assert view.total_price == Decimal("20.00")
        assert view.status == OrderStatus.PENDING.value

    def test_missing_cards_leave_fields_empty(self, buyer):
        _place(_request("buyer-001", "seller-xyz", product_id="prod-xyz"))

        [view] = OrderGateway().fetch_orders_for_viewer(buyer)

        assert view.product_name is None
        assert view.seller_name is None


class TestFetchAll:
    def test_admin_surface_is_unrestricted(self):
        _place(_request("u1", "s1"), _request("u2", "s2", product_id="prod-002"))
        _place(_request("u3", "s3"))

        assert len(OrderGateway().fetch_all_orders()) == 3
