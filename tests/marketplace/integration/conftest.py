from decimal import Decimal

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from marketplace.api.dependencies import cart_storage
from marketplace.api.wiring import install
from marketplace.cart.store import MemoryCartStorage
from marketplace.directory.cards import record_member, record_product


@pytest.fixture()
def storage():
    return MemoryCartStorage()


@pytest.fixture()
def client(storage):
    app = install(FastAPI())
    app.dependency_overrides[cart_storage] = lambda: storage
    return TestClient(app)


@pytest.fixture()
def catalog():
    record_member("buyer-001", name="Bea Buyer", email="bea@example.com", role="buyer")
    record_member("seller-001", name="Sam Seller", email="sam@example.com", role="seller", brand_name="Sam's Linens")
    record_member("seller-002", name="Kim Seller", email="kim@example.com", role="seller")
    record_product("p1", name="Linen Shirt", price=Decimal("10.00"), seller_id="seller-001", stock=5)
    record_product("p2", name="Wool Scarf", price=Decimal("5.00"), seller_id="seller-002", stock=1)
    record_product("p0", name="Sold Out Hat", price=Decimal("8.00"), seller_id="seller-001", stock=0)
