"""Cart persistence in a client-local key-value slot.

The slot holds the cart as a JSON list of line objects::

    [{"id", "name", "price", "image_url", "seller_id", "quantity", "max_quantity"}]

Reads fail open: anything that cannot be parsed into a valid ``Cart`` is
treated as an empty cart, so a corrupted slot never blocks the buyer.
"""

import json
from typing import Protocol

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart, CartLine
from marketplace.domain import logger

_DEFAULT_KEY = "cart"


class CartStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryCartStorage:
    """Process-local slot storage, one string value per key."""

    def __init__(self):
        self._slots: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value

    def clear(self) -> None:
        self._slots.clear()


def configured_key() -> str:
    """The base slot name from the domain's ``[custom]`` config."""
    return getattr(current_domain, "CART_STORAGE_KEY", _DEFAULT_KEY)


def slot_for(user_id, base_key: str | None = None) -> str:
    """Per-viewer slot name, e.g. ``cart:user-42``."""
    return f"{base_key or configured_key()}:{user_id}"


class CartStore:
    def __init__(self, storage: CartStorage, key: str | None = None):
        self.storage = storage
        self.key = key or configured_key()

    def load(self) -> Cart:
        raw = self.storage.get(self.key)
        if raw is None:
            return Cart.empty()

        try:
            data = json.loads(raw)
        except (ValueError, TypeError, RecursionError):
            logger.warning("cart_slot_unparseable", key=self.key)
            return Cart.empty()

        if not isinstance(data, list):
            logger.warning("cart_slot_malformed", key=self.key, reason="not a list")
            return Cart.empty()

        try:
            return Cart(CartLine.from_storage(item) for item in data)
        except (ValidationError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("cart_slot_malformed", key=self.key, reason=str(exc))
            return Cart.empty()

    def save(self, cart: Cart) -> None:
        self.storage.set(self.key, json.dumps([line.to_storage() for line in cart]))
