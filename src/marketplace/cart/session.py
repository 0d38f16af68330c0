"""Cart session: the in-memory cart of one viewer, written through to its slot.

Every mutation computes the next ``Cart`` and saves it before returning, so
the slot and the session never disagree.
"""

from marketplace.cart.cart import Cart
from marketplace.cart.store import CartStore
from marketplace.domain import logger


class CartSession:
    def __init__(self, store: CartStore, cart: Cart | None = None):
        self.store = store
        self.cart = cart if cart is not None else store.load()

    @property
    def key(self) -> str:
        return self.store.key

    def _commit(self, cart: Cart) -> Cart:
        if cart is not self.cart:
            self.store.save(cart)
            self.cart = cart
        return self.cart

    def add_item(self, product) -> Cart:
        cart = self._commit(self.cart.with_item(product))
        logger.debug("cart_item_added", key=self.key, product_id=str(product.product_id))
        return cart

    def set_quantity(self, product_id, quantity: int) -> Cart:
        return self._commit(self.cart.with_quantity(product_id, quantity))

    def remove_item(self, product_id) -> Cart:
        return self._commit(self.cart.without(product_id))

    def clear(self) -> Cart:
        self.store.save(Cart.empty())
        self.cart = Cart.empty()
        return self.cart
