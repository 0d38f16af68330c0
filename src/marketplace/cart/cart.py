"""Shopping cart: a client-local, immutable list of product lines.

The cart never talks to the order service. Every mutation is a pure function
from one ``Cart`` to the next, and ``CartSession`` persists the result. A line
snapshots the product's price and stock at the moment it was first added;
``max_quantity`` is that stock and caps the line's quantity from then on.
"""

from decimal import Decimal as D

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Decimal, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.value_object
class CartLine:
    """One product in the cart, with the quantity the buyer wants."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255, sanitize=False)
    unit_price = Decimal(required=True, min_value=0)
    image_url = String(max_length=2048, sanitize=False)
    seller_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    max_quantity = Integer(required=True, min_value=1)

    @invariant.post
    def quantity_must_not_exceed_stock_ceiling(self):
        if self.quantity > self.max_quantity:
            raise ValidationError(
                {"quantity": [f"Quantity {self.quantity} exceeds the available {self.max_quantity}"]}
            )

    @property
    def line_total(self) -> D:
        return self.unit_price * self.quantity

    # Wire format of the persisted cart slot
    def to_storage(self) -> dict:
        return {
            "id": str(self.product_id),
            "name": self.name,
            "price": str(self.unit_price),
            "image_url": self.image_url,
            "seller_id": str(self.seller_id),
            "quantity": self.quantity,
            "max_quantity": self.max_quantity,
        }

    @classmethod
    def from_storage(cls, data: dict) -> "CartLine":
        return cls(
            product_id=data["id"],
            name=data["name"],
            unit_price=data["price"],
            image_url=data.get("image_url"),
            seller_id=data["seller_id"],
            quantity=data["quantity"],
            max_quantity=data["max_quantity"],
        )


class Cart:
    """Ordered cart lines, at most one per product.

    Instances are never modified; every operation returns a new ``Cart`` (or
    the same one when nothing changes).
    """

    __slots__ = ("_lines",)

    def __init__(self, lines=()):
        lines = tuple(lines)
        seen = set()
        for line in lines:
            if line.product_id in seen:
                raise ValidationError({"lines": [f"Product {line.product_id} appears more than once"]})
            seen.add(line.product_id)
        self._lines = lines

    @classmethod
    def empty(cls) -> "Cart":
        return cls()

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def lines(self) -> tuple:
        return self._lines

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def grand_total(self) -> D:
        return sum((line.line_total for line in self._lines), D("0"))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def seller_ids(self) -> set:
        return {line.seller_id for line in self._lines}

    def line_for(self, product_id):
        return next((line for line in self._lines if line.product_id == str(product_id)), None)

    def __iter__(self):
        return iter(self._lines)

    def __len__(self):
        return len(self._lines)

    def __eq__(self, other):
        if not isinstance(other, Cart):
            return NotImplemented
        return self._lines == other._lines

    def __hash__(self):
        return hash(self._lines)

    def __repr__(self):
        return f"<Cart: {len(self._lines)} line(s), total {self.grand_total}>"

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def with_item(self, product) -> "Cart":
        """Add one unit of ``product``.

        An existing line grows by one up to its stored ceiling, after which
        the cart is returned unchanged. A new line starts at quantity 1 with
        the product's current stock as its ceiling.
        """
        existing = self.line_for(product.product_id)
        if existing is not None:
            if existing.quantity >= existing.max_quantity:
                return self
            return self._replacing(existing, existing.replace(quantity=existing.quantity + 1))

        if (product.stock or 0) < 1:
            raise ValidationError({"product_id": [f"Product {product.product_id} is out of stock"]})

        line = CartLine(
            product_id=str(product.product_id),
            name=product.name,
            unit_price=product.price,
            image_url=product.image_url,
            seller_id=str(product.seller_id),
            quantity=1,
            max_quantity=product.stock,
        )
        return Cart(self._lines + (line,))

    def with_quantity(self, product_id, quantity) -> "Cart":
        """Set a line's quantity, clamped to its ceiling. Values below 1 are ignored."""
        if quantity < 1:
            return self
        existing = self.line_for(product_id)
        if existing is None:
            return self
        quantity = min(quantity, existing.max_quantity)
        if quantity == existing.quantity:
            return self
        return self._replacing(existing, existing.replace(quantity=quantity))

    def without(self, product_id) -> "Cart":
        if self.line_for(product_id) is None:
            return self
        return Cart(line for line in self._lines if line.product_id != str(product_id))

    def cleared(self) -> "Cart":
        return Cart.empty()

    def _replacing(self, old, new) -> "Cart":
        return Cart(new if line is old else line for line in self._lines)
