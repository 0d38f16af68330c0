"""Directory cards: read-side copies of users and products.

The identity and catalog services own these records. They push snapshots
here so that order listings can show who the counterpart is and checkout
can re-check stock without calling back.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Decimal, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.access.viewer import Role
from marketplace.domain import marketplace


@marketplace.projection
class MemberCard:
    member_id = Identifier(identifier=True, required=True)
    name = String(max_length=255, sanitize=False)
    email = String(max_length=255)
    role = String(choices=Role, max_length=20)
    brand_name = String(max_length=255, sanitize=False)
    updated_at = DateTime()


@marketplace.projection
class ProductCard:
    product_id = Identifier(identifier=True, required=True)
    name = String(required=True, max_length=255, sanitize=False)
    price = Decimal(required=True, min_value=0)
    image_url = String(max_length=2048, sanitize=False)
    seller_id = Identifier(required=True)
    stock = Integer(default=0, min_value=0)
    updated_at = DateTime()


def _get_or_none(card_cls, card_id):
    try:
        return current_domain.repository_for(card_cls).get(str(card_id))
    except ObjectNotFoundError:
        return None


def member_card(member_id):
    return _get_or_none(MemberCard, member_id)


def product_card(product_id):
    return _get_or_none(ProductCard, product_id)


def record_member(member_id, name=None, email=None, role=None, brand_name=None) -> MemberCard:
    """Insert or refresh the card for one user."""
    if isinstance(role, Role):
        role = role.value
    repo = current_domain.repository_for(MemberCard)
    card = member_card(member_id)
    if card is None:
        card = MemberCard(member_id=str(member_id))
    card.name = name
    card.email = email
    card.role = role
    card.brand_name = brand_name
    card.updated_at = datetime.now(UTC)
    repo.add(card)
    return card


def record_product(product_id, name, price, seller_id, stock=0, image_url=None) -> ProductCard:
    """Insert or refresh the card for one product, including its current stock."""
    repo = current_domain.repository_for(ProductCard)
    card = product_card(product_id)
    if card is None:
        card = ProductCard(product_id=str(product_id), name=name, price=price, seller_id=str(seller_id))
    card.name = name
    card.price = price
    card.seller_id = str(seller_id)
    card.stock = stock
    card.image_url = image_url
    card.updated_at = datetime.now(UTC)
    repo.add(card)
    return card


def stock_levels(product_ids) -> dict:
    """Current stock per product id, for the ids that have a card."""
    ids = [str(product_id) for product_id in product_ids]
    if not ids:
        return {}
    cards = current_domain.repository_for(ProductCard)._dao.query.filter(product_id__in=ids).limit(None).all().items
    return {card.product_id: card.stock for card in cards}
