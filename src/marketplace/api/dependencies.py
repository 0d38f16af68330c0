"""Request-scoped dependencies: the viewer and their cart session."""

from fastapi import Depends, Header

from marketplace.access.viewer import Role, Viewer
from marketplace.cart.session import CartSession
from marketplace.cart.store import CartStore, MemoryCartStorage, slot_for
from marketplace.errors import Unauthorized

# Process-wide slot storage. Override ``cart_storage`` to plug in another backend.
_storage = MemoryCartStorage()


def cart_storage():
    return _storage


def current_viewer(
    x_user_id: str = Header(..., min_length=1),
    x_user_role: str = Header(...),
) -> Viewer:
    try:
        role = Role(x_user_role)
    except ValueError:
        raise Unauthorized(f"Unknown role {x_user_role!r}") from None
    return Viewer.of(x_user_id, role)


def cart_session(viewer: Viewer = Depends(current_viewer), storage=Depends(cart_storage)) -> CartSession:
    return CartSession(CartStore(storage, slot_for(viewer.user_id)))
