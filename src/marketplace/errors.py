"""Marketplace error hierarchy.

Every error subclasses a Protean exception, so the standard FastAPI handlers
in ``protean.integrations.fastapi`` map them to HTTP status codes. The two
that need a different code (403 and 503) get their own handlers in
``marketplace.api.errors``.
"""

from protean.exceptions import (
    DatabaseError,
    InvalidOperationError,
    InvalidStateError,
    ValidationError,
)


class Unauthorized(InvalidOperationError):
    """The viewer's role does not permit the requested operation."""


class EmptyCart(ValidationError):
    """Checkout was requested on a cart with no lines."""

    def __init__(self):
        super().__init__({"cart": ["Cart is empty"]})


class IllegalTransition(InvalidStateError):
    """The requested status change is not the next legal step for this viewer."""


class OperationInProgress(InvalidStateError):
    """Another checkout or status change for the same key has not finished yet."""


class PersistenceError(DatabaseError):
    """The order store rejected or failed the request. Nothing was changed."""
