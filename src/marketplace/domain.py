"""Marketplace bounded context — Shopping Cart, Checkout and Order lifecycle.

Buyers fill a client-local cart, checkout converts it into one order per
cart line, and sellers advance their orders from pending through confirmed
to completed. Admins get an unrestricted read view.
"""

import structlog
from protean.domain import Domain

marketplace = Domain(name="marketplace")

logger = structlog.get_logger(__name__)
