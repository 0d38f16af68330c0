"""Viewer identity and the closed set of marketplace roles.

A viewer is the authenticated user on whose behalf an operation runs. Every
role-dependent decision in the marketplace is a lookup into a table keyed by
``Role``. Such tables are built with ``covering_every_role`` so that adding a
role without deciding its behaviour fails at import time instead of silently
falling through at runtime.
"""

from enum import Enum

from protean.exceptions import IncorrectUsageError
from protean.fields import Identifier, String

from marketplace.domain import marketplace


class Role(Enum):
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


def covering_every_role(table, name="role table"):
    """Return ``table`` unchanged if it has an entry for every ``Role``."""
    missing = [role.value for role in Role if role not in table]
    if missing:
        raise IncorrectUsageError(f"{name} has no entry for roles: {', '.join(missing)}")
    return table


@marketplace.value_object
class Viewer:
    """The user an operation is performed for, with their marketplace role."""

    user_id = Identifier(required=True)
    role = String(required=True, choices=Role, max_length=20)

    @classmethod
    def of(cls, user_id, role):
        """Build a viewer from a role given either as ``Role`` or its string value."""
        if isinstance(role, Role):
            role = role.value
        return cls(user_id=str(user_id), role=role)

    @property
    def role_kind(self) -> Role:
        return Role(self.role)
