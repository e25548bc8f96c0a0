"""Role-based access predicates.

The caller's identity and role arrive pre-verified from the identity
provider as an ``Actor``. Every operation evaluates exactly one of these
predicates at its entry.
"""

from dataclasses import dataclass
from enum import Enum

from storefront.errors import NotAuthorized


class Role(Enum):
    USER = "USER"
    SELLER = "SELLER"
    ADMIN = "ADMIN"


_ELEVATED_ROLES = {Role.SELLER, Role.ADMIN}


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of an operation."""

    user_id: str
    role: Role = Role.USER

    @classmethod
    def of(cls, user_id, role="USER"):
        return cls(user_id=str(user_id), role=Role(str(role).upper()))


def is_elevated(actor: Actor) -> bool:
    return actor.role in _ELEVATED_ROLES


def require_elevated(actor: Actor, action: str) -> None:
    if not is_elevated(actor):
        raise NotAuthorized(action)


def require_admin(actor: Actor, action: str) -> None:
    if actor.role != Role.ADMIN:
        raise NotAuthorized(action)


def require_seller(actor: Actor, action: str) -> None:
    if actor.role != Role.SELLER:
        raise NotAuthorized(action)


def require_order_access(actor: Actor, order, action: str = "access this order") -> None:
    """Owner, or any seller/admin."""
    if str(order.user_id) != actor.user_id and not is_elevated(actor):
        raise NotAuthorized(action)


def require_order_owner(actor: Actor, order, action: str = "pay for this order") -> None:
    """Owner only. Elevated roles cannot settle another user's order."""
    if str(order.user_id) != actor.user_id:
        raise NotAuthorized(action)


def require_product_owner(actor: Actor, product, action: str = "modify this product") -> None:
    """The owning seller, or an admin."""
    if actor.role == Role.ADMIN:
        return
    if actor.role != Role.SELLER or str(product.seller_id) != actor.user_id:
        raise NotAuthorized(action)
