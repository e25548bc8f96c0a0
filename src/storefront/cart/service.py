"""Cart application service.

Every mutation of a user's cart runs under that user's cart lock, so two
concurrent requests for the same cart are applied one after the other and
neither increment is lost.
"""

import structlog
from protean.utils.globals import current_domain

from storefront.access.policy import Actor
from storefront.cart.cart import Cart
from storefront.cart.items import AddToCart, ClearCart, CreateCart, RemoveFromCart, UpdateCartItem
from storefront.catalogue.product import Product
from storefront.inventory.ledger import get_ledger
from storefront.utils.locks import cart_locks

logger = structlog.get_logger(__name__)


def get_or_create(user_id) -> Cart:
    """The user's cart, created on first access."""
    repo = current_domain.repository_for(Cart)
    with cart_locks.hold(user_id):
        cart = repo.for_user(user_id)
        if cart is None:
            cart_id = current_domain.process(CreateCart(user_id=str(user_id)), asynchronous=False)
            cart = repo.get(cart_id)
            logger.debug("Cart created", user_id=str(user_id), cart_id=cart_id)
        return cart


def cart_view(cart: Cart) -> dict:
    """Cart lines joined with live product data, plus the live total."""
    product_repo = current_domain.repository_for(Product)
    products = {str(i.product_id): product_repo.get(str(i.product_id)) for i in cart.items}
    levels = get_ledger().levels(products.keys())

    items = [
        {
            "id": str(item.id),
            "product_id": str(item.product_id),
            "name": products[str(item.product_id)].name,
            "price": products[str(item.product_id)].price,
            "quantity": item.quantity,
            "stock": levels.get(str(item.product_id), 0),
            "is_active": products[str(item.product_id)].is_active,
            "line_total": round(products[str(item.product_id)].price * item.quantity, 2),
        }
        for item in cart.items
    ]
    return {
        "id": str(cart.id),
        "user_id": str(cart.user_id),
        "items": items,
        "total": cart.total({pid: p.price for pid, p in products.items()}),
    }


def view_cart(actor: Actor) -> dict:
    return cart_view(get_or_create(actor.user_id))


def total(actor: Actor) -> float:
    cart = get_or_create(actor.user_id)
    product_repo = current_domain.repository_for(Product)
    return cart.total({str(i.product_id): product_repo.get(str(i.product_id)).price for i in cart.items})


def add_item(actor: Actor, product_id, quantity=1) -> dict:
    with cart_locks.hold(actor.user_id):
        cart = get_or_create(actor.user_id)
        current_domain.process(
            AddToCart(cart_id=str(cart.id), product_id=str(product_id), quantity=quantity),
            asynchronous=False,
        )
        logger.info("Item added to cart", user_id=actor.user_id, product_id=str(product_id), quantity=quantity)
        return view_cart(actor)


def update_item(actor: Actor, item_id, quantity) -> dict:
    with cart_locks.hold(actor.user_id):
        cart = get_or_create(actor.user_id)
        current_domain.process(
            UpdateCartItem(cart_id=str(cart.id), item_id=str(item_id), quantity=quantity),
            asynchronous=False,
        )
        return view_cart(actor)


def remove_item(actor: Actor, item_id) -> dict:
    with cart_locks.hold(actor.user_id):
        cart = get_or_create(actor.user_id)
        current_domain.process(RemoveFromCart(cart_id=str(cart.id), item_id=str(item_id)), asynchronous=False)
        return view_cart(actor)


def clear(actor: Actor) -> dict:
    with cart_locks.hold(actor.user_id):
        cart = get_or_create(actor.user_id)
        current_domain.process(ClearCart(cart_id=str(cart.id)), asynchronous=False)
        return view_cart(actor)
