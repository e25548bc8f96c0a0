"""Catalogue application service: role checks, commands and stock levels.

Product rows and stock levels live in different stores, so every read model
returned here joins the product with its ledger level.
"""

import structlog
from protean.utils.globals import current_domain

from storefront.access.policy import Actor, require_elevated, require_product_owner, require_seller
from storefront.catalogue.management import AddProduct, UpdateProduct
from storefront.catalogue.product import Product, load_product
from storefront.errors import InvalidInput
from storefront.inventory.ledger import get_ledger

logger = structlog.get_logger(__name__)


def product_view(product: Product, stock: int | None = None) -> dict:
    if stock is None:
        stock = get_ledger().levels([product.id]).get(str(product.id), 0)
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "category": product.category,
        "price": product.price,
        "is_active": product.is_active,
        "seller_id": str(product.seller_id),
        "stock": stock,
    }


def add_product(actor: Actor, name, price, stock=0, description=None, category=None) -> dict:
    require_elevated(actor, "add products")
    if stock is None or stock < 0:
        raise InvalidInput({"stock": ["Stock cannot be negative"]})

    product_id = current_domain.process(
        AddProduct(name=name, description=description, category=category, price=price, seller_id=actor.user_id),
        asynchronous=False,
    )
    get_ledger().stock(product_id, stock)

    logger.info("Product added", product_id=product_id, seller_id=actor.user_id, stock=stock)
    return product_view(load_product(product_id), stock)


def update_product(
    actor: Actor, product_id, name=None, description=None, category=None, price=None, is_active=None
) -> dict:
    product = load_product(product_id)
    require_product_owner(actor, product)

    current_domain.process(
        UpdateProduct(
            product_id=str(product.id),
            name=name,
            description=description,
            category=category,
            price=price,
            is_active=is_active,
        ),
        asynchronous=False,
    )
    return product_view(load_product(product_id))


def set_stock(actor: Actor, product_id, stock: int) -> dict:
    """Overwrite the on-hand level. Edits are absolute, not deltas."""
    product = load_product(product_id)
    require_product_owner(actor, product, "change stock for this product")

    get_ledger().stock(product.id, stock)
    logger.info("Stock level set", product_id=str(product.id), stock=stock, actor=actor.user_id)
    return product_view(product, stock)


def get_product(product_id) -> dict:
    return product_view(load_product(product_id))


def _views(products) -> list[dict]:
    levels = get_ledger().levels([p.id for p in products])
    return [product_view(p, levels.get(str(p.id), 0)) for p in products]


def _price(value, field):
    if value is None:
        return None
    if value < 0:
        raise InvalidInput({field: ["Price bound cannot be negative"]})
    return value


def list_products(
    search=None, category=None, min_price=None, max_price=None, seller_id=None, include_inactive=False
) -> list[dict]:
    """Catalogue listing, newest first, narrowed by any filters given."""
    products = current_domain.repository_for(Product).matching(
        search=search,
        category=category or None,
        min_price=_price(min_price, "min_price"),
        max_price=_price(max_price, "max_price"),
        seller_id=str(seller_id) if seller_id else None,
        is_active=None if include_inactive else True,
    )
    return _views(products)


def seller_products(actor: Actor) -> list[dict]:
    """Every product the seller lists, active or not, newest first."""
    require_seller(actor, "list seller products")
    return _views(current_domain.repository_for(Product).matching(seller_id=actor.user_id))
