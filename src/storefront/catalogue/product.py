"""Product aggregate: the sellable item a cart line points at.

Price and the active flag live here. On-hand stock is owned by the stock
ledger, keyed by product id, and is joined in by the read side.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.events import ProductAdded, ProductDeactivated, ProductPriceChanged
from storefront.domain import storefront
from storefront.errors import ProductNotFound


@storefront.aggregate
class Product:
    name: String(required=True, max_length=255)
    description: Text()
    category: String(max_length=100)
    price: Float(required=True, min_value=0.01)
    is_active: Boolean(default=True)
    seller_id: Identifier(required=True)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, price, seller_id, description=None, category=None):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            category=category,
            price=price,
            seller_id=seller_id,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                seller_id=str(seller_id),
                name=name,
                price=price,
            )
        )
        return product

    def update_details(self, name=None, description=None, category=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if category is not None:
            self.category = category
        self.updated_at = datetime.now(UTC)

    def change_price(self, new_price):
        previous_price = self.price
        self.price = new_price
        self.updated_at = datetime.now(UTC)
        if previous_price != new_price:
            self.raise_(
                ProductPriceChanged(
                    product_id=str(self.id),
                    previous_price=previous_price,
                    new_price=new_price,
                )
            )

    def activate(self):
        self.is_active = True
        self.updated_at = datetime.now(UTC)

    def deactivate(self):
        if self.is_active:
            self.is_active = False
            self.updated_at = datetime.now(UTC)
            self.raise_(ProductDeactivated(product_id=str(self.id)))


def load_product(product_id, active_only=False) -> Product:
    """Fetch a product, raising ProductNotFound if it is missing (or inactive)."""
    try:
        product = current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError:
        raise ProductNotFound(product_id) from None
    if active_only and not product.is_active:
        raise ProductNotFound(product_id)
    return product
