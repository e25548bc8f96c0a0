"""Cart management: commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import load_product
from storefront.domain import storefront
from storefront.errors import InsufficientStock, InvalidQuantity
from storefront.inventory.ledger import get_ledger


@storefront.command(part_of="Cart")
class CreateCart:
    user_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class AddToCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)


@storefront.command(part_of="Cart")
class UpdateCartItem:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    cart_id = Identifier(required=True)


def _check_stock(product, requested):
    available = get_ledger().available(product.id)
    if requested > available:
        raise InsufficientStock(product.id, requested, available, product_name=product.name)


@storefront.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = Cart.create(user_id=command.user_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)

        product = load_product(command.product_id, active_only=True)
        if command.quantity is None or command.quantity < 1:
            raise InvalidQuantity(command.quantity)
        _check_stock(product, cart.quantity_of(product.id) + command.quantity)

        item = cart.add_item(product_id=str(product.id), quantity=command.quantity)
        repo.add(cart)
        return str(item.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)

        if command.quantity is None or command.quantity < 1:
            raise InvalidQuantity(command.quantity)
        item = cart.item(command.item_id)
        _check_stock(load_product(item.product_id), command.quantity)

        cart.update_item_quantity(item_id=command.item_id, new_quantity=command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.clear()
        repo.add(cart)
