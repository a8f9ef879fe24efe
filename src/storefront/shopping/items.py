"""Cart line management: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.shopping.cart import Cart


@storefront.command(part_of="Cart")
class OpenCart:
    """Make sure the user has a cart, creating an empty one if needed."""

    user_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    size = String(required=True, max_length=20)
    color_name = String(max_length=50)
    color_hex = String(max_length=7)


@storefront.command(part_of="Cart")
class UpdateCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0)


@storefront.command(part_of="Cart")
class RemoveCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


def cart_for(user_id) -> Cart:
    """The user's cart, opened on first use. Not persisted until added to the repository."""
    cart = current_domain.repository_for(Cart).for_user(user_id)
    return cart if cart is not None else Cart.open(user_id)


@storefront.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(OpenCart)
    def open_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            cart = Cart.open(command.user_id)
            repo.add(cart)
        return str(cart.id)

    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).fetch(command.product_id)
        if not product.has_stock(command.size, command.quantity):
            raise ValidationError({"stock": ["Insufficient stock"]})

        cart = cart_for(command.user_id)
        item = cart.add_item(
            product_id=command.product_id,
            quantity=command.quantity,
            size=command.size,
            price=product.price,
            color_name=command.color_name,
            color_hex=command.color_hex,
        )
        current_domain.repository_for(Cart).add(cart)
        return str(item.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.owned_by(command.user_id)
        cart.update_quantity(command.item_id, command.quantity)
        repo.add(cart)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.owned_by(command.user_id)
        cart.remove_item(command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.owned_by(command.user_id)
        cart.clear()
        repo.add(cart)
