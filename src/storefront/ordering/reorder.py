"""Reorder: put the lines of a past order back into the cart."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import logger, storefront
from storefront.ordering.cancellation import owned_order
from storefront.ordering.order import Order
from storefront.shopping.cart import Cart
from storefront.shopping.items import cart_for


@storefront.command(part_of="Order")
class Reorder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class ReorderHandler:
    @handle(Reorder)
    def reorder(self, command):
        """Returns the number of lines that made it into the cart."""
        previous = owned_order(command.order_id, command.user_id, action="reorder")
        product_repo = current_domain.repository_for(Product)
        cart = cart_for(command.user_id)

        added = 0
        for item in previous.items:
            try:
                product = product_repo.get(item.product_id)
            except ObjectNotFoundError:
                continue

            # Skipped lines are reported only through the count
            if not product.is_active or product.stock_for(item.size) <= 0:
                continue

            cart.add_item(
                product_id=item.product_id,
                quantity=item.quantity,
                size=item.size,
                price=product.price,
                color_name=item.color_name,
                color_hex=item.color_hex,
            )
            added += 1

        current_domain.repository_for(Cart).add(cart)
        logger.info("order_reordered", order_id=str(previous.id), lines_added=added)
        return added
