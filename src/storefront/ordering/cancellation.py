"""Order cancellation: command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import logger, storefront
from storefront.errors import PermissionDenied
from storefront.ordering.order import Order


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = Text()


def owned_order(order_id, user_id, action="view") -> Order:
    """Load an order, refusing when it belongs to somebody else."""
    order = current_domain.repository_for(Order).fetch(order_id)
    if str(order.user_id) != str(user_id):
        raise PermissionDenied(f"Not authorized to {action} this order")
    return order


def restock(order: Order):
    """Hand every line's quantity back to its product's size stock."""
    product_repo = current_domain.repository_for(Product)
    products = {}
    for item in order.items:
        product_id = str(item.product_id)
        if product_id not in products:
            try:
                products[product_id] = product_repo.get(product_id)
            except ObjectNotFoundError:
                logger.warning("restock_skipped", order_id=str(order.id), product_id=product_id)
                continue
        products[product_id].release(item.size, item.quantity)

    for product in products.values():
        product_repo.add(product)


def cancel_and_restock(order: Order, reason=None):
    order.cancel(reason)
    restock(order)
    current_domain.repository_for(Order).add(order)
    logger.info("order_cancelled", order_id=str(order.id), order_number=order.order_number)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = owned_order(command.order_id, command.user_id, action="cancel")
        cancel_and_restock(order, command.reason)
