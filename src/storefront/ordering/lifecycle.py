"""Administrative status changes: command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.ordering.cancellation import cancel_and_restock
from storefront.ordering.order import Order, OrderStatus


@storefront.command(part_of="Order")
class AdvanceOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    note = Text()


@storefront.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(AdvanceOrderStatus)
    def advance_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)

        # Cancelling hands stock back, whoever asks for it
        if command.status == OrderStatus.CANCELLED.value:
            cancel_and_restock(order, command.note)
            return

        previous = order.status
        order.advance_to(command.status, command.note)
        repo.add(order)
        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
        )
