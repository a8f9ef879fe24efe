"""Order placement: command and handler.

Placement checks every requested line against live stock, prices the
order, records it, takes the stock and empties the buyer's cart. All of
it happens in the handler's Unit of Work: one failing line means nothing
is written, and a product changed concurrently by another order fails the
commit with ``ExpectedVersionError`` rather than overselling.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.account.user import User
from storefront.catalogue.product import Product
from storefront.domain import logger, storefront
from storefront.ordering.order import Order, PaymentMethod
from storefront.ordering.pricing import price_order
from storefront.shopping.cart import Cart


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    shipping_address_id = Identifier(required=True)
    payment_method = String(required=True, max_length=10)
    coupon_code = String(max_length=50)
    items = Text(required=True)  # JSON: list of {product_id, quantity, size, color_name, color_hex}


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        requested = json.loads(command.items) if isinstance(command.items, str) else command.items
        if not requested:
            raise ValidationError({"items": ["Cart is empty"]})

        if command.payment_method not in {m.value for m in PaymentMethod}:
            raise ValidationError({"payment_method": [f"Unsupported payment method: {command.payment_method}"]})

        user = current_domain.repository_for(User).get(command.user_id)
        try:
            address = user.find_address(command.shipping_address_id)
        except ObjectNotFoundError as exc:
            raise ObjectNotFoundError("Shipping address not found") from exc

        product_repo = current_domain.repository_for(Product)
        products = {}
        order_items = []
        items_price = 0.0

        for line in requested:
            product_id = str(line["product_id"])
            if product_id not in products:
                products[product_id] = product_repo.fetch(product_id)
            product = products[product_id]

            quantity = int(line.get("quantity", 1))
            # Refuses without writing when the size is short
            product.reserve(line["size"], quantity)

            order_items.append(
                {
                    "product_id": product_id,
                    "name": product.name,
                    "image": product.images[0] if product.images else None,
                    "quantity": quantity,
                    "size": line["size"],
                    "color_name": line.get("color_name"),
                    "color_hex": line.get("color_hex"),
                    "price": product.price,
                }
            )
            items_price += product.price * quantity

        order = Order.place(
            user_id=command.user_id,
            items=order_items,
            shipping_address=address.snapshot(),
            payment_method=command.payment_method,
            pricing=price_order(items_price, command.coupon_code),
            coupon_code=command.coupon_code,
        )
        current_domain.repository_for(Order).add(order)

        for product in products.values():
            product_repo.add(product)

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.for_user(command.user_id)
        if cart is not None and cart.items:
            cart.clear()
            cart_repo.add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            total_amount=order.total_amount,
        )
        return str(order.id)
