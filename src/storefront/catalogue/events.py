"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    total_stock = Integer(required=True)
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockReserved:
    """Units of one size were taken out of stock for an order."""

    __version__ = 1

    product_id = Identifier(required=True)
    size = String(required=True)
    quantity = Integer(required=True)
    remaining = Integer(required=True)


@storefront.event(part_of="Product")
class StockReleased:
    """Units of one size were returned to stock, e.g. by a cancellation."""

    __version__ = 1

    product_id = Identifier(required=True)
    size = String(required=True)
    quantity = Integer(required=True)
    remaining = Integer(required=True)


@storefront.event(part_of="Product")
class ReviewAdded:
    __version__ = 1

    product_id = Identifier(required=True)
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    average_rating = Float(required=True)
