import json

import pytest
from protean.utils.globals import current_domain


@pytest.fixture()
def tee(make_product):
    return make_product(name="Classic Tee", price=300.0, stock={"M": 5, "L": 3})


@pytest.fixture()
def jeans(make_product):
    return make_product(name="Slim Jeans", price=1000.0, stock={"32": 2, "34": 1}, colors=("Indigo",))


@pytest.fixture()
def place_order(user):
    """Place an order for ``user`` shipping to their default address. Returns the order id."""
    from storefront.ordering.placement import PlaceOrder

    def _place(lines, payment_method="cod", coupon_code=None, buyer=None):
        buyer = buyer or user
        items = [
            {"product_id": str(product.id), "quantity": quantity, "size": size}
            for product, quantity, size in lines
        ]
        command = PlaceOrder(
            user_id=buyer.id,
            shipping_address_id=buyer.addresses[0].id,
            payment_method=payment_method,
            coupon_code=coupon_code,
            items=json.dumps(items),
        )
        return current_domain.process(command, asynchronous=False)

    return _place


@pytest.fixture()
def orders():
    from storefront.ordering.order import Order

    return current_domain.repository_for(Order)


@pytest.fixture()
def products():
    from storefront.catalogue.product import Product

    return current_domain.repository_for(Product)
