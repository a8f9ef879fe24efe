"""Shared BDD fixtures and step definitions for the order lifecycle."""

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then

from storefront.ordering.cancellation import CancelOrder
from storefront.ordering.lifecycle import AdvanceOrderStatus

_DELIVERY_PATH = ("confirmed", "processing", "shipped", "out_for_delivery", "delivered")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def shelf():
    """Products created by the scenario, by name."""
    return {}


@pytest.fixture()
def advance():
    def _advance(order_id, status):
        current_domain.process(AdvanceOrderStatus(order_id=order_id, status=status), asynchronous=False)

    return _advance


@pytest.fixture()
def cancel():
    def _cancel(order_id, user_id, reason=None):
        current_domain.process(CancelOrder(order_id=order_id, user_id=user_id, reason=reason), asynchronous=False)

    return _cancel


@pytest.fixture()
def attempt(error):
    """Run a step action, capturing a ValidationError instead of failing."""

    def _attempt(action, *args, **kwargs):
        try:
            action(*args, **kwargs)
        except ValidationError as exc:
            error["exc"] = exc

    return _attempt


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:d} with {count:d} in size "{size}"'))
def _(make_product, shelf, name, price, count, size):
    shelf[name] = make_product(name=name, price=float(price), stock={size: count})


@given("a verified shopper with a saved address", target_fixture="shopper")
def _(user):
    return user


@given(
    parsers.cfparse('the shopper has ordered {quantity:d} of "{name}" in size "{size}"'),
    target_fixture="order_id",
)
def _(place_order, shopper, shelf, quantity, name, size):
    return place_order([(shelf[name], quantity, size)], buyer=shopper)


@given(parsers.cfparse('the order has moved to "{status}"'))
def _(advance, order_id, status):
    advance(order_id, status)


@given("the order has been delivered")
def _(advance, order_id):
    for status in _DELIVERY_PATH:
        advance(order_id, status)


@given("the shopper has cancelled the order")
def _(cancel, order_id, shopper):
    cancel(order_id, shopper.id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}"'))
def _(orders, order_id, status):
    assert orders.get(order_id).status == status


@then(parsers.cfparse('"{name}" has {count:d} left in size "{size}"'))
def _(products, shelf, name, count, size):
    assert products.get(shelf[name].id).stock_for(size) == count


@then(parsers.cfparse('the request fails with "{message}"'))
def _(error, message):
    assert error["exc"] is not None
    assert message in str(error["exc"])
