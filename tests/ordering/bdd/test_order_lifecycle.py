"""BDD tests for placing, advancing and cancelling orders."""

from pytest_bdd import parsers, scenarios, then, when

scenarios("features/order_lifecycle.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.cfparse('the shopper orders {quantity:d} of "{name}" in size "{size}"'),
    target_fixture="order_id",
)
def _(place_order, shopper, shelf, quantity, name, size):
    return place_order([(shelf[name], quantity, size)], buyer=shopper)


@when(parsers.cfparse('the order moves to "{status}"'))
def _(attempt, advance, order_id, status):
    attempt(advance, order_id, status)


@when(parsers.cfparse('the shopper cancels the order saying "{reason}"'))
def _(attempt, cancel, order_id, shopper, reason):
    attempt(cancel, order_id, shopper.id, reason=reason)


@when("the shopper cancels the order")
def _(attempt, cancel, order_id, shopper):
    attempt(cancel, order_id, shopper.id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order total is {total:d}"))
def _(orders, order_id, total):
    assert orders.get(order_id).total_amount == total


@then("the order records its delivery time")
def _(orders, order_id):
    assert orders.get(order_id).delivered_at is not None


@then(parsers.cfparse('the cancellation reason is "{reason}"'))
def _(orders, order_id, reason):
    assert orders.get(order_id).cancellation_reason == reason
