"""BDD tests for customer cancellation."""

from ordering.order.cancellation import CancelOrder
from pytest_bdd import scenarios, when

scenarios("features/order_cancellation.feature")


@when("the customer cancels the order", target_fixture="order")
def _(order, order_id):
    return order.process(CancelOrder(order_id=order_id, reason="Changed my mind", cancelled_by="customer"))
