"""Order stages — the fixed lifecycle every order moves through.

    PLACED → CONFIRMED → PROCESSING → PACKED → SHIPPED → OUT_FOR_DELIVERY → DELIVERED

CANCELLED is the alternate terminal state, reachable from any stage that is
not itself terminal. An open order may be moved to any other stage, earlier ones
included.
"""

from enum import Enum

from protean.exceptions import ValidationError


class OrderStage(Enum):
    PLACED = "PLACED"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    PACKED = "PACKED"
    SHIPPED = "SHIPPED"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


LIFECYCLE = [
    OrderStage.PLACED.value,
    OrderStage.CONFIRMED.value,
    OrderStage.PROCESSING.value,
    OrderStage.PACKED.value,
    OrderStage.SHIPPED.value,
    OrderStage.OUT_FOR_DELIVERY.value,
    OrderStage.DELIVERED.value,
]

ALL_STAGES = [*LIFECYCLE, OrderStage.CANCELLED.value]

TERMINAL_STAGES = frozenset({OrderStage.DELIVERED.value, OrderStage.CANCELLED.value})

# Customers may only withdraw an order before it is being worked on
CUSTOMER_CANCELLABLE_STAGES = frozenset({OrderStage.PLACED.value, OrderStage.CONFIRMED.value})

STAGE_DETAILS = {
    OrderStage.PLACED.value: ("Order Placed", "We have received your order."),
    OrderStage.CONFIRMED.value: ("Confirmed", "Order details have been verified."),
    OrderStage.PROCESSING.value: ("Processing", "We are getting your items ready."),
    OrderStage.PACKED.value: ("Packed", "Your items are packed and ready to ship."),
    OrderStage.SHIPPED.value: ("Shipped", "Your package is on the way."),
    OrderStage.OUT_FOR_DELIVERY.value: ("Out for Delivery", "Our agent is near your location."),
    OrderStage.DELIVERED.value: ("Delivered", "Package delivered successfully."),
    OrderStage.CANCELLED.value: ("Cancelled", "This order has been cancelled."),
}


def stage_label(stage):
    return STAGE_DETAILS.get(stage, (stage, ""))[0]


def stage_description(stage):
    return STAGE_DETAILS.get(stage, (stage, ""))[1]


def stage_index(stage):
    """Position of ``stage`` in the lifecycle, or -1 if it is not part of it."""
    try:
        return LIFECYCLE.index(stage)
    except ValueError:
        return -1


def is_known_stage(stage):
    return stage in ALL_STAGES


def is_terminal(stage):
    return stage in TERMINAL_STAGES


def next_stage(stage):
    """The stage right after ``stage``, or None for terminal and unknown stages."""
    if is_terminal(stage):
        return None
    index = stage_index(stage)
    if index == -1:
        return None
    return LIFECYCLE[index + 1]


def check_transition(current, target):
    """Raise ValidationError unless an order may move from ``current`` to ``target``."""
    if is_terminal(current):
        raise ValidationError({"stage": [f"Order is already {current} and can no longer change stage"]})

    if not is_known_stage(target):
        raise ValidationError({"stage": [f"Unknown stage {target!r}"]})

    # Any other stage is allowed, earlier ones included
    if target == current:
        raise ValidationError({"stage": [f"Order is already {current}"]})
