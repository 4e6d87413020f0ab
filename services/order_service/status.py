"""
Order status lifecycle.

Pending -> Shipped -> Delivered, with Cancelled reachable from Pending or
Shipped. Delivered and Cancelled are terminal. Re-applying the current status
is allowed for the non-terminal states and changes nothing.
"""
from enum import Enum

from shared.errors import InvalidTransitionError, ValidationError


class OrderStatus(str, Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.PENDING, OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.SHIPPED: frozenset({OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError("status", f"invalid status: {value}") from None


def ensure_transition(current: OrderStatus, new: OrderStatus) -> None:
    """Raise InvalidTransitionError unless `current` may move to `new`."""
    if new in ALLOWED_TRANSITIONS[current]:
        return
    if current is OrderStatus.CANCELLED:
        raise InvalidTransitionError("cancelled orders cannot be updated")
    if current is OrderStatus.DELIVERED:
        raise InvalidTransitionError("delivered orders cannot be updated")
    if current is OrderStatus.SHIPPED and new is OrderStatus.PENDING:
        raise InvalidTransitionError("shipped orders cannot go back to pending status")
    raise InvalidTransitionError(f"cannot move order from {current.value} to {new.value}")
