"""Transition table for the dropship fulfillment lifecycle.

State Machine:
    PENDING → PLACED → CONFIRMED → SHIPPED → DELIVERED
    {PENDING, PLACED, CONFIRMED} → CANCELLED
    {PENDING, PLACED, CONFIRMED, SHIPPED} → ISSUE
    ISSUE → {PENDING, PLACED, CONFIRMED, SHIPPED, CANCELLED}
    DELIVERED, CANCELLED, REFUNDED → (terminal)

Only SHIPPED, DELIVERED and CANCELLED are visible on the customer order;
every other fulfillment status leaves the customer order untouched.
"""

from enum import Enum
from types import MappingProxyType


class FulfillmentStatus(Enum):
    PENDING = "Pending"
    PLACED = "Placed"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"
    ISSUE = "Issue"


class CustomerOrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


ALLOWED_TRANSITIONS = MappingProxyType(
    {
        FulfillmentStatus.PENDING: frozenset(
            {FulfillmentStatus.PLACED, FulfillmentStatus.CANCELLED, FulfillmentStatus.ISSUE}
        ),
        FulfillmentStatus.PLACED: frozenset(
            {FulfillmentStatus.CONFIRMED, FulfillmentStatus.CANCELLED, FulfillmentStatus.ISSUE}
        ),
        FulfillmentStatus.CONFIRMED: frozenset(
            {FulfillmentStatus.SHIPPED, FulfillmentStatus.CANCELLED, FulfillmentStatus.ISSUE}
        ),
        FulfillmentStatus.SHIPPED: frozenset({FulfillmentStatus.DELIVERED, FulfillmentStatus.ISSUE}),
        FulfillmentStatus.DELIVERED: frozenset(),  # terminal
        FulfillmentStatus.CANCELLED: frozenset(),  # terminal
        FulfillmentStatus.REFUNDED: frozenset(),  # terminal
        FulfillmentStatus.ISSUE: frozenset(
            {
                FulfillmentStatus.PENDING,
                FulfillmentStatus.PLACED,
                FulfillmentStatus.CONFIRMED,
                FulfillmentStatus.SHIPPED,
                FulfillmentStatus.CANCELLED,
            }
        ),
    }
)

CUSTOMER_STATUS_PROJECTION = MappingProxyType(
    {
        FulfillmentStatus.SHIPPED: CustomerOrderStatus.SHIPPED,
        FulfillmentStatus.DELIVERED: CustomerOrderStatus.DELIVERED,
        FulfillmentStatus.CANCELLED: CustomerOrderStatus.CANCELLED,
    }
)

TERMINAL_STATUSES = frozenset(status for status, targets in ALLOWED_TRANSITIONS.items() if not targets)


def allowed_targets(current: FulfillmentStatus) -> frozenset[FulfillmentStatus]:
    return ALLOWED_TRANSITIONS.get(current, frozenset())


def can_transition(current: FulfillmentStatus, requested: FulfillmentStatus) -> bool:
    """True if ``requested`` is reachable from ``current`` in one step."""
    return requested in allowed_targets(current)


def customer_status_for(status: FulfillmentStatus) -> CustomerOrderStatus | None:
    """Customer-facing status for a fulfillment status, or None if not projected."""
    return CUSTOMER_STATUS_PROJECTION.get(status)


def is_terminal(status: FulfillmentStatus) -> bool:
    return status in TERMINAL_STATUSES
