"""CustomerOrder aggregate: the customer-facing order as seen by fulfillment.

The storefront owns the full order; this domain reads its identity, contact
and line items, and writes only the projected status with its timestamps.
"""

from datetime import UTC, datetime

from protean import atomic_change
from protean.fields import DateTime, Float, HasMany, Integer, String

from fulfillment.domain import fulfillment
from fulfillment.fulfillment_order.transitions import CustomerOrderStatus

# Customer status -> timestamp field stamped the first time the status is reached
_STATUS_TIMESTAMPS = {
    CustomerOrderStatus.SHIPPED: "shipped_at",
    CustomerOrderStatus.DELIVERED: "delivered_at",
    CustomerOrderStatus.CANCELLED: "cancelled_at",
}


@fulfillment.entity(part_of="CustomerOrder")
class CustomerOrderItem:
    product_name = String(required=True, max_length=255)
    variant_name = String(max_length=255)
    sku = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)


@fulfillment.aggregate
class CustomerOrder:
    order_number = String(required=True, max_length=50)
    customer_email = String(max_length=254)
    customer_name = String(max_length=200)
    status = String(
        choices=CustomerOrderStatus,
        default=CustomerOrderStatus.PENDING.value,
    )
    items = HasMany(CustomerOrderItem)

    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()

    created_at = DateTime()
    updated_at = DateTime()

    def apply_fulfillment_status(self, status: CustomerOrderStatus, at: datetime | None = None) -> None:
        """Mirror a projected fulfillment status, keeping existing timestamps."""
        now = at or datetime.now(UTC)
        timestamp_field = _STATUS_TIMESTAMPS.get(status)
        with atomic_change(self):
            self.status = status.value
            if timestamp_field and getattr(self, timestamp_field) is None:
                setattr(self, timestamp_field, now)
            self.updated_at = now
