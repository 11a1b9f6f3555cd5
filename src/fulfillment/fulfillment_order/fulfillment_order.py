"""FulfillmentOrder aggregate (CQRS): the supplier-side lifecycle of a dropshipped order.

One FulfillmentOrder exists per customer order that needs supplier sourcing.
It is created in PENDING and afterwards changes only through the
synchronizer's commands. Legal moves come from ``transitions.ALLOWED_TRANSITIONS``;
the aggregate stamps each lifecycle timestamp once, never after a later stage
has been stamped.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from fulfillment import config
from fulfillment.domain import fulfillment
from fulfillment.fulfillment_order.errors import InvalidTransitionError
from fulfillment.fulfillment_order.events import (
    FulfillmentOrderCreated,
    FulfillmentStatusChanged,
    TrackingAttached,
)
from fulfillment.fulfillment_order.transitions import FulfillmentStatus, can_transition

# Stages in lifecycle order; a later stamp may never precede an earlier one.
_TIMESTAMP_ORDER = ("placed_at", "shipped_at", "delivered_at")

_STATUS_TIMESTAMP = {
    FulfillmentStatus.PLACED: "placed_at",
    FulfillmentStatus.SHIPPED: "shipped_at",
    FulfillmentStatus.DELIVERED: "delivered_at",
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@fulfillment.value_object(part_of="FulfillmentOrder")
class ShippingAddress:
    """Delivery address as captured at checkout.

    Every field is optional so that incomplete addresses can be stored and
    reported by the validator instead of failing at creation.
    """

    first_name = String(max_length=100)
    last_name = String(max_length=100)
    line1 = String(max_length=255)
    line2 = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=2, default="US")
    phone = String(max_length=30)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def is_complete(self) -> bool:
        return all((self.line1, self.city, self.state, self.postal_code))


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@fulfillment.entity(part_of="FulfillmentOrder")
class FulfillmentLineItem:
    """A single supplier line: what to buy, how many, and what it costs us."""

    order_item_id = Identifier(required=True)
    product_source_id = Identifier(required=True)
    supplier_sku = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_cost = Float(required=True, min_value=0.0)
    total_cost = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@fulfillment.aggregate
class FulfillmentOrder:
    order_id = Identifier(required=True)
    status = String(
        choices=FulfillmentStatus,
        default=FulfillmentStatus.PENDING.value,
    )

    # Supplier
    supplier_order_id = String(max_length=100)

    # Customer contact
    customer_email = String(max_length=254)
    customer_phone = String(max_length=30)
    shipping_address = ValueObject(ShippingAddress)

    # Carrier
    tracking_number = String(max_length=255)
    carrier = String(max_length=100)
    tracking_url = String(max_length=500)
    estimated_delivery = DateTime()

    # Lifecycle timestamps (set once)
    placed_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    actual_delivery_at = DateTime()

    issue_description = Text()

    # Supplier costs, fixed at creation
    total_cost = Float(required=True, min_value=0.0)
    shipping_cost = Float(required=True, min_value=0.0)

    items = HasMany(FulfillmentLineItem)

    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def issue_requires_description(self):
        if self.status != FulfillmentStatus.ISSUE.value:
            return
        description = (self.issue_description or "").strip()
        if len(description) < config.ISSUE_DESCRIPTION_MIN_LENGTH:
            raise ValidationError(
                {
                    "issue_description": [
                        f"Issue description must be at least {config.ISSUE_DESCRIPTION_MIN_LENGTH} characters"
                    ]
                }
            )

    @invariant.post
    def lifecycle_timestamps_are_monotonic(self):
        stamps = [(name, getattr(self, name)) for name in _TIMESTAMP_ORDER]
        stamps = [(name, value) for name, value in stamps if value is not None]
        for (earlier_name, earlier), (later_name, later) in zip(stamps, stamps[1:]):
            if later < earlier:
                raise ValidationError({later_name: [f"{later_name} cannot be earlier than {earlier_name}"]})

        if self.shipped_at and self.actual_delivery_at and self.actual_delivery_at < self.shipped_at:
            raise ValidationError({"actual_delivery_at": ["actual_delivery_at cannot be earlier than shipped_at"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_id: str,
        customer_email: str,
        items_data: list[dict],
        shipping_cost: float,
        shipping_address: dict | None = None,
        customer_phone: str | None = None,
    ):
        """Open a PENDING fulfillment order for a confirmed customer order."""
        now = datetime.now(UTC)
        items_cost = sum(item["total_cost"] for item in items_data)
        ff = cls(
            order_id=order_id,
            status=FulfillmentStatus.PENDING.value,
            customer_email=customer_email,
            customer_phone=customer_phone,
            shipping_address=ShippingAddress(**shipping_address) if shipping_address else None,
            total_cost=round(items_cost + shipping_cost, 2),
            shipping_cost=round(shipping_cost, 2),
            created_at=now,
            updated_at=now,
        )
        for item_data in items_data:
            ff.add_items(FulfillmentLineItem(**item_data))
        ff.raise_(
            FulfillmentOrderCreated(
                fulfillment_order_id=str(ff.id),
                order_id=order_id,
                customer_email=customer_email,
                item_count=len(items_data),
                total_cost=ff.total_cost,
                shipping_cost=ff.shipping_cost,
                created_at=now,
            )
        )
        return ff

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def assert_can_transition(self, target_status: FulfillmentStatus) -> None:
        current = FulfillmentStatus(self.status)
        if not can_transition(current, target_status):
            raise InvalidTransitionError(current.value, target_status.value)

    def check_transition(
        self,
        target_status: FulfillmentStatus,
        issue_description: str | None = None,
        supplier_order_id: str | None = None,
    ) -> tuple[str | None, str | None]:
        """Reject an illegal or incomplete move without touching the aggregate.

        Returns the normalized ``(issue_description, supplier_order_id)``.
        """
        self.assert_can_transition(target_status)

        description = None
        if target_status == FulfillmentStatus.ISSUE:
            description = (issue_description or "").strip()
            if len(description) < config.ISSUE_DESCRIPTION_MIN_LENGTH:
                raise ValidationError(
                    {
                        "issue_description": [
                            f"Issue description must be at least {config.ISSUE_DESCRIPTION_MIN_LENGTH} characters"
                        ]
                    }
                )

        supplier_order_id = (supplier_order_id or "").strip() or None
        if supplier_order_id and self.supplier_order_id and supplier_order_id != self.supplier_order_id:
            raise ValidationError(
                {"supplier_order_id": [f"Supplier order id is already set to {self.supplier_order_id}"]}
            )
        return description, supplier_order_id

    def _can_stamp(self, stamp: str) -> bool:
        """A stage is stamped only once, and never after a later stage was stamped."""
        later = _TIMESTAMP_ORDER[_TIMESTAMP_ORDER.index(stamp) :]
        return all(getattr(self, name) is None for name in later)

    def transition_to(
        self,
        target_status: FulfillmentStatus,
        issue_description: str | None = None,
        supplier_order_id: str | None = None,
        at: datetime | None = None,
    ) -> FulfillmentStatus:
        """Move to ``target_status`` and stamp the matching lifecycle timestamp.

        A rejected move leaves the aggregate exactly as it was. Returns the
        previous status.
        """
        previous = FulfillmentStatus(self.status)
        description, supplier_order_id = self.check_transition(
            target_status,
            issue_description=issue_description,
            supplier_order_id=supplier_order_id,
        )

        now = at or datetime.now(UTC)
        with atomic_change(self):
            self.status = target_status.value
            stamp = _STATUS_TIMESTAMP.get(target_status)
            if stamp and self._can_stamp(stamp):
                setattr(self, stamp, now)
            if target_status == FulfillmentStatus.DELIVERED and self.actual_delivery_at is None:
                self.actual_delivery_at = now
            if description is not None:
                self.issue_description = description
            if supplier_order_id and not self.supplier_order_id:
                self.supplier_order_id = supplier_order_id
            self.updated_at = now

        self.raise_(
            FulfillmentStatusChanged(
                fulfillment_order_id=str(self.id),
                order_id=str(self.order_id),
                previous_status=previous.value,
                new_status=target_status.value,
                supplier_order_id=self.supplier_order_id,
                issue_description=description,
                changed_at=now,
            )
        )
        return previous

    # -------------------------------------------------------------------
    # Tracking
    # -------------------------------------------------------------------
    def attach_tracking(
        self,
        tracking_number: str,
        carrier: str | None = None,
        tracking_url: str | None = None,
        estimated_delivery: datetime | None = None,
        at: datetime | None = None,
    ) -> None:
        """Record carrier tracking details, replacing any earlier ones. Allowed in any status."""
        tracking_number = (tracking_number or "").strip()
        if not tracking_number:
            raise ValidationError({"tracking_number": ["Tracking number is required"]})

        now = at or datetime.now(UTC)
        with atomic_change(self):
            self.tracking_number = tracking_number
            self.carrier = (carrier or "").strip() or None
            self.tracking_url = (tracking_url or "").strip() or None
            self.estimated_delivery = estimated_delivery
            self.updated_at = now

        self.raise_(
            TrackingAttached(
                fulfillment_order_id=str(self.id),
                order_id=str(self.order_id),
                tracking_number=self.tracking_number,
                carrier=self.carrier,
                tracking_url=self.tracking_url,
                estimated_delivery=self.estimated_delivery,
                attached_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def items_cost(self) -> float:
        return round(sum(item.total_cost for item in self.items or []), 2)
