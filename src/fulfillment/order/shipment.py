"""Shipment aggregate: carrier tracking for a customer order (1:1 on order_id)."""

from datetime import UTC, datetime

from protean import atomic_change
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, String

from fulfillment.domain import fulfillment


@fulfillment.aggregate
class Shipment:
    order_id = Identifier(required=True, unique=True)
    tracking_number = String(max_length=255)
    carrier = String(max_length=100)
    tracking_url = String(max_length=500)
    estimated_delivery = DateTime()
    actual_delivery_at = DateTime()
    updated_at = DateTime()

    def record_tracking(
        self,
        tracking_number: str,
        carrier: str | None,
        tracking_url: str | None,
        estimated_delivery: datetime | None = None,
        at: datetime | None = None,
    ) -> None:
        with atomic_change(self):
            self.tracking_number = tracking_number
            self.carrier = carrier
            self.tracking_url = tracking_url
            self.estimated_delivery = estimated_delivery
            self.updated_at = at or datetime.now(UTC)

    def record_delivery(self, at: datetime | None = None) -> None:
        """Stamp the actual delivery time once."""
        now = at or datetime.now(UTC)
        with atomic_change(self):
            if self.actual_delivery_at is None:
                self.actual_delivery_at = now
            self.updated_at = now


@fulfillment.repository(part_of=Shipment)
class ShipmentRepository:
    def find_by_order_id(self, order_id: str) -> Shipment | None:
        return self._dao.query.filter(order_id=str(order_id)).all().first

    def get_by_order_id(self, order_id: str) -> Shipment:
        shipment = self.find_by_order_id(order_id)
        if shipment is None:
            raise ObjectNotFoundError(f"Shipment for order `{order_id}` does not exist")
        return shipment
