"""Fulfillment synchronization: status transition and tracking commands.

A status change touches up to three records: the FulfillmentOrder itself,
the CustomerOrder when the new status is customer-visible, and the Shipment
on delivery. The handler loads every record it needs, runs every check, and
only then mutates. All writes share the unit of work protean opens around
the handler, so they commit together or not at all.

Customer notices are not sent here; the caller dispatches them once the
command has returned.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from fulfillment.domain import fulfillment
from fulfillment.fulfillment_order.errors import ConflictingWriteError
from fulfillment.fulfillment_order.fulfillment_order import FulfillmentOrder
from fulfillment.fulfillment_order.transitions import FulfillmentStatus, customer_status_for
from fulfillment.order.customer_order import CustomerOrder
from fulfillment.order.shipment import Shipment

logger = structlog.get_logger(__name__)


@fulfillment.command(part_of="FulfillmentOrder")
class TransitionStatus:
    """Move a fulfillment order to a new status."""

    fulfillment_order_id = Identifier(required=True)
    status = String(required=True, choices=FulfillmentStatus)
    issue_description = Text()
    supplier_order_id = String(max_length=100)
    # Status the caller last saw; a mismatch means another writer got there first
    expected_status = String(choices=FulfillmentStatus)


@fulfillment.command(part_of="FulfillmentOrder")
class AttachTracking:
    """Record carrier tracking details on the fulfillment order and its shipment."""

    fulfillment_order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=255)
    carrier = String(max_length=100)
    tracking_url = String(max_length=500)
    estimated_delivery = DateTime()


@fulfillment.command(part_of="FulfillmentOrder")
class MarkShipped:
    """Attach tracking and move to Shipped as one change."""

    fulfillment_order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=255)
    carrier = String(max_length=100)
    tracking_url = String(max_length=500)
    estimated_delivery = DateTime()
    expected_status = String(choices=FulfillmentStatus)


@fulfillment.command_handler(part_of=FulfillmentOrder)
class FulfillmentSynchronizer:
    @handle(TransitionStatus)
    def transition_status(self, command):
        ff = current_domain.repository_for(FulfillmentOrder).get(command.fulfillment_order_id)
        target = FulfillmentStatus(command.status)
        customer_order, shipment = self._prepare_transition(
            ff,
            target,
            expected_status=command.expected_status,
            issue_description=command.issue_description,
            supplier_order_id=command.supplier_order_id,
        )

        now = datetime.now(UTC)
        previous = ff.transition_to(
            target,
            issue_description=command.issue_description,
            supplier_order_id=command.supplier_order_id,
            at=now,
        )
        self._save(ff, customer_order, shipment, target, now)

        logger.info(
            "Fulfillment status changed",
            fulfillment_order_id=str(ff.id),
            order_id=str(ff.order_id),
            previous_status=previous.value,
            status=target.value,
        )
        return str(ff.id)

    @handle(AttachTracking)
    def attach_tracking(self, command):
        ff = current_domain.repository_for(FulfillmentOrder).get(command.fulfillment_order_id)
        shipment = current_domain.repository_for(Shipment).get_by_order_id(ff.order_id)

        now = datetime.now(UTC)
        self._record_tracking(ff, shipment, command, now)
        current_domain.repository_for(FulfillmentOrder).add(ff)
        current_domain.repository_for(Shipment).add(shipment)

        logger.info(
            "Tracking attached",
            fulfillment_order_id=str(ff.id),
            order_id=str(ff.order_id),
            tracking_number=ff.tracking_number,
            carrier=ff.carrier,
        )
        return str(ff.id)

    @handle(MarkShipped)
    def mark_shipped(self, command):
        ff = current_domain.repository_for(FulfillmentOrder).get(command.fulfillment_order_id)
        customer_order, _ = self._prepare_transition(
            ff,
            FulfillmentStatus.SHIPPED,
            expected_status=command.expected_status,
        )
        shipment = current_domain.repository_for(Shipment).get_by_order_id(ff.order_id)

        now = datetime.now(UTC)
        self._record_tracking(ff, shipment, command, now)
        previous = ff.transition_to(FulfillmentStatus.SHIPPED, at=now)
        self._save(ff, customer_order, shipment, FulfillmentStatus.SHIPPED, now)

        logger.info(
            "Fulfillment order shipped",
            fulfillment_order_id=str(ff.id),
            order_id=str(ff.order_id),
            previous_status=previous.value,
            tracking_number=ff.tracking_number,
            carrier=ff.carrier,
        )
        return str(ff.id)

    def _prepare_transition(
        self,
        ff: FulfillmentOrder,
        target: FulfillmentStatus,
        expected_status: str | None = None,
        issue_description: str | None = None,
        supplier_order_id: str | None = None,
    ) -> tuple[CustomerOrder | None, Shipment | None]:
        """Run every check and load the records the move will touch. Mutates nothing."""
        current = FulfillmentStatus(ff.status)
        if expected_status and expected_status != current.value:
            raise ConflictingWriteError(current.value, target.value, expected_status)

        ff.check_transition(
            target,
            issue_description=issue_description,
            supplier_order_id=supplier_order_id,
        )

        customer_order = None
        if customer_status_for(target) is not None:
            customer_order = current_domain.repository_for(CustomerOrder).get(ff.order_id)
        shipment = None
        if target == FulfillmentStatus.DELIVERED:
            shipment = current_domain.repository_for(Shipment).get_by_order_id(ff.order_id)
        return customer_order, shipment

    def _record_tracking(self, ff: FulfillmentOrder, shipment: Shipment, command, now: datetime) -> None:
        ff.attach_tracking(
            tracking_number=command.tracking_number,
            carrier=command.carrier,
            tracking_url=command.tracking_url,
            estimated_delivery=command.estimated_delivery,
            at=now,
        )
        shipment.record_tracking(
            tracking_number=ff.tracking_number,
            carrier=ff.carrier,
            tracking_url=ff.tracking_url,
            estimated_delivery=ff.estimated_delivery,
            at=now,
        )

    def _save(
        self,
        ff: FulfillmentOrder,
        customer_order: CustomerOrder | None,
        shipment: Shipment | None,
        target: FulfillmentStatus,
        now: datetime,
    ) -> None:
        current_domain.repository_for(FulfillmentOrder).add(ff)
        if customer_order is not None:
            customer_order.apply_fulfillment_status(customer_status_for(target), at=now)
            current_domain.repository_for(CustomerOrder).add(customer_order)
        if shipment is not None:
            if target == FulfillmentStatus.DELIVERED:
                shipment.record_delivery(at=now)
            current_domain.repository_for(Shipment).add(shipment)
