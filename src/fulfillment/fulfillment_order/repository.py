"""Repository for the FulfillmentOrder aggregate."""

from datetime import datetime

from fulfillment.domain import fulfillment
from fulfillment.fulfillment_order.fulfillment_order import FulfillmentOrder
from fulfillment.fulfillment_order.transitions import FulfillmentStatus


@fulfillment.repository(part_of=FulfillmentOrder)
class FulfillmentOrderRepository:
    def find_by_order_id(self, order_id: str) -> FulfillmentOrder | None:
        return self._dao.query.filter(order_id=str(order_id)).all().first

    def find_page(self, status: str | None, offset: int, limit: int):
        """One page of orders, newest first. The result set carries the full ``total``."""
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        return query.order_by("-created_at").offset(offset).limit(limit).all()

    def find_requiring_attention(self, pending_before: datetime) -> list[FulfillmentOrder]:
        """Orders in Issue, plus orders still Pending since before ``pending_before``."""
        issues = (
            self._dao.query.filter(status=FulfillmentStatus.ISSUE.value)
            .order_by("-created_at")
            .limit(None)
            .all()
            .items
        )
        stale = (
            self._dao.query.filter(
                status=FulfillmentStatus.PENDING.value,
                created_at__lt=pending_before,
            )
            .order_by("created_at")
            .limit(None)
            .all()
            .items
        )
        return [*issues, *stale]

    def count_by_status(self) -> dict[str, int]:
        """Number of orders in every status, zero included."""
        return {status.value: self._dao.query.filter(status=status.value).all().total for status in FulfillmentStatus}
