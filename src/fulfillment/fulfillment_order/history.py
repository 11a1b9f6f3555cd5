"""Fulfillment timeline derived from the order's lifecycle timestamps.

Only the happy-path stages are represented; Issue and Cancelled excursions
leave no timestamp and therefore no entry.
"""

from dataclasses import dataclass
from datetime import datetime

from fulfillment.fulfillment_order.fulfillment_order import FulfillmentOrder
from fulfillment.fulfillment_order.transitions import FulfillmentStatus


@dataclass(frozen=True)
class HistoryEntry:
    status: str
    timestamp: datetime
    note: str | None = None


def build_history(order: FulfillmentOrder) -> list[HistoryEntry]:
    history = []
    if order.created_at:
        history.append(HistoryEntry(FulfillmentStatus.PENDING.value, order.created_at, "Order created"))
    if order.placed_at:
        note = f"Supplier order: {order.supplier_order_id}" if order.supplier_order_id else None
        history.append(HistoryEntry(FulfillmentStatus.PLACED.value, order.placed_at, note))
    if order.shipped_at:
        note = f"Tracking: {order.tracking_number}" if order.tracking_number else None
        history.append(HistoryEntry(FulfillmentStatus.SHIPPED.value, order.shipped_at, note))
    if order.delivered_at:
        history.append(HistoryEntry(FulfillmentStatus.DELIVERED.value, order.delivered_at))
    return history
