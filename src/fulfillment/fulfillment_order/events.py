"""Fulfillment order domain events: immutable facts about supplier-side changes.

All events are past tense and versioned. They are stored alongside the
aggregate when its unit of work commits.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from fulfillment.domain import fulfillment


@fulfillment.event(part_of="FulfillmentOrder")
class FulfillmentOrderCreated:
    """A fulfillment order was opened for a customer order needing supplier sourcing."""

    __version__ = 1

    fulfillment_order_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_email = String()
    item_count = Integer(required=True)
    total_cost = Float(required=True)
    shipping_cost = Float(required=True)
    created_at = DateTime(required=True)


@fulfillment.event(part_of="FulfillmentOrder")
class FulfillmentStatusChanged:
    """The fulfillment order moved along an edge of the transition table."""

    __version__ = 1

    fulfillment_order_id = Identifier(required=True)
    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    supplier_order_id = String()
    issue_description = Text()
    changed_at = DateTime(required=True)


@fulfillment.event(part_of="FulfillmentOrder")
class TrackingAttached:
    """Carrier tracking details were recorded for the fulfillment order."""

    __version__ = 1

    fulfillment_order_id = Identifier(required=True)
    order_id = Identifier(required=True)
    tracking_number = String(required=True)
    carrier = String()
    tracking_url = String()
    estimated_delivery = DateTime()
    attached_at = DateTime(required=True)
