"""Best-effort notices after a fulfillment change has committed.

Nothing raised here reaches the caller. The committed transition is the
source of truth; a failed notice is logged and dropped.
"""

import structlog
from protean.utils.globals import current_domain

from fulfillment.fulfillment_order.fulfillment_order import FulfillmentOrder
from fulfillment.fulfillment_order.transitions import FulfillmentStatus
from fulfillment.notifier import get_notifier
from fulfillment.notifier.templates import TRACKING_PENDING
from fulfillment.order.customer_order import CustomerOrder

logger = structlog.get_logger(__name__)

SHIPPING_NOTICE = "shipping"
DELIVERY_NOTICE = "delivery"
ISSUE_NOTICE = "issue"


def _send_notice(ff: FulfillmentOrder, kind: str) -> None:
    order = current_domain.repository_for(CustomerOrder).get(ff.order_id)
    notifier = get_notifier()
    if kind == SHIPPING_NOTICE:
        notifier.send_shipping_notice(
            order,
            ff.tracking_number or TRACKING_PENDING,
            carrier=ff.carrier,
            tracking_url=ff.tracking_url,
            estimated_delivery=ff.estimated_delivery,
        )
    elif kind == DELIVERY_NOTICE:
        notifier.send_delivery_notice(order)
    elif kind == ISSUE_NOTICE:
        notifier.send_issue_notice(order, ff.issue_description)


def _notice_kind(status: FulfillmentStatus) -> str | None:
    if status == FulfillmentStatus.SHIPPED:
        return SHIPPING_NOTICE
    if status == FulfillmentStatus.DELIVERED:
        return DELIVERY_NOTICE
    if status == FulfillmentStatus.ISSUE:
        return ISSUE_NOTICE
    return None


def _deliver(ff: FulfillmentOrder, kind: str) -> str | None:
    try:
        _send_notice(ff, kind)
    except Exception as e:
        logger.error(
            "Fulfillment notification failed",
            fulfillment_order_id=str(ff.id),
            order_id=str(ff.order_id),
            notice=kind,
            error=str(e),
        )
        return None
    return kind


def dispatch_status_notification(ff: FulfillmentOrder, notify_customer: bool | None = None) -> str | None:
    """Send the notice matching the order's current status.

    ``notify_customer=False`` suppresses the notice. Returns the kind of
    notice sent, or None when nothing went out.
    """
    kind = _notice_kind(FulfillmentStatus(ff.status))
    if kind is None:
        return None
    if notify_customer is False:
        logger.info(
            "Fulfillment notification suppressed",
            fulfillment_order_id=str(ff.id),
            status=ff.status,
        )
        return None
    return _deliver(ff, kind)


def dispatch_tracking_notification(ff: FulfillmentOrder) -> str | None:
    """Send a shipping notice for freshly attached tracking details."""
    return _deliver(ff, SHIPPING_NOTICE)
