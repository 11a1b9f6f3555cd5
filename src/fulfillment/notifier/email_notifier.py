"""Email notifier: renders fulfillment notices and hands them to a mail transport."""

import structlog

from fulfillment import config
from fulfillment.notifier.port import NotificationDeliveryError, NotifierPort
from fulfillment.notifier.templates import (
    DeliveryNoticeTemplate,
    IssueNoticeTemplate,
    ShippingNoticeTemplate,
)
from fulfillment.notifier.transport import InMemoryOutbox, MailTransport, OutgoingMail
from fulfillment.order.customer_order import CustomerOrder

logger = structlog.get_logger(__name__)


def _order_context(order: CustomerOrder) -> dict:
    return {
        "order_number": order.order_number,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "items": [
            {
                "product_name": item.product_name,
                "variant_name": item.variant_name,
                "quantity": item.quantity,
            }
            for item in order.items or []
        ],
    }


class EmailNotifier(NotifierPort):
    def __init__(self, transport: MailTransport | None = None):
        self.transport = transport or InMemoryOutbox()

    def send_shipping_notice(self, order, tracking_number, carrier=None, tracking_url=None, estimated_delivery=None):
        context = _order_context(order)
        context.update(
            tracking_number=tracking_number,
            carrier=carrier,
            tracking_url=tracking_url,
            estimated_delivery=estimated_delivery,
        )
        self._send(order.customer_email, ShippingNoticeTemplate.render(context), order)

    def send_delivery_notice(self, order):
        self._send(order.customer_email, DeliveryNoticeTemplate.render(_order_context(order)), order)

    def send_issue_notice(self, order, description):
        context = _order_context(order)
        context["description"] = description
        self._send(config.ADMIN_EMAIL, IssueNoticeTemplate.render(context), order)

    def _send(self, to: str | None, content: dict, order: CustomerOrder) -> None:
        if not to:
            raise NotificationDeliveryError(f"No recipient for order {order.order_number}")

        message_id = self.transport.deliver(
            OutgoingMail(
                to=to,
                subject=content["subject"],
                body=content["body"],
                from_email=config.FROM_EMAIL,
                order_number=order.order_number,
            )
        )
        logger.info(
            "Fulfillment notice sent",
            order_number=order.order_number,
            to=to,
            message_id=message_id,
        )
