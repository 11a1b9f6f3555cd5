"""Notifier port: abstract interface for fulfillment notices."""

from abc import ABC, abstractmethod
from datetime import datetime

from fulfillment.order.customer_order import CustomerOrder


class NotificationDeliveryError(Exception):
    """A notice could not be handed to its delivery channel."""


class NotifierPort(ABC):
    """Abstract interface for fulfillment notice adapters.

    Implementations raise ``NotificationDeliveryError`` when a notice is not
    accepted for delivery.
    """

    @abstractmethod
    def send_shipping_notice(
        self,
        order: CustomerOrder,
        tracking_number: str,
        carrier: str | None = None,
        tracking_url: str | None = None,
        estimated_delivery: datetime | None = None,
    ) -> None:
        """Tell the customer their order is on its way."""
        ...

    @abstractmethod
    def send_delivery_notice(self, order: CustomerOrder) -> None:
        """Tell the customer their order arrived."""
        ...

    @abstractmethod
    def send_issue_notice(self, order: CustomerOrder, description: str) -> None:
        """Alert store operations that the order needs attention."""
        ...
