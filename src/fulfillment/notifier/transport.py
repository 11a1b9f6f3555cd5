"""Outbound mail transport used by the email notifier.

``InMemoryOutbox`` is the default transport: it keeps every accepted message
so that staff tooling and tests can inspect what would have been sent.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from itertools import count

from fulfillment.notifier.port import NotificationDeliveryError


@dataclass(frozen=True)
class OutgoingMail:
    to: str
    subject: str
    body: str
    from_email: str
    order_number: str | None = None


class MailTransport(ABC):
    @abstractmethod
    def deliver(self, mail: OutgoingMail) -> str:
        """Hand ``mail`` over and return the transport's message id.

        Raises ``NotificationDeliveryError`` when the message is refused.
        """
        ...


class InMemoryOutbox(MailTransport):
    def __init__(self):
        self.delivered: list[OutgoingMail] = []
        self._refusal: str | None = None
        self._ids = count(1)

    def refuse(self, reason: str = "Mail transport rejected the message") -> None:
        """Refuse every message until ``clear`` is called."""
        self._refusal = reason

    def deliver(self, mail: OutgoingMail) -> str:
        if self._refusal:
            raise NotificationDeliveryError(self._refusal)
        self.delivered.append(mail)
        return f"outbox-{next(self._ids)}"

    def sent_to(self, address: str) -> list[OutgoingMail]:
        return [mail for mail in self.delivered if mail.to == address]

    def clear(self) -> None:
        self.delivered.clear()
        self._refusal = None
