"""Fulfillment bounded context: Dropship Order Synchronization.

Tracks a dropshipped customer order through its supplier lifecycle and keeps
the fulfillment record, the customer-facing order and the shipment record
consistent at every status transition. Uses CQRS: each command runs in one
unit of work, and notifications go out only after it commits.
"""

from protean.domain import Domain

from fulfillment.utils.logging import configure_logging

configure_logging()

# Domain Composition Root
fulfillment = Domain(name="fulfillment")
