"""Eligibility check run before an order is placed with the supplier.

Errors block placement; warnings are surfaced to staff but do not.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from fulfillment.catalog.product_source import ProductSource
from fulfillment.fulfillment_order.fulfillment_order import FulfillmentOrder
from fulfillment.fulfillment_order.transitions import FulfillmentStatus, is_terminal

_TERMINAL_ERRORS = {
    FulfillmentStatus.CANCELLED: "Order has been cancelled",
    FulfillmentStatus.DELIVERED: "Order has already been delivered",
    FulfillmentStatus.REFUNDED: "Order has been refunded",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a fulfillment eligibility check."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def validate_fulfillment(order: FulfillmentOrder, sources: Mapping[str, ProductSource]) -> ValidationResult:
    """Check ``order`` against its product sources, keyed by source id."""
    errors: list[str] = []
    warnings: list[str] = []

    status = FulfillmentStatus(order.status)
    if is_terminal(status):
        errors.append(_TERMINAL_ERRORS[status])

    items = order.items or []
    if not items:
        errors.append("Order has no items to fulfill")

    for item in items:
        source = sources.get(str(item.product_source_id))
        if source is None:
            errors.append("Missing product source for item in order")
            continue

        if source.is_discontinued:
            errors.append(f"Product {source.product_slug} has been discontinued")
        if source.is_unavailable:
            warnings.append(f"Product {source.product_slug} may be unavailable from the supplier")
        if source.is_out_of_stock:
            warnings.append(f"Product {source.product_slug} is out of stock")
        if not item.supplier_sku and not source.supplier_sku:
            errors.append("Missing supplier SKU for item in order")

    address = order.shipping_address
    if address is None or not address.is_complete():
        errors.append("Incomplete shipping address")

    if not order.customer_email:
        errors.append("Missing customer email")

    return ValidationResult(errors=errors, warnings=warnings)
