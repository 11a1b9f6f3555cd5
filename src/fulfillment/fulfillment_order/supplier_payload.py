"""Read-only projections of a fulfillment order for the supplier side.

``prepare_supplier_payload`` assembles everything needed to place the order
with the supplier; ``calculate_order_cost`` breaks down what we owe them.
Neither writes anything.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from fulfillment import config
from fulfillment.catalog.product_source import ProductSource
from fulfillment.fulfillment_order.fulfillment_order import FulfillmentOrder
from fulfillment.order.customer_order import CustomerOrder


@dataclass(frozen=True)
class SupplierAddress:
    first_name: str
    last_name: str
    line1: str
    city: str
    state: str
    postal_code: str
    country: str = "US"
    line2: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class SupplierLineItem:
    supplier_product_id: str | None
    supplier_sku: str | None
    supplier_url: str | None
    quantity: int
    unit_cost: float


@dataclass(frozen=True)
class SupplierOrderPayload:
    fulfillment_order_id: str
    order_number: str
    customer_email: str | None
    customer_phone: str | None
    shipping_address: SupplierAddress
    items: list[SupplierLineItem]
    total_cost: float
    shipping_cost: float


@dataclass(frozen=True)
class OrderCost:
    items_cost: float
    shipping_cost: float
    total_cost: float
    currency: str = config.SUPPLIER_CURRENCY


def _supplier_address(order: FulfillmentOrder) -> SupplierAddress:
    address = order.shipping_address
    if address is None:
        return SupplierAddress(first_name="", last_name="", line1="", city="", state="", postal_code="")
    return SupplierAddress(
        first_name=address.first_name or "",
        last_name=address.last_name or "",
        line1=address.line1 or "",
        line2=address.line2 or None,
        city=address.city or "",
        state=address.state or "",
        postal_code=address.postal_code or "",
        country=address.country or "US",
        phone=address.phone or None,
    )


def prepare_supplier_payload(
    order: FulfillmentOrder,
    customer_order: CustomerOrder,
    sources: Mapping[str, ProductSource],
) -> SupplierOrderPayload:
    items = []
    for item in order.items or []:
        source = sources.get(str(item.product_source_id))
        items.append(
            SupplierLineItem(
                supplier_product_id=source.supplier_product_id if source else None,
                supplier_sku=item.supplier_sku or (source.supplier_sku if source else None),
                supplier_url=source.supplier_url if source else None,
                quantity=item.quantity,
                unit_cost=item.unit_cost,
            )
        )

    return SupplierOrderPayload(
        fulfillment_order_id=str(order.id),
        order_number=customer_order.order_number,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        shipping_address=_supplier_address(order),
        items=items,
        total_cost=order.total_cost,
        shipping_cost=order.shipping_cost,
    )


def calculate_order_cost(order: FulfillmentOrder) -> OrderCost:
    return OrderCost(
        items_cost=order.items_cost,
        shipping_cost=order.shipping_cost,
        total_cost=order.total_cost,
    )
