"""Fulfillment order creation: command and handler.

Builds a PENDING fulfillment order from a customer order's line items and
the product sources they are dropshipped from.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from fulfillment import config
from fulfillment.catalog.product_source import ProductSource
from fulfillment.domain import fulfillment
from fulfillment.fulfillment_order.fulfillment_order import FulfillmentOrder

logger = structlog.get_logger(__name__)


def estimate_shipping_cost(item_count: int) -> float:
    """Base charge plus a surcharge for every line item after the first."""
    if item_count <= 0:
        return 0.0
    return round(config.BASE_SHIPPING_COST + (item_count - 1) * config.PER_ITEM_SHIPPING_COST, 2)


@fulfillment.command(part_of="FulfillmentOrder")
class CreateFulfillmentOrder:
    """Open a fulfillment order for a customer order."""

    order_id = Identifier(required=True)
    customer_email = String(max_length=254)
    customer_phone = String(max_length=30)
    shipping_address = Text()  # JSON object
    items = Text(required=True)  # JSON list of {order_item_id, product_source_id, sku, quantity}


@fulfillment.command_handler(part_of=FulfillmentOrder)
class CreateFulfillmentOrderHandler:
    @handle(CreateFulfillmentOrder)
    def create_fulfillment_order(self, command):
        repo = current_domain.repository_for(FulfillmentOrder)
        if repo.find_by_order_id(command.order_id) is not None:
            raise ValidationError({"order_id": [f"Order {command.order_id} already has a fulfillment order"]})

        items = json.loads(command.items) if isinstance(command.items, str) else command.items
        address = command.shipping_address
        if isinstance(address, str):
            address = json.loads(address)

        source_repo = current_domain.repository_for(ProductSource)
        items_data = []
        for item in items:
            source = source_repo.get(item["product_source_id"])
            quantity = int(item["quantity"])
            unit_cost = source.original_price
            items_data.append(
                {
                    "order_item_id": item["order_item_id"],
                    "product_source_id": str(source.id),
                    "supplier_sku": source.resolve_supplier_sku(item.get("sku")),
                    "quantity": quantity,
                    "unit_cost": unit_cost,
                    "total_cost": round(unit_cost * quantity, 2),
                }
            )

        ff = FulfillmentOrder.create(
            order_id=command.order_id,
            customer_email=command.customer_email,
            customer_phone=command.customer_phone,
            shipping_address=address,
            items_data=items_data,
            shipping_cost=estimate_shipping_cost(len(items_data)),
        )
        repo.add(ff)

        logger.info(
            "Fulfillment order created",
            fulfillment_order_id=str(ff.id),
            order_id=str(command.order_id),
            item_count=len(items_data),
            total_cost=ff.total_cost,
        )
        return str(ff.id)
