"""Shared fixtures for fulfillment tests.

``create_dropship_order`` seeds the whole neighbourhood of a fulfillment
order: product sources, the customer order, its shipment record and the
PENDING fulfillment order itself (through the creation command).
"""

import json

import pytest
from fulfillment.catalog.product_source import ProductSource
from fulfillment.fulfillment_order.creation import CreateFulfillmentOrder
from fulfillment.fulfillment_order.synchronization import TransitionStatus
from fulfillment.notifier import get_notifier
from fulfillment.order.customer_order import CustomerOrder, CustomerOrderItem
from fulfillment.order.shipment import Shipment
from protean import current_domain

DEFAULT_ADDRESS = {
    "first_name": "Maya",
    "last_name": "Lopez",
    "line1": "12 Orchard Lane",
    "city": "Portland",
    "state": "OR",
    "postal_code": "97201",
    "country": "US",
}

# Walks from PENDING to the named status along legal edges
PATHS = {
    "Pending": [],
    "Placed": ["Placed"],
    "Confirmed": ["Placed", "Confirmed"],
    "Shipped": ["Placed", "Confirmed", "Shipped"],
    "Delivered": ["Placed", "Confirmed", "Shipped", "Delivered"],
    "Cancelled": ["Cancelled"],
    "Issue": ["Issue"],
}


def add_product_source(slug="bunny-romper", **overrides):
    data = {
        "product_slug": slug,
        "supplier_id": "supplier-1",
        "supplier_product_id": f"sp-{slug}",
        "supplier_url": f"https://supplier.example.com/item/{slug}",
        "supplier_sku": f"SUP-{slug.upper()}",
        "original_price": 8.50,
    }
    data.update(overrides)
    source = ProductSource(**data)
    current_domain.repository_for(ProductSource).add(source)
    return source


def add_customer_order(order_number="KP-1001", customer_email="parent@example.com", status="Processing"):
    order = CustomerOrder(
        order_number=order_number,
        customer_email=customer_email,
        customer_name="Maya Lopez",
        status=status,
        items=[
            CustomerOrderItem(
                product_name="Bunny Romper",
                variant_name="6-12M",
                sku="ROMP-6-12",
                quantity=1,
                unit_price=24.00,
            )
        ],
    )
    current_domain.repository_for(CustomerOrder).add(order)
    return order


def advance(ff_id, status):
    """Walk a fulfillment order from PENDING to ``status`` through the synchronizer."""
    for step in PATHS[status]:
        current_domain.process(
            TransitionStatus(
                fulfillment_order_id=ff_id,
                status=step,
                issue_description="Supplier reported a stock discrepancy" if step == "Issue" else None,
            ),
            asynchronous=False,
        )


@pytest.fixture()
def outbox():
    """The in-memory mail transport behind the default notifier."""
    return get_notifier().transport


@pytest.fixture()
def create_dropship_order():
    def _create(
        status="Pending",
        order_number="KP-1001",
        customer_email="parent@example.com",
        sources=None,
        items=None,
        shipping_address=DEFAULT_ADDRESS,
        with_shipment=True,
    ):
        sources = sources if sources is not None else [add_product_source()]
        order = add_customer_order(order_number=order_number, customer_email=customer_email)
        if with_shipment:
            current_domain.repository_for(Shipment).add(Shipment(order_id=str(order.id)))

        if items is None:
            items = [
                {
                    "order_item_id": f"oi-{index}",
                    "product_source_id": str(source.id),
                    "sku": "ROMP-6-12",
                    "quantity": 1,
                }
                for index, source in enumerate(sources, start=1)
            ]

        ff_id = current_domain.process(
            CreateFulfillmentOrder(
                order_id=str(order.id),
                customer_email=customer_email,
                shipping_address=json.dumps(shipping_address) if shipping_address else None,
                items=json.dumps(items),
            ),
            asynchronous=False,
        )
        advance(ff_id, status)
        return ff_id

    return _create


@pytest.fixture()
def advance_to():
    return advance


@pytest.fixture()
def make_product_source():
    return add_product_source
