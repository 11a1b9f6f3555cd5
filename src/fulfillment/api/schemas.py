"""Pydantic schemas for the fulfillment admin operations.

These are the external contracts, separate from domain commands. The admin
layer translates between these schemas and domain commands or aggregates.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class ShippingAddressRequest(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    line1: str | None = None
    line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str = "US"
    phone: str | None = None


class FulfillmentItemRequest(BaseModel):
    order_item_id: str
    product_source_id: str
    sku: str | None = None
    quantity: int = Field(ge=1)


class CreateFulfillmentOrderRequest(BaseModel):
    order_id: str
    customer_email: str | None = None
    customer_phone: str | None = None
    shipping_address: ShippingAddressRequest | None = None
    items: list[FulfillmentItemRequest]


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class TrackingInfo(BaseModel):
    tracking_number: str
    carrier: str | None = None
    tracking_url: str | None = None
    estimated_delivery: datetime | None = None


class CustomerOrderItemDetail(BaseModel):
    product_name: str
    variant_name: str | None = None
    sku: str | None = None
    quantity: int
    unit_price: float


class CustomerOrderDetail(BaseModel):
    id: str
    order_number: str
    customer_email: str | None = None
    customer_name: str | None = None
    status: str
    items: list[CustomerOrderItemDetail] = []


class ProductSourceDetail(BaseModel):
    id: str
    product_slug: str
    supplier_product_id: str
    supplier_sku: str | None = None
    supplier_url: str | None = None
    source_status: str
    inventory_status: str


class FulfillmentLineItemDetail(BaseModel):
    id: str
    order_item_id: str
    supplier_sku: str | None = None
    quantity: int
    unit_cost: float
    total_cost: float
    product_source: ProductSourceDetail | None = None


class FulfillmentDetails(BaseModel):
    id: str
    order_id: str
    status: str
    supplier_order_id: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    shipping_address: dict | None = None
    tracking_number: str | None = None
    carrier: str | None = None
    tracking_url: str | None = None
    estimated_delivery: datetime | None = None
    issue_description: str | None = None
    total_cost: float
    shipping_cost: float
    placed_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    order: CustomerOrderDetail
    items: list[FulfillmentLineItemDetail] = []


class FulfillmentOrderSummary(BaseModel):
    id: str
    order_id: str
    status: str
    customer_email: str | None = None
    supplier_order_id: str | None = None
    tracking_number: str | None = None
    total_cost: float
    item_count: int
    issue_description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool


class FulfillmentOrderPage(BaseModel):
    orders: list[FulfillmentOrderSummary]
    pagination: Pagination


class FulfillmentStats(BaseModel):
    """Order counts per status for the admin dashboard."""

    pending: int = 0
    placed: int = 0
    confirmed: int = 0
    shipped: int = 0
    delivered: int = 0
    cancelled: int = 0
    refunded: int = 0
    issue: int = 0
    total: int = 0
