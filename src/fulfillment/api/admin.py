"""Staff-facing fulfillment operations.

Plain functions called by the transport layer inside an active domain
context, after the caller has been authenticated as staff. Writes go through
domain commands; reads load aggregates and shape them into API schemas.
"""

import json
import math
from datetime import UTC, datetime, timedelta

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from fulfillment import config
from fulfillment.api.schemas import (
    CreateFulfillmentOrderRequest,
    CustomerOrderDetail,
    CustomerOrderItemDetail,
    FulfillmentDetails,
    FulfillmentLineItemDetail,
    FulfillmentOrderPage,
    FulfillmentStats,
    FulfillmentOrderSummary,
    Pagination,
    ProductSourceDetail,
    TrackingInfo,
)
from fulfillment.catalog.availability import UpdateSourceAvailability
from fulfillment.catalog.product_source import ProductSource
from fulfillment.fulfillment_order import supplier_payload
from fulfillment.fulfillment_order.creation import CreateFulfillmentOrder
from fulfillment.fulfillment_order.fulfillment_order import FulfillmentOrder
from fulfillment.fulfillment_order.history import HistoryEntry, build_history
from fulfillment.fulfillment_order.synchronization import AttachTracking, MarkShipped, TransitionStatus
from fulfillment.fulfillment_order.validation import ValidationResult, validate_fulfillment
from fulfillment.notifier.dispatch import dispatch_status_notification, dispatch_tracking_notification
from fulfillment.order.customer_order import CustomerOrder


def _status_value(status) -> str | None:
    if status is None:
        return None
    return getattr(status, "value", status)


def _load(order_id: str) -> FulfillmentOrder:
    return current_domain.repository_for(FulfillmentOrder).get(order_id)


def _sources_for(ff: FulfillmentOrder) -> dict[str, ProductSource]:
    """Product sources referenced by the order's line items; unknown ids are left out."""
    repo = current_domain.repository_for(ProductSource)
    sources = {}
    for item in ff.items or []:
        source_id = str(item.product_source_id)
        if source_id in sources:
            continue
        try:
            sources[source_id] = repo.get(source_id)
        except ObjectNotFoundError:
            continue
    return sources


def _tracking_info(ff: FulfillmentOrder) -> TrackingInfo:
    return TrackingInfo(
        tracking_number=ff.tracking_number,
        carrier=ff.carrier,
        tracking_url=ff.tracking_url,
        estimated_delivery=ff.estimated_delivery,
    )


def _summary(ff: FulfillmentOrder) -> FulfillmentOrderSummary:
    return FulfillmentOrderSummary(
        id=str(ff.id),
        order_id=str(ff.order_id),
        status=ff.status,
        customer_email=ff.customer_email,
        supplier_order_id=ff.supplier_order_id,
        tracking_number=ff.tracking_number,
        total_cost=ff.total_cost,
        item_count=len(ff.items or []),
        issue_description=ff.issue_description,
        created_at=ff.created_at,
        updated_at=ff.updated_at,
    )


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------
def transition_status(
    order_id: str,
    new_status,
    issue_description: str | None = None,
    notify_customer: bool | None = None,
    supplier_order_id: str | None = None,
    expected_status=None,
) -> FulfillmentOrder:
    """Move a fulfillment order to ``new_status``, then send the matching notice."""
    current_domain.process(
        TransitionStatus(
            fulfillment_order_id=order_id,
            status=_status_value(new_status),
            issue_description=issue_description,
            supplier_order_id=supplier_order_id,
            expected_status=_status_value(expected_status),
        ),
        asynchronous=False,
    )
    ff = _load(order_id)
    dispatch_status_notification(ff, notify_customer=notify_customer)
    return ff


def attach_tracking(
    order_id: str,
    tracking_number: str,
    carrier: str | None = None,
    tracking_url: str | None = None,
    estimated_delivery: datetime | None = None,
    notify_customer: bool = False,
) -> TrackingInfo:
    current_domain.process(
        AttachTracking(
            fulfillment_order_id=order_id,
            tracking_number=tracking_number,
            carrier=carrier,
            tracking_url=tracking_url,
            estimated_delivery=estimated_delivery,
        ),
        asynchronous=False,
    )
    ff = _load(order_id)
    if notify_customer:
        dispatch_tracking_notification(ff)
    return _tracking_info(ff)


def mark_shipped(
    order_id: str,
    tracking_number: str,
    carrier: str | None = None,
    tracking_url: str | None = None,
    estimated_delivery: datetime | None = None,
    notify_customer: bool | None = None,
    expected_status=None,
) -> FulfillmentOrder:
    """Attach tracking and move to Shipped in one unit of work, then send the shipping notice."""
    current_domain.process(
        MarkShipped(
            fulfillment_order_id=order_id,
            tracking_number=tracking_number,
            carrier=carrier,
            tracking_url=tracking_url,
            estimated_delivery=estimated_delivery,
            expected_status=_status_value(expected_status),
        ),
        asynchronous=False,
    )
    ff = _load(order_id)
    dispatch_status_notification(ff, notify_customer=notify_customer)
    return ff


def create_fulfillment_order(body: CreateFulfillmentOrderRequest) -> str:
    """Open a PENDING fulfillment order; returns its id."""
    command = CreateFulfillmentOrder(
        order_id=body.order_id,
        customer_email=body.customer_email,
        customer_phone=body.customer_phone,
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
        items=json.dumps([item.model_dump() for item in body.items]),
    )
    return current_domain.process(command, asynchronous=False)


def update_source_availability(
    product_source_id: str,
    source_status=None,
    inventory_status=None,
) -> None:
    current_domain.process(
        UpdateSourceAvailability(
            product_source_id=product_source_id,
            source_status=_status_value(source_status),
            inventory_status=_status_value(inventory_status),
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def get_details(order_id: str) -> FulfillmentDetails:
    ff = _load(order_id)
    customer_order = current_domain.repository_for(CustomerOrder).get(ff.order_id)
    sources = _sources_for(ff)

    items = []
    for item in ff.items or []:
        source = sources.get(str(item.product_source_id))
        items.append(
            FulfillmentLineItemDetail(
                id=str(item.id),
                order_item_id=str(item.order_item_id),
                supplier_sku=item.supplier_sku,
                quantity=item.quantity,
                unit_cost=item.unit_cost,
                total_cost=item.total_cost,
                product_source=ProductSourceDetail(
                    id=str(source.id),
                    product_slug=source.product_slug,
                    supplier_product_id=source.supplier_product_id,
                    supplier_sku=source.supplier_sku,
                    supplier_url=source.supplier_url,
                    source_status=source.source_status,
                    inventory_status=source.inventory_status,
                )
                if source
                else None,
            )
        )

    return FulfillmentDetails(
        id=str(ff.id),
        order_id=str(ff.order_id),
        status=ff.status,
        supplier_order_id=ff.supplier_order_id,
        customer_email=ff.customer_email,
        customer_phone=ff.customer_phone,
        shipping_address=ff.shipping_address.to_dict() if ff.shipping_address else None,
        tracking_number=ff.tracking_number,
        carrier=ff.carrier,
        tracking_url=ff.tracking_url,
        estimated_delivery=ff.estimated_delivery,
        issue_description=ff.issue_description,
        total_cost=ff.total_cost,
        shipping_cost=ff.shipping_cost,
        placed_at=ff.placed_at,
        shipped_at=ff.shipped_at,
        delivered_at=ff.delivered_at,
        created_at=ff.created_at,
        updated_at=ff.updated_at,
        order=CustomerOrderDetail(
            id=str(customer_order.id),
            order_number=customer_order.order_number,
            customer_email=customer_order.customer_email,
            customer_name=customer_order.customer_name,
            status=customer_order.status,
            items=[
                CustomerOrderItemDetail(
                    product_name=item.product_name,
                    variant_name=item.variant_name,
                    sku=item.sku,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in customer_order.items or []
            ],
        ),
        items=items,
    )


def get_validation(order_id: str) -> ValidationResult:
    ff = _load(order_id)
    return validate_fulfillment(ff, _sources_for(ff))


def get_history(order_id: str) -> list[HistoryEntry]:
    return build_history(_load(order_id))


def list_orders(status=None, page: int = 1, limit: int = config.DEFAULT_PAGE_SIZE) -> FulfillmentOrderPage:
    """One page of fulfillment orders, newest first."""
    page = max(int(page), 1)
    limit = min(max(int(limit), 1), config.MAX_PAGE_SIZE)

    result = current_domain.repository_for(FulfillmentOrder).find_page(
        status=_status_value(status),
        offset=(page - 1) * limit,
        limit=limit,
    )
    total = result.total
    total_pages = math.ceil(total / limit)
    return FulfillmentOrderPage(
        orders=[_summary(ff) for ff in result.items],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_more=page < total_pages,
        ),
    )


def list_orders_requiring_attention(now: datetime | None = None) -> list[FulfillmentOrderSummary]:
    """Orders in Issue, plus Pending orders nobody has placed within the attention window."""
    now = now or datetime.now(UTC)
    cutoff = now - timedelta(hours=config.ATTENTION_PENDING_HOURS)
    orders = current_domain.repository_for(FulfillmentOrder).find_requiring_attention(pending_before=cutoff)
    return [_summary(ff) for ff in orders]


def prepare_for_supplier(order_id: str) -> supplier_payload.SupplierOrderPayload:
    ff = _load(order_id)
    customer_order = current_domain.repository_for(CustomerOrder).get(ff.order_id)
    return supplier_payload.prepare_supplier_payload(ff, customer_order, _sources_for(ff))


def calculate_order_cost(order_id: str) -> supplier_payload.OrderCost:
    return supplier_payload.calculate_order_cost(_load(order_id))


def get_fulfillment_stats() -> FulfillmentStats:
    counts = current_domain.repository_for(FulfillmentOrder).count_by_status()
    return FulfillmentStats(
        **{status.lower(): count for status, count in counts.items()},
        total=sum(counts.values()),
    )
