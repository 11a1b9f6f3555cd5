"""Tests for the FulfillmentOrder aggregate: creation, transitions and invariants."""

from datetime import UTC, datetime, timedelta

import pytest
from fulfillment.fulfillment_order.errors import InvalidTransitionError
from fulfillment.fulfillment_order.events import (
    FulfillmentOrderCreated,
    FulfillmentStatusChanged,
    TrackingAttached,
)
from fulfillment.fulfillment_order.fulfillment_order import FulfillmentOrder
from fulfillment.fulfillment_order.transitions import FulfillmentStatus
from protean.exceptions import ValidationError

S = FulfillmentStatus


def _make_items():
    return [
        {
            "order_item_id": "oi-1",
            "product_source_id": "ps-1",
            "supplier_sku": "SUP-ROMP-6-12",
            "quantity": 2,
            "unit_cost": 8.50,
            "total_cost": 17.00,
        },
    ]


def _make_order(**overrides):
    data = {
        "order_id": "ord-001",
        "customer_email": "parent@example.com",
        "items_data": _make_items(),
        "shipping_cost": 2.99,
        "shipping_address": {"line1": "12 Orchard Lane", "city": "Portland", "state": "OR", "postal_code": "97201"},
    }
    data.update(overrides)
    return FulfillmentOrder.create(**data)


class TestCreation:
    def test_starts_pending(self):
        ff = _make_order()
        assert ff.status == S.PENDING.value

    def test_costs(self):
        ff = _make_order()
        assert ff.shipping_cost == 2.99
        assert ff.total_cost == 19.99
        assert ff.items_cost == 17.00

    def test_lifecycle_timestamps_empty(self):
        ff = _make_order()
        assert ff.placed_at is None
        assert ff.shipped_at is None
        assert ff.delivered_at is None
        assert ff.actual_delivery_at is None
        assert ff.created_at is not None

    def test_raises_created_event(self):
        ff = _make_order()
        event = next(e for e in ff._events if isinstance(e, FulfillmentOrderCreated))
        assert event.order_id == "ord-001"
        assert event.item_count == 1

    def test_address_defaults_country(self):
        ff = _make_order()
        assert ff.shipping_address.country == "US"


class TestTransitionTo:
    def test_placed_stamps_placed_at(self):
        ff = _make_order()
        ff.transition_to(S.PLACED)
        assert ff.status == S.PLACED.value
        assert ff.placed_at is not None

    def test_shipped_and_delivered_stamps(self):
        ff = _make_order()
        for status in (S.PLACED, S.CONFIRMED, S.SHIPPED, S.DELIVERED):
            ff.transition_to(status)
        assert ff.shipped_at is not None
        assert ff.delivered_at is not None
        assert ff.actual_delivery_at == ff.delivered_at
        assert ff.placed_at <= ff.shipped_at <= ff.delivered_at

    def test_returns_previous_status(self):
        ff = _make_order()
        assert ff.transition_to(S.PLACED) == S.PENDING

    def test_raises_status_changed_event(self):
        ff = _make_order()
        ff._events.clear()
        ff.transition_to(S.PLACED, supplier_order_id="SUP-9001")
        event = ff._events[-1]
        assert isinstance(event, FulfillmentStatusChanged)
        assert event.previous_status == "Pending"
        assert event.new_status == "Placed"
        assert event.supplier_order_id == "SUP-9001"

    def test_illegal_move_names_both_statuses(self):
        ff = _make_order()
        with pytest.raises(InvalidTransitionError) as exc:
            ff.transition_to(S.SHIPPED)
        assert exc.value.current == "Pending"
        assert exc.value.requested == "Shipped"
        assert "Cannot transition from Pending to Shipped" in str(exc.value)

    def test_illegal_move_leaves_aggregate_untouched(self):
        ff = _make_order()
        with pytest.raises(InvalidTransitionError):
            ff.transition_to(S.DELIVERED)
        assert ff.status == S.PENDING.value
        assert ff.delivered_at is None

    def test_invalid_transition_is_a_validation_error(self):
        ff = _make_order()
        with pytest.raises(ValidationError):
            ff.transition_to(S.REFUNDED)

    def test_reentering_shipped_keeps_original_timestamp(self):
        ff = _make_order()
        for status in (S.PLACED, S.CONFIRMED, S.SHIPPED):
            ff.transition_to(status)
        first_shipped_at = ff.shipped_at
        ff.transition_to(S.ISSUE, issue_description="Carrier lost the parcel in transit")
        ff.transition_to(S.SHIPPED, at=first_shipped_at + timedelta(days=2))
        assert ff.shipped_at == first_shipped_at

    def test_replacing_in_issue_keeps_placed_at(self):
        ff = _make_order()
        ff.transition_to(S.PLACED)
        placed_at = ff.placed_at
        ff.transition_to(S.ISSUE, issue_description="Supplier rejected the payment card")
        ff.transition_to(S.PLACED)
        assert ff.placed_at == placed_at

    def test_replacing_after_issue_from_pending_skips_placed_at(self):
        ff = _make_order()
        ff.transition_to(S.ISSUE, issue_description="Supplier listing was withdrawn")
        ff.transition_to(S.SHIPPED)
        shipped_at = ff.shipped_at
        ff.transition_to(S.ISSUE, issue_description="Parcel returned to sender")

        ff.transition_to(S.PLACED, at=shipped_at + timedelta(days=3))

        assert ff.status == S.PLACED.value
        assert ff.placed_at is None
        assert ff.shipped_at == shipped_at


class TestIssueDescription:
    def test_issue_requires_description(self):
        ff = _make_order()
        with pytest.raises(ValidationError) as exc:
            ff.transition_to(S.ISSUE)
        assert "issue_description" in str(exc.value)
        assert ff.status == S.PENDING.value

    def test_short_description_rejected(self):
        ff = _make_order()
        with pytest.raises(ValidationError):
            ff.transition_to(S.ISSUE, issue_description="too short")

    def test_whitespace_does_not_count(self):
        ff = _make_order()
        with pytest.raises(ValidationError):
            ff.transition_to(S.ISSUE, issue_description="   short    ")

    def test_description_is_trimmed(self):
        ff = _make_order()
        ff.transition_to(S.ISSUE, issue_description="  Supplier out of stock  ")
        assert ff.status == S.ISSUE.value
        assert ff.issue_description == "Supplier out of stock"

    def test_exactly_minimum_length_accepted(self):
        ff = _make_order()
        ff.transition_to(S.ISSUE, issue_description="0123456789")
        assert ff.status == S.ISSUE.value

    def test_issue_status_without_description_violates_invariant(self):
        with pytest.raises(ValidationError) as exc:
            FulfillmentOrder(
                order_id="ord-002",
                status=S.ISSUE.value,
                total_cost=10.0,
                shipping_cost=2.99,
            )
        assert "issue_description" in str(exc.value)


class TestSupplierOrderId:
    def test_recorded_once(self):
        ff = _make_order()
        ff.transition_to(S.PLACED, supplier_order_id="SUP-9001")
        ff.transition_to(S.CONFIRMED, supplier_order_id="SUP-9001")
        assert ff.supplier_order_id == "SUP-9001"

    def test_different_value_rejected(self):
        ff = _make_order()
        ff.transition_to(S.PLACED, supplier_order_id="SUP-9001")
        with pytest.raises(ValidationError) as exc:
            ff.transition_to(S.CONFIRMED, supplier_order_id="SUP-1234")
        assert "supplier_order_id" in str(exc.value)
        assert ff.status == S.PLACED.value


class TestTimestampInvariant:
    def test_shipped_before_placed_rejected(self):
        now = datetime.now(UTC)
        with pytest.raises(ValidationError) as exc:
            FulfillmentOrder(
                order_id="ord-003",
                status=S.SHIPPED.value,
                placed_at=now,
                shipped_at=now - timedelta(hours=1),
                total_cost=10.0,
                shipping_cost=2.99,
            )
        assert "shipped_at" in str(exc.value)

    def test_delivery_before_shipping_rejected(self):
        now = datetime.now(UTC)
        with pytest.raises(ValidationError) as exc:
            FulfillmentOrder(
                order_id="ord-004",
                status=S.DELIVERED.value,
                shipped_at=now,
                actual_delivery_at=now - timedelta(minutes=5),
                total_cost=10.0,
                shipping_cost=2.99,
            )
        assert "actual_delivery_at" in str(exc.value)


class TestAttachTracking:
    def test_attach_in_any_status(self):
        ff = _make_order()
        ff.attach_tracking("1Z999AA10123456784", carrier="UPS")
        assert ff.tracking_number == "1Z999AA10123456784"
        assert ff.carrier == "UPS"
        assert ff.status == S.PENDING.value

    def test_trims_values(self):
        ff = _make_order()
        ff.attach_tracking("  TRK-1  ", carrier="  USPS ", tracking_url="   ")
        assert ff.tracking_number == "TRK-1"
        assert ff.carrier == "USPS"
        assert ff.tracking_url is None

    def test_blank_tracking_number_rejected(self):
        ff = _make_order()
        with pytest.raises(ValidationError) as exc:
            ff.attach_tracking("   ")
        assert "tracking_number" in str(exc.value)
        assert ff.tracking_number is None

    def test_raises_tracking_attached(self):
        ff = _make_order()
        ff.attach_tracking("TRK-1", carrier="DHL")
        event = ff._events[-1]
        assert isinstance(event, TrackingAttached)
        assert event.tracking_number == "TRK-1"

    def test_records_estimated_delivery(self):
        ff = _make_order()
        eta = datetime(2026, 11, 2, tzinfo=UTC)
        ff.attach_tracking("TRK-1", estimated_delivery=eta)
        assert ff.estimated_delivery == eta
        assert ff._events[-1].estimated_delivery == eta
