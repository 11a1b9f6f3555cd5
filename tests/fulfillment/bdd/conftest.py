"""Shared BDD fixtures and step definitions for fulfillment synchronization."""

import pytest
from fulfillment.api import admin
from fulfillment.fulfillment_order.fulfillment_order import FulfillmentOrder
from fulfillment.order.customer_order import CustomerOrder
from fulfillment.order.shipment import Shipment
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def error():
    """Container for captured rejections."""
    return {"exc": None}


def _fulfillment_order(ff_id):
    return current_domain.repository_for(FulfillmentOrder).get(ff_id)


def _customer_order(ff_id):
    return current_domain.repository_for(CustomerOrder).get(_fulfillment_order(ff_id).order_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a dropship order in "{status}"'), target_fixture="ff_id")
def dropship_order(create_dropship_order, status):
    return create_dropship_order(status=status)


@given(parsers.cfparse('tracking number "{tracking_number}" from "{carrier}" is attached'))
def tracking_attached(ff_id, tracking_number, carrier):
    admin.attach_tracking(ff_id, tracking_number, carrier=carrier)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('staff move the order to "{status}"'))
def move_order(ff_id, status, error):
    try:
        admin.transition_status(ff_id, status)
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('staff report an issue "{description}"'))
def report_issue(ff_id, description, error):
    try:
        admin.transition_status(ff_id, "Issue", issue_description=description)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the fulfillment order is "{status}"'))
def fulfillment_status_is(ff_id, status):
    assert _fulfillment_order(ff_id).status == status


@then(parsers.cfparse('the customer order is "{status}"'))
def customer_status_is(ff_id, status):
    assert _customer_order(ff_id).status == status


@then("the shipment records the delivery time")
def shipment_delivered(ff_id):
    ff = _fulfillment_order(ff_id)
    shipment = current_domain.repository_for(Shipment).get_by_order_id(ff.order_id)
    assert shipment.actual_delivery_at == ff.delivered_at


@then("the request is rejected")
def request_rejected(error):
    assert error["exc"] is not None


@then(parsers.cfparse('the customer receives an email about "{subject}"'))
def customer_email(outbox, subject):
    messages = outbox.sent_to("parent@example.com")
    assert any(subject in message.subject for message in messages)


@then("no email is sent")
def no_email(outbox):
    assert outbox.delivered == []
