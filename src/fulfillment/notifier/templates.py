"""Plain-text templates for fulfillment notices.

Each template renders a context dict into ``{"subject": ..., "body": ...}``.
"""

from fulfillment import config

TRACKING_PENDING = "Tracking pending"

# Carrier name fragment -> public tracking page
_CARRIER_TRACKING_URLS = {
    "usps": "https://tools.usps.com/go/TrackConfirmAction?tLabels={tracking_number}",
    "ups": "https://www.ups.com/track?tracknum={tracking_number}",
    "fedex": "https://www.fedex.com/fedextrack/?trknbr={tracking_number}",
    "dhl": "https://www.dhl.com/en/express/tracking.html?AWB={tracking_number}",
}


def tracking_url_for(tracking_number: str | None, carrier: str | None) -> str | None:
    """Public tracking page for well-known carriers, else None."""
    if not tracking_number or tracking_number == TRACKING_PENDING or not carrier:
        return None
    carrier = carrier.lower()
    for fragment, url in _CARRIER_TRACKING_URLS.items():
        if fragment in carrier:
            return url.format(tracking_number=tracking_number)
    return None


def _item_lines(items: list[dict]) -> str:
    lines = []
    for item in items:
        variant = item.get("variant_name")
        label = item["product_name"]
        if variant and variant != "Default":
            label = f"{label} - {variant}"
        lines.append(f"- {label} (Qty: {item['quantity']})")
    return "\n".join(lines) or "- (no items)"


class ShippingNoticeTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_number = context["order_number"]
        tracking_number = context["tracking_number"]
        carrier = context.get("carrier")
        tracking_url = context.get("tracking_url") or tracking_url_for(tracking_number, carrier)

        tracking = [f"Tracking Number: {tracking_number}"]
        if carrier:
            tracking.append(f"Carrier: {carrier}")
        if tracking_url:
            tracking.append(f"Track Your Package: {tracking_url}")
        estimated_delivery = context.get("estimated_delivery")
        if estimated_delivery:
            tracking.append(f"Estimated Delivery: {estimated_delivery:%B %d, %Y}")
        tracking_block = "\n".join(tracking)

        return {
            "subject": f"Your {config.STORE_NAME} Order Has Shipped! - {order_number}",
            "body": (
                f"Hi {context.get('customer_name') or 'there'},\n\n"
                f"Great news! Your order {order_number} has been shipped and is on its way to you.\n\n"
                "TRACKING INFORMATION\n"
                f"{tracking_block}\n\n"
                "ORDER ITEMS\n"
                f"{_item_lines(context.get('items', []))}\n\n"
                f"View your order details: {config.STORE_URL}/account/orders/{order_number}\n\n"
                f"Thank you for shopping with {config.STORE_NAME}!"
            ),
        }


class DeliveryNoticeTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_number = context["order_number"]
        return {
            "subject": f"Your {config.STORE_NAME} Order Has Been Delivered! - {order_number}",
            "body": (
                f"Hi {context.get('customer_name') or 'there'},\n\n"
                f"Your order {order_number} has been delivered. We hope you love your purchase!\n\n"
                "ORDER ITEMS\n"
                f"{_item_lines(context.get('items', []))}\n\n"
                f"How did we do? Leave a review: {config.STORE_URL}/account/orders/{order_number}\n\n"
                f"Thank you for shopping with {config.STORE_NAME}!"
            ),
        }


class IssueNoticeTemplate:
    """Sent to store operations, not the customer."""

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context["order_number"]
        return {
            "subject": f"[{config.STORE_NAME}] Fulfillment Issue - Order {order_number}",
            "body": (
                f"An issue has been reported for order {order_number}.\n\n"
                "ISSUE DETAILS\n"
                f"{context['description']}\n\n"
                "ORDER INFORMATION\n"
                f"Order Number: {order_number}\n"
                f"Customer Email: {context.get('customer_email') or 'N/A'}\n\n"
                "ORDER ITEMS\n"
                f"{_item_lines(context.get('items', []))}\n\n"
                f"View in Admin: {config.STORE_URL}/admin/fulfillment/{order_number}"
            ),
        }
