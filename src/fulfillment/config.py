"""Runtime settings for the fulfillment domain.

Values come from environment variables with development defaults. Protean's
own settings (database provider, processing mode) live in ``domain.toml``.
"""

import os

# Status transitions
ISSUE_DESCRIPTION_MIN_LENGTH = int(os.environ.get("ISSUE_DESCRIPTION_MIN_LENGTH", "10"))

# Admin listing
DEFAULT_PAGE_SIZE = int(os.environ.get("FULFILLMENT_DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = int(os.environ.get("FULFILLMENT_MAX_PAGE_SIZE", "100"))
ATTENTION_PENDING_HOURS = int(os.environ.get("ATTENTION_PENDING_HOURS", "24"))

# Supplier shipping estimate: base charge plus a surcharge per extra line item
BASE_SHIPPING_COST = float(os.environ.get("BASE_SHIPPING_COST", "2.99"))
PER_ITEM_SHIPPING_COST = float(os.environ.get("PER_ITEM_SHIPPING_COST", "0.50"))
SUPPLIER_CURRENCY = os.environ.get("SUPPLIER_CURRENCY", "USD")

# Notifications
NOTIFIER_ADAPTER = os.environ.get("NOTIFIER_ADAPTER", "email")
STORE_NAME = os.environ.get("STORE_NAME", "Kids Petite")
STORE_URL = os.environ.get("STORE_URL", "https://kidspetite.com")
FROM_EMAIL = os.environ.get("FROM_EMAIL", "noreply@kidspetite.com")
ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@kidspetite.com")
