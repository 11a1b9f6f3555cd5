"""ProductSource aggregate: binds a sold product to a supplier listing.

A source carries the supplier's price and SKU, an optional variant mapping
from local SKUs to supplier SKUs, and the lifecycle flags the validator reads
before an order is placed with the supplier.
"""

import json
from enum import Enum

from protean.fields import DateTime, Float, Identifier, String, Text

from fulfillment import config
from fulfillment.domain import fulfillment


class SourceStatus(Enum):
    ACTIVE = "Active"
    DISCONTINUED = "Discontinued"
    UNAVAILABLE = "Unavailable"


class InventoryStatus(Enum):
    IN_STOCK = "In_Stock"
    OUT_OF_STOCK = "Out_Of_Stock"


@fulfillment.aggregate
class ProductSource:
    product_slug = String(required=True, max_length=200)
    catalog_product_id = Identifier()

    # Supplier listing
    supplier_id = String(required=True, max_length=100)
    supplier_product_id = String(required=True, max_length=100)
    supplier_url = String(max_length=500)
    supplier_sku = String(max_length=100)
    original_price = Float(required=True, min_value=0.0)
    original_currency = String(max_length=3, default=config.SUPPLIER_CURRENCY)
    variant_mapping = Text()  # JSON object: local SKU -> supplier SKU

    source_status = String(choices=SourceStatus, default=SourceStatus.ACTIVE.value)
    inventory_status = String(choices=InventoryStatus, default=InventoryStatus.IN_STOCK.value)
    last_checked_at = DateTime()

    def variant_skus(self) -> dict:
        if not self.variant_mapping:
            return {}
        return json.loads(self.variant_mapping)

    def resolve_supplier_sku(self, local_sku: str | None) -> str | None:
        """Supplier SKU for ``local_sku``: variant mapping, then source SKU, then the local SKU."""
        if local_sku:
            mapped = self.variant_skus().get(local_sku)
            if mapped:
                return mapped
        return self.supplier_sku or local_sku

    @property
    def is_discontinued(self) -> bool:
        return self.source_status == SourceStatus.DISCONTINUED.value

    @property
    def is_unavailable(self) -> bool:
        return self.source_status == SourceStatus.UNAVAILABLE.value

    @property
    def is_out_of_stock(self) -> bool:
        return self.inventory_status == InventoryStatus.OUT_OF_STOCK.value
