"""Product source availability: command and handler.

Records the outcome of a supplier listing check.
"""

from datetime import UTC, datetime

import structlog
from protean import atomic_change, handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from fulfillment.catalog.product_source import InventoryStatus, ProductSource, SourceStatus
from fulfillment.domain import fulfillment

logger = structlog.get_logger(__name__)


@fulfillment.command(part_of="ProductSource")
class UpdateSourceAvailability:
    """Update the supplier lifecycle flags of a product source."""

    product_source_id = Identifier(required=True)
    source_status = String(choices=SourceStatus)
    inventory_status = String(choices=InventoryStatus)


@fulfillment.command_handler(part_of=ProductSource)
class ProductSourceHandler:
    @handle(UpdateSourceAvailability)
    def update_availability(self, command):
        if not command.source_status and not command.inventory_status:
            raise ValidationError({"_entity": ["Provide a source status or an inventory status"]})

        repo = current_domain.repository_for(ProductSource)
        source = repo.get(command.product_source_id)
        with atomic_change(source):
            if command.source_status:
                source.source_status = command.source_status
            if command.inventory_status:
                source.inventory_status = command.inventory_status
            source.last_checked_at = datetime.now(UTC)
        repo.add(source)

        logger.info(
            "Product source availability updated",
            product_source_id=str(source.id),
            source_status=source.source_status,
            inventory_status=source.inventory_status,
        )
