"""Shipment use cases: list, track, create, update, delete."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from shiptrack.core.errors import NotFoundError, ValidationError
from shiptrack.domain.shipments import (
    Shipment,
    is_json_safe,
    missing_required_fields,
    new_shipment_id,
    now_ms,
    tracking_matches,
)
from shiptrack.repositories.json_storage import ShipmentStore

logger = logging.getLogger(__name__)


class ShipmentService:
    """Runs every operation as one load -> modify -> save cycle on the store."""

    def __init__(self, store: ShipmentStore, clock: Callable[[], int] = now_ms) -> None:
        self.store = store
        self._clock = clock

    def list_shipments(self) -> list[dict[str, Any]]:
        return self.store.load()

    def get_by_tracking_no(self, tracking_no: str) -> dict[str, Any]:
        """First record whose tracking number matches, ignoring case."""
        if tracking_no:
            for record in self.store.load():
                if tracking_matches(record, tracking_no):
                    return record
        raise NotFoundError("Shipment not found")

    def create(self, candidate: Mapping[str, Any]) -> dict[str, Any]:
        missing = missing_required_fields(candidate)
        if missing:
            logger.info("Rejected shipment, missing fields: %s", ", ".join(missing))
            raise ValidationError("Missing required fields")

        shipment = Shipment.from_dict(candidate)
        now = self._clock()
        if not shipment.id:
            shipment.id = new_shipment_id(now)
        if not shipment.created_at:
            shipment.created_at = now
        shipment.updated_at = now
        record = shipment.to_dict()
        if not is_json_safe(record):
            raise ValidationError("Invalid field values")

        with self.store.transaction() as shipments:
            shipments.insert(0, record)
            self.store.save(shipments)
        logger.info("Created shipment %s (%s)", shipment.id, shipment.tracking_no)
        return record

    def update(self, shipment_id: str, replacement: Mapping[str, Any]) -> dict[str, Any]:
        """Replace the record wholesale, keeping its id and createdAt."""
        with self.store.transaction() as shipments:
            index = next(
                (i for i, item in enumerate(shipments) if item.get("id") == shipment_id),
                None,
            )
            if index is None:
                raise NotFoundError("Shipment not found")
            original = Shipment.from_dict(shipments[index])

            shipment = Shipment.from_dict(replacement)
            shipment.updated_at = self._next_updated_at(original.updated_at)
            shipment.id = original.id
            if original.created_at:
                shipment.created_at = original.created_at
            record = shipment.to_dict()
            if not is_json_safe(record):
                raise ValidationError("Invalid field values")

            shipments[index] = record
            self.store.save(shipments)
        logger.info("Updated shipment %s", shipment_id)
        return record

    def delete(self, shipment_id: str) -> dict[str, bool]:
        with self.store.transaction() as shipments:
            remaining = [item for item in shipments if item.get("id") != shipment_id]
            if len(remaining) == len(shipments):
                raise NotFoundError("Shipment not found")
            self.store.save(remaining)
        logger.info("Deleted shipment %s", shipment_id)
        return {"success": True}

    def _next_updated_at(self, previous: Any) -> int:
        now = self._clock()
        if isinstance(previous, int) and not isinstance(previous, bool) and previous > now:
            return previous
        return now
