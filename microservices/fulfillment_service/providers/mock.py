"""Mock fulfillment provider for local development without provider credentials."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4
from typing import Optional

from .base import FulfillmentProvider
from ..models import ShipmentRequest, ShipmentResult, ServiceabilityOptions


class MockFulfillmentProvider(FulfillmentProvider):
    def __init__(self):
        self._shipments = {}

    async def create_shipment(self, request: ShipmentRequest) -> ShipmentResult:
        order_id = uuid4().int % 10**9
        shipment_id = uuid4().int % 10**9
        record = {
            "order_id": order_id,
            "shipment_id": shipment_id,
            "channel_order_id": request.order_id,
            "status": "NEW",
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self._shipments[str(shipment_id)] = record
        return ShipmentResult.ok(record, "Shipment created successfully")

    async def track_shipment(self, shipment_id: str) -> ShipmentResult:
        record = self._shipments.get(str(shipment_id))
        if not record:
            return ShipmentResult.fail({"message": "Shipment not found"}, "Failed to retrieve tracking information", 404)
        return ShipmentResult.ok(
            {"tracking_data": {"shipment_status": record["status"], "shipment_track": [record]}},
            "Tracking information retrieved successfully",
        )

    async def list_shipments(self, page: int = 1, limit: int = 10) -> ShipmentResult:
        records = list(self._shipments.values())
        start = (page - 1) * limit
        return ShipmentResult.ok(
            {"data": records[start:start + limit], "meta": {"pagination": {"total": len(records)}}},
            "Shipments retrieved successfully",
        )

    async def check_serviceability(
        self, pincode: str, options: Optional[ServiceabilityOptions] = None
    ) -> ShipmentResult:
        etd = (datetime.now(timezone.utc) + timedelta(days=4)).strftime("%b %d, %Y")
        return ShipmentResult.ok(
            {"data": {"available_courier_companies": [
                {"courier_name": "Mock Express", "estimated_delivery_days": "4", "etd": etd, "rate": 60.0}
            ]}},
            "Pincode serviceability checked successfully",
        )
