"""
Farmer Service

Typed operations over the /farmers resource:
- get_farmer_by_id: farmer contact card, None when not found or unreachable
- get_farmer_products: a farmer's active listings, [] on any failure
- update_farmer_phone: always returns an OperationResult, never raises
- get_all_farmers: directory listing, [] on any failure
"""

import logging
from typing import List, Optional

from mconnect.integrations.clients.real_http.request_client import RequestClient
from mconnect.integrations.contracts.marketplace import Farmer, FarmerProduct, OperationResult
from mconnect.integrations.policy.failure_policy import FailurePolicy, failure_policy
from mconnect.integrations.policy.response_wrappers import (
    backend_message,
    extract_api_data,
    is_success,
    normalize_farmer,
    normalize_farmer_product,
    normalize_many,
    require_object,
)

logger = logging.getLogger(__name__)


class FarmerService:
    def __init__(self, client: RequestClient):
        self.client = client

    @failure_policy(FailurePolicy.ABSORB, fallback=None)
    async def get_farmer_by_id(self, farmer_id: int) -> Optional[Farmer]:
        envelope = await self.client.get(f"/farmers/{farmer_id}")
        if not is_success(envelope):
            logger.info("Farmer %s not returned: %s", farmer_id, backend_message(envelope, "no reason given"))
            return None
        return normalize_farmer(require_object(extract_api_data(envelope), "farmer"))

    @failure_policy(FailurePolicy.ABSORB, fallback=list)
    async def get_farmer_products(self, farmer_id: int) -> List[FarmerProduct]:
        envelope = await self.client.get(f"/farmers/{farmer_id}/products")
        if not is_success(envelope):
            logger.info("Products for farmer %s not returned: %s", farmer_id, backend_message(envelope, "no reason given"))
            return []
        return normalize_many(extract_api_data(envelope), normalize_farmer_product, "farmer product")

    @failure_policy(FailurePolicy.REPORT, message="Failed to update phone number")
    async def update_farmer_phone(self, farmer_id: int, phone: str) -> OperationResult:
        envelope = await self.client.put(f"/farmers/{farmer_id}/phone", json={"phone": phone})
        success = is_success(envelope)
        default = "Phone updated successfully" if success else "Failed to update phone number"
        return OperationResult(success=success, message=backend_message(envelope, default))

    @failure_policy(FailurePolicy.ABSORB, fallback=list)
    async def get_all_farmers(self) -> List[Farmer]:
        envelope = await self.client.get("/farmers")
        if not is_success(envelope):
            return []
        return normalize_many(extract_api_data(envelope), normalize_farmer, "farmer")

