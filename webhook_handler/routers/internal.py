"""
Internal router - health checks and delivery stats.
"""
from fastapi import APIRouter
from pydantic import BaseModel, Field

from webhook_handler.services.stats import stats_collector

router = APIRouter(tags=["internal"])


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(example="healthy")


class DeliveryStatsResponse(BaseModel):
    """Delivery counters since server start, keyed by outward outcome."""
    total: int = Field(example=12, description="Total number of deliveries")
    incoming_bytes: int = Field(example=10240, description="Total bytes of bodies read in full, including rejected signatures")
    triggered: int = Field(example=9, description="Verified deliveries that launched the script")
    bad_request: int = Field(example=1, description="Deliveries without a signature header")
    unauthorized: int = Field(example=1, description="Deliveries with an invalid signature")
    payload_too_large: int = Field(example=0, description="Deliveries over the body size limit")
    server_error: int = Field(example=1, description="Missing configuration or script launch failures")


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy")


@router.get("/stats", response_model=DeliveryStatsResponse)
async def stats() -> DeliveryStatsResponse:
    """
    Get delivery counters since server start.

    Rejected signatures are counted under **unauthorized** whatever the
    reason, so the counters reveal nothing about why a signature failed.
    """
    return DeliveryStatsResponse(**await stats_collector.get_stats())
