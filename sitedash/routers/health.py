from fastapi import APIRouter

from sitedash.models.response import HealthResponse
from sitedash.services.site_store import iso_timestamp

SERVICE_NAME = "site-dashboard-server"

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health() -> HealthResponse:
    return HealthResponse(status="ok", timestamp=iso_timestamp(), service=SERVICE_NAME)
