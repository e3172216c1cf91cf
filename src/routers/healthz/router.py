from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from src.rsvps.dependencies import get_rsvp_store
from src.rsvps.repository.store import RsvpStore

router = APIRouter()

VERSION = "0.1.0"


class HealthCheckResponse(BaseModel):
    status: str
    database: str
    version: str = VERSION


@router.get("/", response_model=HealthCheckResponse)
async def health_check(
    response: Response,
    store: RsvpStore = Depends(get_rsvp_store),
) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API and its database are reachable.
    """
    if await store.ping():
        return HealthCheckResponse(status="healthy", database="ok")

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthCheckResponse(status="degraded", database="unavailable")
