import logging
import secrets
from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.config.settings import settings
from src.rsvps.dependencies import get_rsvp_store
from src.rsvps.dtos import StorageReadFailed
from src.rsvps.repository.store import RsvpStore
from src.rsvps.urls import LIST_RSVPS_URL

logger = logging.getLogger(__name__)

router = APIRouter()

RSVPS_FAILED_MESSAGE = "Failed to load RSVPs."


class RsvpResponse(BaseModel):
    id: int
    name: str
    email: str | None
    attending: str
    guests: int | None
    allergies: list[str]
    other_allergies: str | None
    song: str | None
    transport: str | None
    message: str | None
    created_at: datetime


class ListFailedResponse(BaseModel):
    success: bool
    message: str


def get_operator_token() -> str:
    """Dependency to get the configured operator token ("" disables the check)."""
    return settings.OPERATOR_TOKEN


async def require_operator(
    x_operator_token: str | None = Header(default=None),
    operator_token: str = Depends(get_operator_token),
) -> None:
    if not operator_token:
        return
    if x_operator_token is None or not secrets.compare_digest(
        x_operator_token.encode(), operator_token.encode()
    ):
        raise HTTPException(status_code=401, detail="Invalid operator token")


@router.get(
    LIST_RSVPS_URL,
    response_model=list[RsvpResponse],
    dependencies=[Depends(require_operator)],
    responses={500: {"model": ListFailedResponse}},
)
async def list_rsvps(
    store: RsvpStore = Depends(get_rsvp_store),
):
    """
    All RSVPs, newest first, for the couple to review.
    """
    try:
        records = await store.list_all()
    except StorageReadFailed:
        logger.exception("Failed to list RSVPs")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ListFailedResponse(success=False, message=RSVPS_FAILED_MESSAGE).model_dump(),
        )

    return [RsvpResponse(**asdict(record)) for record in records]
