import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from src.rsvps.dependencies import get_rsvp_store
from src.rsvps.dtos import MalformedInput, StorageWriteFailed
from src.rsvps.features.submit_rsvp.dtos import (
    RSVP_FAILED_MESSAGE,
    RSVP_INVALID_MESSAGE,
    RSVP_RECEIVED_MESSAGE,
    FieldErrorResponse,
    MalformedRsvpResponse,
    RsvpAcknowledgment,
    parse_submission,
)
from src.rsvps.repository.store import RsvpStore
from src.rsvps.urls import SUBMIT_RSVP_URL

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    SUBMIT_RSVP_URL,
    response_model=RsvpAcknowledgment,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": MalformedRsvpResponse},
        500: {"model": RsvpAcknowledgment},
    },
)
async def submit_rsvp(
    payload: Any = Body(...),
    store: RsvpStore = Depends(get_rsvp_store),
):
    """
    Record one guest's RSVP.

    Every valid submission is stored as a new record, including repeat
    submissions from the same guest. Storage errors are logged and reported
    to the caller only as a generic failure.
    """
    try:
        record = parse_submission(payload)
    except MalformedInput as e:
        logger.info("Rejected RSVP submission: %s", e)
        body = MalformedRsvpResponse(
            success=False,
            message=RSVP_INVALID_MESSAGE,
            errors=[
                FieldErrorResponse(field=error.field, message=error.message)
                for error in e.errors
            ],
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=body.model_dump(),
        )

    try:
        await store.append(record)
    except StorageWriteFailed:
        logger.exception("RSVP Error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=RsvpAcknowledgment(success=False, message=RSVP_FAILED_MESSAGE).model_dump(),
        )

    return RsvpAcknowledgment(success=True, message=RSVP_RECEIVED_MESSAGE)
