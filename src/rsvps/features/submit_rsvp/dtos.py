"""DTOs for the submit RSVP feature."""

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    field_validator,
)

from src.rsvps.dtos import (
    MAX_GUESTS_PER_RSVP,
    Attending,
    DietaryTag,
    FieldError,
    MalformedInput,
    RsvpRecordInput,
    Transport,
)

RSVP_RECEIVED_MESSAGE = "RSVP received! Thank you."
RSVP_FAILED_MESSAGE = "Failed to save RSVP."
RSVP_INVALID_MESSAGE = "Please check the form and try again."


class RsvpSubmission(BaseModel):
    """Request body sent by the invitation page."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr | None = None
    attending: Attending
    guests: int | None = Field(default=None, ge=1, le=MAX_GUESTS_PER_RSVP)
    allergies: list[DietaryTag] = []
    # the page posts this field as "otherAllergies"
    other_allergies: str | None = Field(
        default=None,
        validation_alias=AliasChoices("other_allergies", "otherAllergies"),
    )
    song: str | None = None
    transport: Transport
    message: str | None = None

    @field_validator("email", "guests", "other_allergies", "song", "message", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("guests", mode="before")
    @classmethod
    def reject_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("Input should be a valid integer")
        return value

    @field_validator("allergies", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_record_input(self) -> RsvpRecordInput:
        attending = self.attending == Attending.YES
        return RsvpRecordInput(
            name=self.name,
            email=str(self.email) if self.email else None,
            attending=self.attending,
            # party size only matters for guests who are coming
            guests=(self.guests or 1) if attending else None,
            allergies=tuple(dict.fromkeys(self.allergies)),
            other_allergies=self.other_allergies,
            song=self.song,
            transport=self.transport,
            message=self.message,
        )


def parse_submission(payload: Any) -> RsvpRecordInput:
    """Validate an untrusted payload.

    Raises:
        MalformedInput: listing every offending field.
    """
    try:
        submission = RsvpSubmission.model_validate(payload)
    except ValidationError as exc:
        errors = [
            FieldError(
                field=".".join(str(part) for part in error["loc"]) or "body",
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        raise MalformedInput(errors) from exc
    return submission.to_record_input()


class RsvpAcknowledgment(BaseModel):
    success: bool
    message: str


class FieldErrorResponse(BaseModel):
    field: str
    message: str


class MalformedRsvpResponse(RsvpAcknowledgment):
    errors: list[FieldErrorResponse] = []
