from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.rsvps.repository.orm_models import Rsvp


class RsvpError(Exception):
    """Base class for RSVP service errors."""


class StorageUnavailable(RsvpError):
    """Raised when the backing database cannot be opened or created."""


class StorageWriteFailed(RsvpError):
    """Raised when an RSVP could not be committed."""


class StorageReadFailed(RsvpError):
    """Raised when stored RSVPs could not be read."""


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class MalformedInput(RsvpError):
    """Raised when a submission payload fails validation."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        fields = ", ".join(error.field for error in errors) or "payload"
        super().__init__(f"Malformed RSVP submission: {fields}")


class Attending(str, Enum):
    YES = "yes"
    NO = "no"


class Transport(str, Enum):
    BUS = "bus"
    CAR = "car"


class DietaryTag(str, Enum):
    GLUTEN_FREE = "Gluten-free / Celiac"
    LACTOSE_FREE = "Lactose-free"
    VEGETARIAN = "Vegetarian"
    VEGAN = "Vegan"
    NUT_ALLERGY = "Nut allergy"
    SEAFOOD_ALLERGY = "Seafood allergy"


MAX_GUESTS_PER_RSVP = 20


@dataclass(frozen=True)
class RsvpRecordInput:
    """A validated submission, before the store assigns id and created_at."""

    name: str
    attending: Attending
    transport: Transport
    email: str | None = None
    guests: int | None = None
    allergies: tuple[DietaryTag, ...] = field(default_factory=tuple)
    other_allergies: str | None = None
    song: str | None = None
    message: str | None = None


@dataclass(frozen=True)
class RsvpRecord:
    """A stored RSVP."""

    id: int
    name: str
    attending: str
    transport: str | None
    created_at: datetime
    email: str | None = None
    guests: int | None = None
    allergies: list[str] = field(default_factory=list)
    other_allergies: str | None = None
    song: str | None = None
    message: str | None = None

    @classmethod
    def from_orm(cls, rsvp: "Rsvp") -> "RsvpRecord":
        created_at = rsvp.created_at
        # SQLite's CURRENT_TIMESTAMP is UTC but reads back naive
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return cls(
            id=rsvp.id,
            name=rsvp.name,
            email=rsvp.email,
            attending=rsvp.attending,
            guests=rsvp.guest_count,
            allergies=rsvp.allergy_tags,
            other_allergies=rsvp.other_allergies,
            song=rsvp.song,
            transport=rsvp.transport,
            message=rsvp.message,
            created_at=created_at,
        )
