import json
from collections.abc import Iterable

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import Base, CreatedAt


def dump_allergies(tags: Iterable[str]) -> str:
    """Serialize dietary tags to the JSON array stored in ``rsvps.allergies``."""
    return json.dumps([str(getattr(tag, "value", tag)) for tag in tags])


def load_allergies(raw: str | None) -> list[str]:
    """Inverse of ``dump_allergies``.

    Rows written by older clients may hold NULL, the string "null" or a
    non-list value; those read back as no tags.
    """
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        return []
    if not isinstance(value, list):
        return []
    return [str(tag) for tag in value]


def load_guests(raw: object) -> int | None:
    """Party size as stored, or None.

    Older clients posted the raw form input, so SQLite may hand back '' or a
    float such as 2.5 from the INTEGER column.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    elif isinstance(raw, str) and raw.strip().isdigit():
        raw = int(raw)
    if isinstance(raw, int) and raw >= 1:
        return raw
    return None


class Rsvp(Base, CreatedAt):
    __tablename__ = TableNames.RSVPS.value
    # ids are never reused, even after the newest row is removed by hand
    __table_args__ = {"sqlite_autoincrement": True}

    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    attending: Mapped[str] = mapped_column(Text, nullable=False)
    guests: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # JSON array of dietary tags
    allergies: Mapped[str | None] = mapped_column(Text, nullable=True)
    other_allergies: Mapped[str | None] = mapped_column(Text, nullable=True)
    song: Mapped[str | None] = mapped_column(Text, nullable=True)
    transport: Mapped[str | None] = mapped_column(Text, nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def allergy_tags(self) -> list[str]:
        return load_allergies(self.allergies)

    @property
    def guest_count(self) -> int | None:
        return load_guests(self.guests)

    def __repr__(self) -> str:
        return f"<Rsvp {self.id} {self.name} - {self.attending}>"
