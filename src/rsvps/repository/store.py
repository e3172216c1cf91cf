"""Append-only storage for RSVP responses."""

import abc
import logging

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from src.config.database import (
    async_session_manager,
    create_engine,
    create_session_maker,
)
from src.models.base import BaseModel
from src.rsvps.dtos import (
    RsvpRecord,
    RsvpRecordInput,
    StorageReadFailed,
    StorageUnavailable,
    StorageWriteFailed,
)
from src.rsvps.repository.orm_models import Rsvp, dump_allergies

logger = logging.getLogger(__name__)


class RsvpStore(abc.ABC):
    @abc.abstractmethod
    async def initialize(self) -> None:
        """
        Ensure the RSVP table exists. Safe to call on every start.
        Raises StorageUnavailable if the database cannot be opened.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def append(self, record: RsvpRecordInput) -> RsvpRecord:
        """
        Persist one RSVP and return it with its assigned id and created_at.
        Raises StorageWriteFailed; nothing is stored in that case.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def list_all(self) -> list[RsvpRecord]:
        """
        All RSVPs, newest first. Raises StorageReadFailed.
        """
        raise NotImplementedError

    async def ping(self) -> bool:
        """True when the backing database answers."""
        return True

    async def dispose(self) -> None:
        """Release any held resources."""


class SqlRsvpStore(RsvpStore):
    """SQL implementation of the RSVP store."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_maker = create_session_maker(engine)

    @classmethod
    def from_dsn(cls, dsn: str) -> "SqlRsvpStore":
        return cls(create_engine(dsn))

    async def initialize(self) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(BaseModel.metadata.create_all)
        except (SQLAlchemyError, OSError) as exc:
            raise StorageUnavailable(
                f"Could not open RSVP database at {self.engine.url!r}"
            ) from exc
        logger.info("RSVP storage ready at %r", self.engine.url)

    async def append(self, record: RsvpRecordInput) -> RsvpRecord:
        try:
            async with async_session_manager(self.session_maker) as session:
                rsvp = Rsvp(
                    name=record.name,
                    email=record.email,
                    attending=record.attending.value,
                    guests=record.guests,
                    allergies=dump_allergies(record.allergies),
                    other_allergies=record.other_allergies,
                    song=record.song,
                    transport=record.transport.value,
                    message=record.message,
                )
                session.add(rsvp)
                await session.flush()
                # created_at is filled in by the database
                await session.refresh(rsvp)
                stored = RsvpRecord.from_orm(rsvp)
        except SQLAlchemyError as exc:
            raise StorageWriteFailed("Could not store RSVP") from exc

        logger.info("Stored RSVP %s (attending=%s)", stored.id, stored.attending)
        return stored

    async def list_all(self) -> list[RsvpRecord]:
        stmt = select(Rsvp).order_by(Rsvp.created_at.desc(), Rsvp.id.desc())
        try:
            async with async_session_manager(self.session_maker, auto_commit=False) as session:
                result = await session.execute(stmt)
                return [RsvpRecord.from_orm(rsvp) for rsvp in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise StorageReadFailed("Could not read RSVPs") from exc

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.warning("RSVP database did not answer", exc_info=True)
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()
