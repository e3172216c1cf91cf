"""In-memory store for testing - no database required."""

from datetime import UTC, datetime

from src.rsvps.dtos import (
    RsvpRecord,
    RsvpRecordInput,
    StorageReadFailed,
    StorageWriteFailed,
)
from src.rsvps.repository.store import RsvpStore


class InMemoryRsvpStore(RsvpStore):
    """In-memory RSVP store for testing."""

    def __init__(self, fail_writes: bool = False, fail_reads: bool = False):
        self.records: list[RsvpRecord] = []
        self.append_calls = 0
        self.fail_writes = fail_writes
        self.fail_reads = fail_reads
        self.healthy = True

    async def initialize(self) -> None:
        pass

    async def append(self, record: RsvpRecordInput) -> RsvpRecord:
        self.append_calls += 1
        if self.fail_writes:
            raise StorageWriteFailed("disk full")

        stored = RsvpRecord(
            id=len(self.records) + 1,
            name=record.name,
            email=record.email,
            attending=record.attending.value,
            guests=record.guests,
            allergies=[tag.value for tag in record.allergies],
            other_allergies=record.other_allergies,
            song=record.song,
            transport=record.transport.value,
            message=record.message,
            created_at=datetime.now(UTC),
        )
        self.records.append(stored)
        return stored

    async def list_all(self) -> list[RsvpRecord]:
        if self.fail_reads:
            raise StorageReadFailed("database is locked")
        return sorted(self.records, key=lambda r: (r.created_at, r.id), reverse=True)

    async def ping(self) -> bool:
        return self.healthy
