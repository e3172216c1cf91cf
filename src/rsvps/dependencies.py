from fastapi import Request

from src.rsvps.repository.store import RsvpStore


def get_rsvp_store(request: Request) -> RsvpStore:
    """Dependency to get the store built at startup."""
    return request.app.state.rsvp_store
