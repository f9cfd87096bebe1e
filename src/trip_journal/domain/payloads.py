"""Request bodies sent to the journal API."""

import base64
from datetime import datetime

from pydantic import BaseModel, field_serializer

from trip_journal.domain.models import Location


class RequestPayload(BaseModel):
    """Base for write-only request bodies."""

    def to_json(self) -> bytes:
        """Encode the payload with ISO-8601 dates, omitting unset optionals."""
        return self.model_dump_json(exclude_none=True).encode()


class Credentials(RequestPayload):
    """Username and password pair for registration."""

    username: str
    password: str


class TripCreate(RequestPayload):
    """Payload for creating a trip."""

    name: str
    start_date: datetime
    end_date: datetime


class TripUpdate(RequestPayload):
    """Payload for updating a trip."""

    name: str
    start_date: datetime
    end_date: datetime


class EventCreate(RequestPayload):
    """Payload for creating an event in a trip."""

    trip_id: int
    name: str
    note: str | None = None
    date: datetime
    location: Location | None = None
    transition_from_previous: str | None = None


class EventUpdate(RequestPayload):
    """Payload for updating an event."""

    name: str
    note: str | None = None
    date: datetime
    location: Location | None = None
    transition_from_previous: str | None = None


class MediaCreate(RequestPayload):
    """Payload for uploading media to an event."""

    event_id: int
    base64_data: bytes

    @field_serializer("base64_data")
    def _encode_data(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")
