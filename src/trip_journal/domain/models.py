"""Pydantic models for journal API responses."""

from datetime import datetime

from pydantic import BaseModel, Field


class Token(BaseModel):
    """Session credential issued by the journal API."""

    access_token: str
    token_type: str

    @property
    def authorization(self) -> str:
        """Return the Authorization header value, possibly empty."""
        return f"{self.token_type} {self.access_token}".strip()


class Location(BaseModel):
    """Geographic location attached to an event."""

    latitude: float
    longitude: float
    address: str | None = None


class Media(BaseModel):
    """Media item attached to an event."""

    id: int
    url: str | None = None


class Event(BaseModel):
    """Journal event within a trip."""

    id: int
    name: str
    note: str | None = None
    date: datetime
    location: Location | None = None
    medias: list[Media] = Field(default_factory=list)
    transition_from_previous: str | None = None


class Trip(BaseModel):
    """Trip with its events."""

    id: int
    name: str
    start_date: datetime
    end_date: datetime
    events: list[Event] = Field(default_factory=list)
