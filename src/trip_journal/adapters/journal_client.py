"""Trip journal REST API client."""

import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field
from typing import Protocol, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from trip_journal.domain.errors import (
    DecodingError,
    HttpStatusError,
    InvalidResponseError,
    InvalidURLError,
    UnauthorizedError,
    UnderlyingError,
)
from trip_journal.domain.models import Event, Media, Token, Trip
from trip_journal.domain.payloads import (
    Credentials,
    EventCreate,
    EventUpdate,
    MediaCreate,
    RequestPayload,
    TripCreate,
    TripUpdate,
)
from trip_journal.services.session import AuthListener, SessionState

T = TypeVar("T")

_JSON = "application/json"
_FORM = "application/x-www-form-urlencoded"
# Query-allowed characters minus the ones that delimit form fields or mean space.
_FORM_SAFE = "!$'()*,-./:;?@_~"

_TOKEN = TypeAdapter(Token)
_TRIP = TypeAdapter(Trip)
_TRIPS = TypeAdapter(list[Trip])
_EVENT = TypeAdapter(Event)
_MEDIA = TypeAdapter(Media)

_logger = logging.getLogger(__name__)


class JournalService(Protocol):
    """Interface for trip journal backend interactions."""

    @property
    def is_authenticated(self) -> bool:
        """Return whether a session token is held."""

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Observe authentication changes."""

    async def register(self, username: str, password: str) -> Token:
        """Create an account and start a session."""

    async def login(self, username: str, password: str) -> Token:
        """Start a session with existing credentials."""

    def logout(self) -> None:
        """End the current session locally."""

    async def create_trip(self, request: TripCreate) -> Trip:
        """Create a trip."""

    async def get_trips(self) -> list[Trip]:
        """List the user's trips."""

    async def get_trip(self, trip_id: int) -> Trip:
        """Fetch a single trip."""

    async def update_trip(self, trip_id: int, request: TripUpdate) -> Trip:
        """Update a trip."""

    async def delete_trip(self, trip_id: int) -> None:
        """Delete a trip."""

    async def create_event(self, request: EventCreate) -> Event:
        """Create an event in a trip."""

    async def update_event(self, event_id: int, request: EventUpdate) -> Event:
        """Update an event."""

    async def delete_event(self, event_id: int) -> None:
        """Delete an event."""

    async def create_media(self, request: MediaCreate) -> Media:
        """Attach media to an event."""

    async def delete_media(self, media_id: int) -> None:
        """Delete a media item."""


def percent_escape(value: str) -> str:
    """Percent-encode a form value so spaces become %20 rather than +."""
    return quote(value, safe=_FORM_SAFE)


@dataclass
class HttpxJournalService(JournalService):
    """Journal client implemented with httpx.

    Authorized calls fail with ``UnauthorizedError`` before any request is
    sent when no token is held. A 401 from the server clears the token.
    """

    base_url: str
    http_client: httpx.AsyncClient
    session: SessionState = field(default_factory=SessionState)

    @classmethod
    def create(
        cls,
        base_url: str,
        timeout_seconds: float = 10.0,
        session: SessionState | None = None,
    ) -> "HttpxJournalService":
        """Create a journal client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(timeout=timeout_seconds),
            session=session or SessionState(),
        )

    @property
    def is_authenticated(self) -> bool:
        """Return whether a session token is held."""
        return self.session.is_authenticated

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Observe authentication changes."""
        return self.session.subscribe(listener)

    def watch_authentication(self) -> AsyncIterator[bool]:
        """Stream authentication changes."""
        return self.session.watch()

    async def register(self, username: str, password: str) -> Token:
        """Register via POST /register and store the issued token."""
        request = self._build_request(
            "POST",
            "/register",
            authorized=False,
            body=Credentials(username=username, password=password),
        )
        token = await self._send(request, _TOKEN)
        self.session.set_token(token)
        return token

    async def login(self, username: str, password: str) -> Token:
        """Log in via the form-encoded POST /token and store the token."""
        form = (
            f"grant_type=&username={percent_escape(username)}"
            f"&password={percent_escape(password)}"
        )
        request = self._build_request(
            "POST",
            "/token",
            authorized=False,
            content=form.encode(),
            content_type=_FORM,
        )
        token = await self._send(request, _TOKEN)
        self.session.set_token(token)
        return token

    def logout(self) -> None:
        """Forget the current token without contacting the server."""
        self.session.clear()

    async def create_trip(self, request: TripCreate) -> Trip:
        """Create a trip."""
        return await self._send(
            self._build_request("POST", "/trips", body=request), _TRIP
        )

    async def get_trips(self) -> list[Trip]:
        """List the user's trips."""
        return await self._send(self._build_request("GET", "/trips"), _TRIPS)

    async def get_trip(self, trip_id: int) -> Trip:
        """Fetch a single trip."""
        return await self._send(self._build_request("GET", f"/trips/{trip_id}"), _TRIP)

    async def update_trip(self, trip_id: int, request: TripUpdate) -> Trip:
        """Replace a trip's name and dates."""
        return await self._send(
            self._build_request("PUT", f"/trips/{trip_id}", body=request), _TRIP
        )

    async def delete_trip(self, trip_id: int) -> None:
        """Delete a trip."""
        await self._perform(self._build_request("DELETE", f"/trips/{trip_id}"))

    async def create_event(self, request: EventCreate) -> Event:
        """Create an event in a trip."""
        return await self._send(
            self._build_request("POST", "/events", body=request), _EVENT
        )

    async def update_event(self, event_id: int, request: EventUpdate) -> Event:
        """Update an event."""
        return await self._send(
            self._build_request("PUT", f"/events/{event_id}", body=request), _EVENT
        )

    async def delete_event(self, event_id: int) -> None:
        """Delete an event."""
        await self._perform(self._build_request("DELETE", f"/events/{event_id}"))

    async def create_media(self, request: MediaCreate) -> Media:
        """Upload base64-encoded media for an event."""
        return await self._send(
            self._build_request("POST", "/media", body=request), _MEDIA
        )

    async def delete_media(self, media_id: int) -> None:
        """Delete a media item."""
        await self._perform(self._build_request("DELETE", f"/media/{media_id}"))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _resolve(self, path: str) -> httpx.URL:
        try:
            url = httpx.URL(self.base_url).join(path)
        except httpx.InvalidURL as exc:
            raise InvalidURLError() from exc
        if url.scheme not in {"http", "https"} or not url.host:
            raise InvalidURLError()
        return url

    def _build_request(  # noqa: PLR0913
        self,
        method: str,
        path: str,
        *,
        authorized: bool = True,
        body: RequestPayload | None = None,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> httpx.Request:
        url = self._resolve(path)
        headers = {"Accept": _JSON}

        if authorized:
            token = self.session.token
            if token is None:
                raise UnauthorizedError()
            if token.authorization:
                headers["Authorization"] = token.authorization

        if body is not None:
            content = body.to_json()
            content_type = _JSON
        if content is not None and content_type is not None:
            headers["Content-Type"] = content_type

        return self.http_client.build_request(
            method, url, headers=headers, content=content
        )

    async def _send(self, request: httpx.Request, adapter: TypeAdapter[T]) -> T:
        data = await self._perform(request)
        try:
            return adapter.validate_json(data)
        except ValidationError as exc:
            raise DecodingError(exc) from exc

    async def _perform(self, request: httpx.Request) -> bytes:
        try:
            response = await self.http_client.send(request)
        except httpx.HTTPError as exc:
            _logger.debug(
                "Journal API %s %s failed: %s", request.method, request.url.path, exc
            )
            raise UnderlyingError(exc) from exc

        if not isinstance(response, httpx.Response):
            raise InvalidResponseError()

        status_code = response.status_code
        _logger.debug(
            "Journal API %s %s -> %s", request.method, request.url.path, status_code
        )
        if not 200 <= status_code < 300:
            if status_code == 401:
                _logger.warning("Journal API rejected the session token; logging out")
                self.session.clear()
                raise UnauthorizedError()
            raise HttpStatusError(status_code)

        return response.content
