"""Shared test fixtures."""

from dataclasses import dataclass, field

import httpx
import pytest

from trip_journal.adapters.journal_client import HttpxJournalService
from trip_journal.config import Settings
from trip_journal.domain.models import Token

BASE_URL = "http://journal.test"


@dataclass
class RecordingHandler:
    """MockTransport handler that records requests and replies with a fixed response."""

    status_code: int = 200
    payload: object = None
    content: bytes | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)

    def reply(
        self, status_code: int, payload: object = None, content: bytes | None = None
    ) -> None:
        self.status_code = status_code
        self.payload = payload
        self.content = content


TRIP_PAYLOAD: dict[str, object] = {
    "id": 7,
    "name": "Lisbon",
    "start_date": "2024-05-01T00:00:00Z",
    "end_date": "2024-05-08T00:00:00Z",
    "events": [
        {
            "id": 11,
            "name": "Tram 28",
            "note": "Front seat",
            "date": "2024-05-02T10:30:00Z",
            "location": {
                "latitude": 38.7139,
                "longitude": -9.1334,
                "address": "Praça Martim Moniz",
            },
            "medias": [{"id": 5, "url": "https://cdn.test/tram.jpg"}],
            "transition_from_previous": "Walked from the hotel",
        }
    ],
}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        journal_api_base_url=BASE_URL,
        journal_api_timeout_seconds=3.0,
    )


@pytest.fixture
def token() -> Token:
    return Token(access_token="abc123", token_type="bearer")


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def journal_service(handler: RecordingHandler) -> HttpxJournalService:
    transport = httpx.MockTransport(handler)
    return HttpxJournalService(
        base_url=BASE_URL,
        http_client=httpx.AsyncClient(transport=transport),
    )


@pytest.fixture
def authed_service(
    journal_service: HttpxJournalService, token: Token
) -> HttpxJournalService:
    journal_service.session.set_token(token)
    return journal_service
