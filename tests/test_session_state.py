"""Tests for session token state and authentication notifications."""

import asyncio

import pytest

from tests.conftest import RecordingHandler
from trip_journal.adapters.journal_client import HttpxJournalService
from trip_journal.domain.errors import UnauthorizedError
from trip_journal.domain.models import Token
from trip_journal.services.session import SessionState


def test_subscribe_sends_current_state_then_changes(token: Token) -> None:
    state = SessionState()
    seen: list[bool] = []

    state.subscribe(seen.append)
    state.set_token(token)
    state.clear()

    assert seen == [False, True, False]


def test_every_assignment_publishes(token: Token) -> None:
    state = SessionState(_token=token)
    seen: list[bool] = []
    state.subscribe(seen.append)

    state.set_token(Token(access_token="other", token_type="bearer"))
    state.clear()
    state.clear()

    assert seen == [True, True, False, False]


def test_unsubscribe_stops_notifications(token: Token) -> None:
    state = SessionState()
    seen: list[bool] = []

    unsubscribe = state.subscribe(seen.append)
    unsubscribe()
    unsubscribe()
    state.set_token(token)

    assert seen == [False]


def test_failing_listener_does_not_block_others(token: Token) -> None:
    state = SessionState()
    seen: list[bool] = []

    def broken(_: bool) -> None:
        raise RuntimeError("listener bug")

    state.subscribe(broken)
    state.subscribe(seen.append)
    state.set_token(token)

    assert state.token == token
    assert seen == [False, True]


def test_watch_streams_changes(token: Token) -> None:
    state = SessionState()

    async def scenario() -> list[bool]:
        stream = state.watch()
        values = [await anext(stream)]
        state.set_token(token)
        values.append(await anext(stream))
        state.clear()
        values.append(await anext(stream))
        await stream.aclose()
        return values

    assert asyncio.run(scenario()) == [False, True, False]
    assert state._listeners == []


def test_client_publishes_login_logout_and_rejection(
    journal_service: HttpxJournalService, handler: RecordingHandler
) -> None:
    seen: list[bool] = []
    journal_service.subscribe(seen.append)

    handler.reply(200, {"access_token": "abc123", "token_type": "bearer"})
    asyncio.run(journal_service.register("ana", "s3cret"))
    journal_service.logout()
    asyncio.run(journal_service.login("ana", "s3cret"))
    handler.reply(401, {"detail": "Could not validate credentials"})
    with pytest.raises(UnauthorizedError):
        asyncio.run(journal_service.get_trips())

    assert seen == [False, True, False, True, False]


def test_client_watch_authentication(
    journal_service: HttpxJournalService, handler: RecordingHandler
) -> None:
    handler.reply(200, {"access_token": "abc123", "token_type": "bearer"})

    async def scenario() -> list[bool]:
        stream = journal_service.watch_authentication()
        values = [await anext(stream)]
        await journal_service.login("ana", "s3cret")
        values.append(await anext(stream))
        await stream.aclose()
        return values

    assert asyncio.run(scenario()) == [False, True]
