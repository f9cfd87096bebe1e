"""Dependency container wiring for the client."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from trip_journal.adapters.journal_client import HttpxJournalService, JournalService
from trip_journal.app_logging import configure_logging
from trip_journal.config import Settings
from trip_journal.services.session import SessionState


@dataclass
class AppContainer:
    """Holds client-wide dependencies."""

    settings: Settings
    session: SessionState
    journal_service: JournalService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    session = SessionState()
    journal_service = HttpxJournalService.create(
        base_url=resolved_settings.journal_api_base_url,
        timeout_seconds=resolved_settings.journal_api_timeout_seconds,
        session=session,
    )

    async def close_resources() -> None:
        await journal_service.close()

    return AppContainer(
        settings=resolved_settings,
        session=session,
        journal_service=journal_service,
        close_resources=close_resources,
    )
