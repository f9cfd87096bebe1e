"""Session token state with authentication change notifications."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field

from trip_journal.domain.models import Token

AuthListener = Callable[[bool], None]

_logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Holds the active token and publishes authentication changes.

    Every assignment publishes, including clearing an already empty session,
    so listeners see each login, logout and rejected request.
    """

    _token: Token | None = None
    _listeners: list[AuthListener] = field(default_factory=list)

    @property
    def token(self) -> Token | None:
        """Return the active token, if any."""
        return self._token

    @property
    def is_authenticated(self) -> bool:
        """Return whether a token is currently held."""
        return self._token is not None

    def set_token(self, token: Token | None) -> None:
        """Replace the active token and notify listeners."""
        self._token = token
        self._publish()

    def clear(self) -> None:
        """Drop the active token and notify listeners."""
        self.set_token(None)

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener, send it the current state, return an unsubscriber."""
        self._listeners.append(listener)
        self._notify(listener, self.is_authenticated)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def watch(self) -> AsyncIterator[bool]:
        """Yield the current state, then every published state."""
        queue: asyncio.Queue[bool] = asyncio.Queue()
        unsubscribe = self.subscribe(queue.put_nowait)
        try:
            while True:
                yield await queue.get()
        finally:
            unsubscribe()

    def _publish(self) -> None:
        value = self.is_authenticated
        for listener in list(self._listeners):
            self._notify(listener, value)

    def _notify(self, listener: AuthListener, value: bool) -> None:
        try:
            listener(value)
        except Exception:
            _logger.exception("Authentication listener failed")
