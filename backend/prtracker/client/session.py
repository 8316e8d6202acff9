"""Signed-in identity for the client components.

A ``SessionContext`` is created when the app starts and handed to every
component that needs to know who is signed in. It is torn down with
``end()`` on sign-out, which notifies subscribers so they can drop any
per-user state.
"""

from typing import Callable, Optional

from loguru import logger

from prtracker.core.errors import AuthRequiredError
from prtracker.schemas.auth import AuthSession


SessionListener = Callable[[Optional[AuthSession]], None]


class SessionContext:
    def __init__(self, session: AuthSession | None = None):
        self._current = session
        self._listeners: list[SessionListener] = []

    @property
    def current(self) -> AuthSession | None:
        if self._current is not None and self._current.expired:
            return None
        return self._current

    @property
    def user_id(self) -> str | None:
        session = self.current
        return session.user_id if session else None

    @property
    def is_authenticated(self) -> bool:
        return self.current is not None

    def require(self) -> AuthSession:
        session = self.current
        if session is None:
            if self._current is not None:
                raise AuthRequiredError("Your session has expired. Please sign in again.")
            raise AuthRequiredError("You must be logged in to do that.")
        return session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register `listener`; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self, session: AuthSession) -> None:
        self._current = session
        logger.info("Session started", user_id=session.user_id)
        self._notify()

    def end(self) -> None:
        if self._current is None:
            return
        logger.info("Session ended", user_id=self._current.user_id)
        self._current = None
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._current)
