"""
Auth change notifications.

A small observer registry: handlers subscribe, get a token back, and are
called one at a time in registration order for every published event.
"""

import inspect
import itertools
import logging
from typing import Awaitable, Callable, Union

from .models import AuthEvent

logger = logging.getLogger(__name__)

AuthEventHandler = Callable[[AuthEvent], Union[None, Awaitable[None]]]


class AuthEventBus:
    """Delivers AuthEvents to subscribers in arrival order."""

    def __init__(self) -> None:
        self._handlers: dict[int, AuthEventHandler] = {}
        self._tokens = itertools.count(1)

    def subscribe(self, handler: AuthEventHandler) -> int:
        token = next(self._tokens)
        self._handlers[token] = handler
        return token

    def unsubscribe(self, token: int) -> None:
        self._handlers.pop(token, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    async def publish(self, event: AuthEvent) -> None:
        """Call every handler with `event`, awaiting async handlers."""
        logger.debug("Auth event %s", event.type.value)
        # Snapshot: handlers may unsubscribe while being notified
        for handler in list(self._handlers.values()):
            result = handler(event)
            if inspect.isawaitable(result):
                await result
