"""
Session refresher.

Validates the access credential carried by a request and rotates it when
it has expired. Every failure ends in "no session": the cookies are
cleared and the caller treats the request as signed out.
"""

import logging
from typing import Optional

from shared.exceptions import AuthenticationError

from .codec import CookieJar, SessionCodec
from .events import AuthEventBus
from .exceptions import CredentialStoreUnavailableError
from .interfaces import ICredentialStore
from .models import AuthEvent, AuthEventType, Session, TokenStatus

logger = logging.getLogger(__name__)


class SessionRefresher:
    """Keeps the session in a cookie jar current."""

    def __init__(self, store: ICredentialStore, codec: SessionCodec):
        self._store = store
        self._codec = codec

    async def refresh(
        self,
        jar: CookieJar,
        events: Optional[AuthEventBus] = None,
    ) -> tuple[Optional[Session], CookieJar]:
        """
        Validate and, if needed, rotate the session in `jar`.

        Returns the live session (None when signed out) and the same jar,
        which holds any cookie writes the response must carry. Calling
        this again while the session is valid writes nothing.
        """
        session = self._codec.decode(jar)
        if session is None:
            return None, jar

        try:
            check = await self._store.validate(session.access_token)
        except CredentialStoreUnavailableError as e:
            logger.warning("Access token validation failed: %s", e.message)
            self._codec.clear(jar)
            return None, jar

        if check.status == TokenStatus.VALID:
            return session.model_copy(update={"user": check.user}), jar

        if check.status == TokenStatus.INVALID:
            logger.info("Discarding session with an invalid access token")
            self._codec.clear(jar)
            return None, jar

        try:
            rotated = await self._store.rotate(session.refresh_token)
        except CredentialStoreUnavailableError as e:
            logger.warning("Session rotation failed, provider unavailable: %s", e.message)
            self._codec.clear(jar)
            return None, jar
        except AuthenticationError as e:
            logger.info("Session rotation rejected: %s", e.message)
            self._codec.clear(jar)
            return None, jar

        self._codec.encode(rotated, jar)
        logger.debug("Rotated session for user %s", rotated.user.id if rotated.user else "?")

        if events is not None:
            await events.publish(AuthEvent(type=AuthEventType.TOKEN_REFRESHED, session=rotated))
        return rotated, jar
