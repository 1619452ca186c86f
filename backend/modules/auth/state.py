"""
Request-scoped session state.

SessionState is the context object route handlers receive instead of a
global "current user". It is started once per request from the session the
gate validated, keeps the user's profile alongside it, and re-syncs
whenever an auth event is published on the request's event bus.

Every operation that changes the session writes through the cookie jar, so
the browser's cookies and this object never disagree after a response.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from shared.exceptions import AuthenticationError, ExternalServiceError
from shared.models import AuthenticatedUser

from .codec import CookieJar, SessionCodec
from .events import AuthEventBus
from .exceptions import MissingSessionError
from .interfaces import ICredentialStore
from .models import AuthEvent, AuthEventType, AuthResult, Session

logger = logging.getLogger(__name__)

ProfileLoader = Callable[[Session], Awaitable[Optional[Any]]]


class SessionState:
    """
    Current session, profile and loading flag for one request.

    Lifecycle: start() subscribes to the event bus and loads the profile;
    close() unsubscribes. Use once; create a new one per request.
    """

    def __init__(
        self,
        store: ICredentialStore,
        codec: SessionCodec,
        jar: CookieJar,
        events: AuthEventBus,
        profile_loader: Optional[ProfileLoader] = None,
    ):
        self._store = store
        self._codec = codec
        self._jar = jar
        self._events = events
        self._profile_loader = profile_loader
        self._subscription: Optional[int] = None

        self.session: Optional[Session] = None
        self.profile: Optional[Any] = None
        self.loading: bool = True
        self.error: Optional[str] = None

    @property
    def user(self) -> Optional[AuthenticatedUser]:
        return self.session.user if self.session else None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    @property
    def jar(self) -> CookieJar:
        return self._jar

    async def start(self, session: Optional[Session] = None) -> "SessionState":
        """
        Initialize from `session` (as validated by the gate) or, failing
        that, from whatever the cookie jar currently holds.
        """
        self._subscription = self._events.subscribe(self._on_auth_event)
        initial = session if session is not None else self._codec.decode(self._jar)
        await self._sync(initial)
        self.loading = False
        return self

    def close(self) -> None:
        if self._subscription is not None:
            self._events.unsubscribe(self._subscription)
            self._subscription = None

    async def _on_auth_event(self, event: AuthEvent) -> None:
        if event.type == AuthEventType.SIGNED_OUT:
            await self._sync(None)
        elif event.session is not None:
            await self._sync(event.session)
        else:
            await self.refresh_profile()

    async def _sync(self, session: Optional[Session]) -> None:
        self.session = session
        self.profile = None
        if session is not None:
            await self.refresh_profile()

    async def refresh_profile(self) -> None:
        """Reload the profile of the current user."""
        if self.session is None or self._profile_loader is None:
            self.profile = None
            return
        try:
            self.profile = await self._profile_loader(self.session)
            self.error = None
        except ExternalServiceError as e:
            logger.warning("Profile load failed: %s", e.message)
            self.profile = None
            self.error = e.message

    # -------------------------------------------------------------------------
    # Auth operations
    # -------------------------------------------------------------------------

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
    ) -> AuthResult:
        result = await self._store.sign_up(email, password, full_name)
        if result.session is not None:
            self._codec.encode(result.session, self._jar)
            await self._events.publish(
                AuthEvent(type=AuthEventType.SIGNED_IN, session=result.session)
            )
        elif result.code_verifier:
            # Email confirmation pending; the callback needs the verifier
            self._codec.store_verifier(result.code_verifier, self._jar)
        return result

    async def sign_in(self, email: str, password: str) -> Session:
        result = await self._store.sign_in(email, password)
        session = result.session
        self._codec.encode(session, self._jar)
        await self._events.publish(AuthEvent(type=AuthEventType.SIGNED_IN, session=session))
        return session

    async def sign_out(self) -> None:
        """
        Revoke the session with the provider and clear the cookies.

        Cookies are cleared even if the provider call fails; a session the
        provider still considers live can no longer be presented by this
        browser.
        """
        session = self.session or self._codec.decode(self._jar)
        try:
            if session is not None:
                await self._store.sign_out(session.access_token)
        except (AuthenticationError, ExternalServiceError) as e:
            logger.warning("Provider sign-out failed, clearing cookies anyway: %s", e.message)
        finally:
            self._codec.clear(self._jar)
            await self._events.publish(AuthEvent(type=AuthEventType.SIGNED_OUT))

    async def request_password_reset(self, email: str) -> None:
        verifier = await self._store.reset_password(email)
        if verifier:
            self._codec.store_verifier(verifier, self._jar)

    async def exchange_code(self, code: str, recovery: bool = False) -> Session:
        """Complete an email-link flow by trading the code for a session."""
        verifier = self._codec.take_verifier(self._jar)
        session = await self._store.exchange_code(code, verifier)
        self._codec.encode(session, self._jar)
        event_type = AuthEventType.PASSWORD_RECOVERY if recovery else AuthEventType.SIGNED_IN
        await self._events.publish(AuthEvent(type=event_type, session=session))
        return session

    async def set_new_password(self, new_password: str) -> AuthenticatedUser:
        if self.session is None:
            raise MissingSessionError()
        user = await self._store.update_password(self.session, new_password)
        await self._events.publish(AuthEvent(type=AuthEventType.USER_UPDATED))
        return user
