"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together the auth gate
and the feature services. Process-wide pieces (credential store, codec,
route classifier, gate) live in the container; everything tied to one
user (session state, user-scoped repositories) is built per request from
the session the gate validated.
"""

from typing import TYPE_CHECKING, AsyncIterator, Callable, Optional

from fastapi import Depends, Request
from supabase import Client

from shared.config import get_settings
from shared.database import get_supabase_user_client
from shared.models import AuthenticatedUser
from modules.auth.codec import CookieJar, SessionCodec
from modules.auth.events import AuthEventBus
from modules.auth.exceptions import MissingSessionError
from modules.auth.models import Session
from modules.auth.refresher import SessionRefresher
from modules.auth.routing import RouteClassifier, RoutePolicy
from modules.auth.gate import RequestGate
from modules.auth.state import SessionState
from modules.expenses.repository import ExpenseRepository
from modules.expenses.service import ExpenseService
from modules.profiles.models import Profile
from modules.profiles.repository import ProfileRepository

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import ICredentialStore
    from modules.expenses.interfaces import IExpenseService

UserClientFactory = Callable[[str], Client]


class ServiceContainer:
    """
    Container for process-wide service instances.

    Services are created lazily on first access and cached. Replacing the
    credential store drops everything built on top of it.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._credential_store: "ICredentialStore | None" = None
        self._codec: SessionCodec | None = None
        self._route_classifier: RouteClassifier | None = None
        self._refresher: SessionRefresher | None = None
        self._gate: RequestGate | None = None

    @property
    def credential_store(self) -> "ICredentialStore":
        """Get the credential store instance."""
        if self._credential_store is None:
            from modules.auth.service import SupabaseCredentialStore
            self._credential_store = SupabaseCredentialStore()
        return self._credential_store

    @credential_store.setter
    def credential_store(self, store: "ICredentialStore") -> None:
        self._credential_store = store
        self._refresher = None
        self._gate = None

    @property
    def codec(self) -> SessionCodec:
        if self._codec is None:
            self._codec = SessionCodec()
        return self._codec

    @property
    def route_classifier(self) -> RouteClassifier:
        """Route policy is read from settings once, on first use."""
        if self._route_classifier is None:
            self._route_classifier = RouteClassifier(RoutePolicy.from_settings())
        return self._route_classifier

    @property
    def refresher(self) -> SessionRefresher:
        if self._refresher is None:
            self._refresher = SessionRefresher(self.credential_store, self.codec)
        return self._refresher

    @property
    def gate(self) -> RequestGate:
        """Get the request gate instance."""
        if self._gate is None:
            settings = get_settings()
            self._gate = RequestGate(
                self.refresher,
                self.route_classifier,
                login_path=settings.login_path,
                home_path=settings.home_path,
            )
        return self._gate

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different fake dependencies.
        """
        self._credential_store = None
        self._codec = None
        self._route_classifier = None
        self._refresher = None
        self._gate = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_credential_store() -> "ICredentialStore":
    """FastAPI dependency for the credential store."""
    return get_container().credential_store


def get_session_codec() -> SessionCodec:
    """FastAPI dependency for the session codec."""
    return get_container().codec


def get_user_client_factory() -> UserClientFactory:
    """FastAPI dependency returning the user-scoped client factory."""
    return get_supabase_user_client


def get_cookie_jar(request: Request) -> CookieJar:
    """The jar the session middleware attached to this request."""
    return request.state.cookie_jar


def get_event_bus(request: Request) -> AuthEventBus:
    """The auth event bus scoped to this request."""
    return request.state.auth_events


async def get_session_state(
    request: Request,
    store: "ICredentialStore" = Depends(get_credential_store),
    codec: SessionCodec = Depends(get_session_codec),
    client_factory: UserClientFactory = Depends(get_user_client_factory),
) -> AsyncIterator[SessionState]:
    """
    Request-scoped SessionState, started from the gate's session and
    closed when the request finishes.
    """

    async def load_profile(session: Session) -> Optional[Profile]:
        if session.user is None:
            return None
        repository = ProfileRepository(client_factory(session.access_token))
        return repository.get(session.user.id)

    state = SessionState(
        store,
        codec,
        get_cookie_jar(request),
        get_event_bus(request),
        profile_loader=load_profile,
    )
    await state.start(getattr(request.state, "session", None))
    try:
        yield state
    finally:
        state.close()


async def require_session(
    state: SessionState = Depends(get_session_state),
) -> SessionState:
    """Session state that is guaranteed to hold a validated user."""
    if state.session is None or state.user is None:
        raise MissingSessionError()
    return state


async def get_current_user(
    state: SessionState = Depends(require_session),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    return state.user


def get_expense_service(
    state: SessionState = Depends(require_session),
    client_factory: UserClientFactory = Depends(get_user_client_factory),
) -> "IExpenseService":
    """FastAPI dependency for the expense service, scoped to the user."""
    return ExpenseService(ExpenseRepository(client_factory(state.session.access_token)))


def get_profile_repository(
    state: SessionState = Depends(require_session),
    client_factory: UserClientFactory = Depends(get_user_client_factory),
) -> ProfileRepository:
    """FastAPI dependency for the profile repository, scoped to the user."""
    return ProfileRepository(client_factory(state.session.access_token))
