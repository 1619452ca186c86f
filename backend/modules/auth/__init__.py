"""
Authentication module.

Keeps the Supabase session in HttpOnly cookies, refreshes it on every
request and gates protected routes.

Public API:
- ICredentialStore: Interface for the external auth provider
- SessionCodec / CookieJar: Session <-> cookie mapping
- SessionRefresher, RouteClassifier, RequestGate: the per-request gate
- SessionState, AuthEventBus: request-scoped session context
- Auth exceptions: MissingSessionError, InvalidCredentialsError, etc.
"""

from .interfaces import ICredentialStore
from .models import (
    AuthEvent,
    AuthEventType,
    AuthResult,
    JWTPayload,
    Session,
    TokenCheck,
    TokenStatus,
)
from .codec import CookieJar, SessionCodec
from .events import AuthEventBus
from .refresher import SessionRefresher
from .routing import RouteCategory, RouteClassifier, RoutePolicy
from .gate import GateAction, GateDecision, RequestGate
from .state import SessionState
from .exceptions import (
    AuthRequestRejectedError,
    CredentialRejectedError,
    CredentialStoreUnavailableError,
    InvalidCredentialsError,
    MissingSessionError,
)

__all__ = [
    # Interface
    "ICredentialStore",
    # Models
    "AuthEvent",
    "AuthEventType",
    "AuthResult",
    "JWTPayload",
    "Session",
    "TokenCheck",
    "TokenStatus",
    # Gate
    "CookieJar",
    "SessionCodec",
    "SessionRefresher",
    "RouteCategory",
    "RouteClassifier",
    "RoutePolicy",
    "GateAction",
    "GateDecision",
    "RequestGate",
    # Session context
    "AuthEventBus",
    "SessionState",
    # Exceptions
    "AuthRequestRejectedError",
    "CredentialRejectedError",
    "CredentialStoreUnavailableError",
    "InvalidCredentialsError",
    "MissingSessionError",
]
