"""
Session cookie codec.

Moves the Supabase credential pair between a request's cookies and the
response that answers it. Tokens are stored verbatim in HttpOnly cookies,
so page scripts can never read them.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from starlette.responses import Response

from shared.config import Settings, get_settings

from .models import Session

ACCESS_COOKIE = "sb-access-token"
REFRESH_COOKIE = "sb-refresh-token"
EXPIRES_COOKIE = "sb-expires-at"
VERIFIER_COOKIE = "sb-code-verifier"

SESSION_COOKIES = (ACCESS_COOKIE, REFRESH_COOKIE, EXPIRES_COOKIE)


@dataclass(frozen=True)
class CookieWrite:
    """A queued Set-Cookie; value None means delete."""

    name: str
    value: Optional[str]
    max_age: Optional[int] = None


class CookieJar:
    """
    Request cookies plus the writes queued for the response.

    Reads see queued writes, so code running later in the same request
    observes a rotated session rather than the one the browser sent.
    """

    def __init__(self, incoming: Optional[Mapping[str, str]] = None):
        self._incoming = dict(incoming or {})
        self._writes: dict[str, CookieWrite] = {}

    def get(self, name: str) -> Optional[str]:
        if name in self._writes:
            return self._writes[name].value
        return self._incoming.get(name)

    def set(self, name: str, value: str, max_age: Optional[int] = None) -> None:
        self._writes[name] = CookieWrite(name, value, max_age)

    def delete(self, name: str) -> None:
        # Nothing to clear when the browser never had it and nothing was queued
        if name not in self._incoming and name not in self._writes:
            return
        self._writes[name] = CookieWrite(name, None)

    @property
    def pending(self) -> list[CookieWrite]:
        return list(self._writes.values())

    @property
    def modified(self) -> bool:
        return bool(self._writes)

    def apply(self, response: Response, settings: Optional[Settings] = None) -> Response:
        """Write every queued cookie change onto the response."""
        settings = settings or get_settings()
        for write in self._writes.values():
            if write.value is None:
                response.delete_cookie(
                    write.name,
                    path="/",
                    secure=settings.cookie_secure,
                    httponly=True,
                    samesite=settings.cookie_samesite,
                )
            else:
                response.set_cookie(
                    write.name,
                    write.value,
                    max_age=write.max_age,
                    path="/",
                    secure=settings.cookie_secure,
                    httponly=True,
                    samesite=settings.cookie_samesite,
                )
        return response


class SessionCodec:
    """Encodes sessions into a CookieJar and decodes them back out."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    def decode(self, jar: CookieJar) -> Optional[Session]:
        access_token = jar.get(ACCESS_COOKIE)
        refresh_token = jar.get(REFRESH_COOKIE)
        if not access_token or not refresh_token:
            return None

        raw_expiry = jar.get(EXPIRES_COOKIE)
        try:
            expires_at = int(raw_expiry) if raw_expiry else None
        except ValueError:
            expires_at = None

        return Session(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
        )

    def encode(self, session: Session, jar: CookieJar) -> None:
        max_age = self._settings.cookie_max_age
        jar.set(ACCESS_COOKIE, session.access_token, max_age)
        jar.set(REFRESH_COOKIE, session.refresh_token, max_age)
        if session.expires_at is not None:
            jar.set(EXPIRES_COOKIE, str(session.expires_at), max_age)
        else:
            jar.delete(EXPIRES_COOKIE)

    def clear(self, jar: CookieJar) -> None:
        for name in SESSION_COOKIES:
            jar.delete(name)

    # PKCE verifier for email-link flows (sign-up confirmation, recovery)

    def store_verifier(self, verifier: str, jar: CookieJar) -> None:
        jar.set(VERIFIER_COOKIE, verifier, max_age=60 * 60)

    def take_verifier(self, jar: CookieJar) -> Optional[str]:
        verifier = jar.get(VERIFIER_COOKIE)
        jar.delete(VERIFIER_COOKIE)
        return verifier
