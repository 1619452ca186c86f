"""
Route classification for the request gate.

Protection is an allowlist: a page is protected only when its path is
registered in RoutePolicy.protected_paths. With the default policy a newly
added page is reachable without signing in until it is registered here.
Set unlisted_default to PROTECTED (UNLISTED_PATHS_PROTECTED=true) to flip
that.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from shared.config import Settings, get_settings


class RouteCategory(str, Enum):
    PROTECTED = "protected"
    AUTH_ENTRY = "auth_entry"  # login/signup: signed-in users are sent home
    PUBLIC = "public"


def _normalize(path: str) -> str:
    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def _matches(path: str, pattern: str) -> bool:
    """Exact match, or path lies under pattern; "/" only matches itself."""
    if pattern == "/":
        return path == "/"
    return path == pattern or path.startswith(pattern + "/")


@dataclass(frozen=True)
class RoutePolicy:
    """Static route configuration, loaded once at startup."""

    protected_paths: tuple[str, ...] = ("/", "/expenses", "/settings")
    auth_entry_paths: tuple[str, ...] = ("/login", "/signup")
    # Consulted only when unlisted paths default to PROTECTED
    public_paths: tuple[str, ...] = ("/auth", "/forgot-password", "/reset-password", "/api")
    unlisted_default: RouteCategory = RouteCategory.PUBLIC

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RoutePolicy":
        settings = settings or get_settings()
        return cls(
            protected_paths=tuple(_normalize(p) for p in settings.protected_paths),
            auth_entry_paths=tuple(_normalize(p) for p in settings.auth_entry_paths),
            public_paths=tuple(_normalize(p) for p in settings.public_paths),
            unlisted_default=(
                RouteCategory.PROTECTED
                if settings.unlisted_paths_protected
                else RouteCategory.PUBLIC
            ),
        )


@dataclass
class RouteClassifier:
    """Maps request paths onto a RouteCategory."""

    policy: RoutePolicy = field(default_factory=RoutePolicy)

    def classify(self, path: str) -> RouteCategory:
        path = _normalize(path)
        if self._any(path, self.policy.auth_entry_paths):
            return RouteCategory.AUTH_ENTRY
        if self._any(path, self.policy.protected_paths):
            return RouteCategory.PROTECTED
        if self._any(path, self.policy.public_paths):
            return RouteCategory.PUBLIC
        return self.policy.unlisted_default

    @staticmethod
    def _any(path: str, patterns: Iterable[str]) -> bool:
        return any(_matches(path, pattern) for pattern in patterns)
