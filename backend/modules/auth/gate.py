"""
Request gate.

Runs once per incoming request, before any route logic: refreshes the
session, classifies the path, and decides whether the request proceeds or
is redirected. The decision carries the cookie jar, which must be applied
to whatever response is finally sent.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .codec import CookieJar
from .events import AuthEventBus
from .models import Session
from .refresher import SessionRefresher
from .routing import RouteCategory, RouteClassifier


class GateAction(str, Enum):
    CONTINUE = "continue"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GateDecision:
    action: GateAction
    jar: CookieJar
    session: Optional[Session] = None
    category: RouteCategory = RouteCategory.PUBLIC
    location: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.action == GateAction.REDIRECT


class RequestGate:
    """Combines the session refresher with route classification."""

    def __init__(
        self,
        refresher: SessionRefresher,
        classifier: RouteClassifier,
        login_path: str = "/login",
        home_path: str = "/",
    ):
        self._refresher = refresher
        self._classifier = classifier
        self.login_path = login_path
        self.home_path = home_path

    async def handle(
        self,
        path: str,
        jar: CookieJar,
        events: Optional[AuthEventBus] = None,
    ) -> GateDecision:
        # Validation comes first; nothing may inspect the session before it
        session, jar = await self._refresher.refresh(jar, events)
        category = self._classifier.classify(path)

        if category == RouteCategory.PROTECTED and session is None:
            return GateDecision(
                action=GateAction.REDIRECT,
                jar=jar,
                category=category,
                location=self.login_path,
            )

        if category == RouteCategory.AUTH_ENTRY and session is not None:
            return GateDecision(
                action=GateAction.REDIRECT,
                jar=jar,
                session=session,
                category=category,
                location=self.home_path,
            )

        return GateDecision(
            action=GateAction.CONTINUE,
            jar=jar,
            session=session,
            category=category,
        )
