"""
Session gate middleware.

Runs the request gate before any route handler and attaches the gate's
cookie jar to the response, whichever way the request went. The jar is
applied on the single exit path of dispatch().
"""

import logging
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from modules.auth.codec import CookieJar
from modules.auth.events import AuthEventBus
from modules.auth.gate import RequestGate

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD"})


class SessionGateMiddleware(BaseHTTPMiddleware):
    """
    Refreshes the session and enforces route protection on every request.

    Exposes to route code:
        request.state.session      validated Session or None
        request.state.cookie_jar   jar to write session changes into
        request.state.auth_events  per-request AuthEventBus
    """

    def __init__(self, app: ASGIApp, gate_provider: Optional[Callable[[], RequestGate]] = None):
        super().__init__(app)
        if gate_provider is None:
            from api.dependencies import get_container

            def gate_provider() -> RequestGate:
                return get_container().gate

        self._gate_provider = gate_provider

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        events = AuthEventBus()
        decision = await self._gate_provider().handle(
            request.url.path,
            CookieJar(request.cookies),
            events,
        )

        request.state.session = decision.session
        request.state.cookie_jar = decision.jar
        request.state.auth_events = events

        if decision.is_redirect:
            logger.debug("Redirecting %s to %s", request.url.path, decision.location)
            # 307 keeps the method; form posts must land on the target as a GET
            status_code = 307 if request.method in SAFE_METHODS else 303
            response: Response = RedirectResponse(decision.location, status_code=status_code)
        else:
            response = await call_next(request)

        return decision.jar.apply(response)
