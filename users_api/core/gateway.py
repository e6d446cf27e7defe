"""Reject traffic that did not come through the API gateway (X-Gateway-Secret check)."""

import hmac
import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

GATEWAY_SECRET_HEADER = "X-Gateway-Secret"
# Health checkers and scrapers hit these directly, not through the gateway.
BYPASS_PATH_PREFIXES = ("/health", "/metrics")
BYPASS_ENVIRONMENTS = frozenset({"test"})

MISSING_SECRET_MESSAGE = "Direct access to microservice is not allowed. Please use the Gateway."
INVALID_SECRET_MESSAGE = "Invalid Gateway secret. Please use the Gateway."


def _is_bypass_path(path: str) -> bool:
    path = path.lower()
    return any(path == prefix or path.startswith(prefix + "/") for prefix in BYPASS_PATH_PREFIXES)


def _forbidden(message: str) -> JSONResponse:
    return JSONResponse(status_code=403, content={"error": "Forbidden", "message": message})


class GatewaySecretMiddleware(BaseHTTPMiddleware):
    """
    Gate every request on the shared gateway secret.

    Health/metrics paths and the test environment pass straight through. With no
    secret configured the check is disabled; that is logged once here, at startup.
    """

    def __init__(self, app: ASGIApp, secret: str | None, environment: str) -> None:
        super().__init__(app)
        self._secret = secret or None
        self._environment = environment
        if self._secret is None:
            logger.warning(
                "GATEWAY_SECRET not configured. Gateway secret validation is disabled."
            )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if _is_bypass_path(path):
            logger.debug("Gateway secret check skipped for %s", path)
            return await call_next(request)
        if self._environment in BYPASS_ENVIRONMENTS:
            return await call_next(request)
        if self._secret is None:
            return await call_next(request)

        presented = request.headers.get(GATEWAY_SECRET_HEADER)
        if presented is None:
            logger.warning(
                "Request rejected: missing %s header",
                GATEWAY_SECRET_HEADER,
                extra={"path": path},
            )
            return _forbidden(MISSING_SECRET_MESSAGE)
        if not hmac.compare_digest(presented.encode("utf-8"), self._secret.encode("utf-8")):
            logger.warning(
                "Request rejected: invalid %s header",
                GATEWAY_SECRET_HEADER,
                extra={"path": path},
            )
            return _forbidden(INVALID_SECRET_MESSAGE)
        return await call_next(request)
