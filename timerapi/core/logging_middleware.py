import logging
import time
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from timerapi.config import settings

logger = logging.getLogger("timerapi")

# Health probes are frequent and carry no tenant context
QUIET_PATHS = {"/health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        shop = request.headers.get(settings.SHOP_HEADER_NAME) or request.query_params.get("shop") or "-"
        quiet = path in QUIET_PATHS

        if not quiet:
            logger.info(f"[Request] {method} {path} shop={shop}")
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"[Unhandled Error] {method} {path} shop={shop}")
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Process-Time-Ms"] = f"{duration_ms:.1f}"

        line = f"[Response] {method} {path} shop={shop} -> {response.status_code} in {duration_ms:.1f}ms"
        if response.status_code >= 500:
            logger.error(line)
        elif response.status_code >= 400:
            logger.warning(line)
        elif not quiet:
            logger.info(line)
        return response
