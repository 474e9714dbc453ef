import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp
from solar_monitor.utils.logger import get_logger

logger = get_logger("api")

# Chart.js assets and stylesheets are requested on every page view
QUIET_PREFIXES = ("/static/",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, quiet_prefixes: tuple = QUIET_PREFIXES):
        super().__init__(app)
        self.quiet_prefixes = quiet_prefixes

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        path = request.url.path
        log = logger.debug if path.startswith(self.quiet_prefixes) else logger.info
        client_host = request.client.host if request.client else "unknown"
        log(f"{request.method} {path} started | Client: {client_host} | ID: {request_id}")

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(
                f"{request.method} {path} failed | Error: {str(e)} | "
                f"Duration: {duration:.4f}s | ID: {request_id}",
                exc_info=True
            )
            raise

        duration = time.perf_counter() - start_time
        # For the SSE stream this only covers opening it, not its lifetime
        log(
            f"{request.method} {path} -> {response.status_code} | "
            f"Duration: {duration:.4f}s | ID: {request_id}"
        )
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{duration:.4f}"
        return response
