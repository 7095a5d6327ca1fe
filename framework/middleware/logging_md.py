import uuid
import time
from fastapi import Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

# Probe endpoints hit by load balancers; traced but not logged
QUIET_PATHS = {"/health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """Assigns a trace id per request and logs start/finish with duration."""

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get("X-Trace-ID") or uuid.uuid4().hex
        request.state.trace_id = trace_id
        quiet = request.url.path in QUIET_PATHS

        with logger.contextualize(trace_id=trace_id):
            started = time.perf_counter()
            if not quiet:
                logger.info(
                    f"{request.method} {request.url.path} | "
                    f"Client: {request.client.host if request.client else 'unknown'}"
                )

            try:
                response = await call_next(request)
            except Exception as e:
                elapsed = (time.perf_counter() - started) * 1000
                logger.error(f"{request.method} {request.url.path} failed | {e!r} | {elapsed:.2f}ms")
                raise

            elapsed = (time.perf_counter() - started) * 1000
            if not quiet:
                logger.info(
                    f"{request.method} {request.url.path} -> {response.status_code} | {elapsed:.2f}ms"
                )
            response.headers["X-Trace-ID"] = trace_id
            response.headers["X-Process-Time"] = f"{elapsed:.2f}"
            return response
