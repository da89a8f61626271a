"""
Logging setup and request logging middleware.
"""
import logging
import time

from fastapi import Request

from taskboard.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

request_logger = logging.getLogger("taskboard.requests")


def configure_logging(level: str = None) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )


async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    request_logger.info(
        f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f} ms"
    )
    return response
