import time
import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

REQUEST_ID_HEADER = "X-Request-ID"

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger(__name__)


class CorrelationIdMiddleware:
    """Binds a correlation ID to every log line emitted while serving a request.

    The ID comes from the ``X-Request-ID`` header or is generated (UUID4).
    Status history updates triggered by the request (and the notifications
    they fan out) are logged under the same ID, which is echoed back in
    the response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        start = time.monotonic()
        logger.info(
            "request.started",
            method=request.method,
            path=request.get_full_path(),
        )

        response = self.get_response(request)

        logger.info(
            "request.finished",
            method=request.method,
            path=request.get_full_path(),
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )

        response[REQUEST_ID_HEADER] = cid
        return response
