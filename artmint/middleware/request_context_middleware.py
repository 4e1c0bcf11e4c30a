import json
import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("request-context")

request_id_context: ContextVar[str] = ContextVar("request_id", default="-")

REQUEST_ID_HEADER = "X-Request-ID"


def _content_length(request: Request) -> int:
    value = request.headers.get("content-length", "")
    return int(value) if value.isdigit() else 0


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id and logs one JSON event when it starts and one when it ends.

    A caller-supplied ``X-Request-ID`` is kept; otherwise a UUID is generated.
    The id is echoed in the response headers and exposed to log records
    through ``request_id_context``. Handlers may set ``request.state.use_case``
    and ``request.state.nft_address`` to enrich the end event.
    """

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_context.set(request_id)

        try:
            logger.info(json.dumps({
                "event": "request.start",
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None,
                "body_size": _content_length(request),
            }, ensure_ascii=False))

            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(f"Unhandled exception during request processing: {e}", exc_info=True)
                raise

            latency_ms = int((time.time() - start_time) * 1000)
            log_event = {
                "event": "request.end",
                "request_id": request_id,
                "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
                "latency_ms": latency_ms,
                "use_case": getattr(request.state, "use_case", "undefined"),
                "nft_address": getattr(request.state, "nft_address", None),
                "action": f"{request.method} {request.url.path}",
                "status_code": response.status_code,
                "actor_ip": request.client.host if request.client else None,
                "actor_agent": request.headers.get("user-agent", "unknown"),
            }
            logger.info(json.dumps(log_event, ensure_ascii=False))

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_context.reset(token)
