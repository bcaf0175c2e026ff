# app/middleware/observability.py
import time, uuid, logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging import set_request_context
from app.core.metrics import REQUESTS, LATENCY

log = logging.getLogger("http")

REQUEST_ID_HEADER = "X-Request-ID"

def _path_template(request: Request) -> str:
    # template da rota (ex: /api/v1/videos/c/{video_id}) p/ não explodir cardinalidade
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path

class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        set_request_context(rid)
        start = time.perf_counter()
        status = 500

        try:
            response: Response = await call_next(request)
            status = response.status_code
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            dur = (time.perf_counter() - start) * 1000.0
            method = request.method
            # a rota só é resolvida depois do call_next
            path_tmpl = _path_template(request)

            REQUESTS.labels(path=path_tmpl, method=method, status=str(status)).inc()
            LATENCY.labels(path=path_tmpl, method=method).observe(dur / 1000.0)

            log.info(
                f"{method} {path_tmpl} -> {status} in {dur:.1f}ms",
                extra={
                    "path": path_tmpl,
                    "method": method,
                    "status": status,
                    "duration_ms": round(dur, 1),
                },
            )
