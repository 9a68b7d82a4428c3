"""Request metrics for the venue API, labelled by the route that served them."""
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.metrics import (
    FORM_UPLOAD_SIZE_BYTES,
    HTTP_REQUESTS_IN_PROGRESS,
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION_SECONDS,
)

UNMATCHED_ENDPOINT = "unmatched"


def route_template(request: Request) -> str:
    """Path template of the route that handled the request.

    Form session ids and image positions stay out of the label:
    /v1/forms/3f2a.../images/4/move is reported as
    /v1/forms/{session_id}/images/{index}/move. Requests that matched no
    route share one label.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ENDPOINT


def is_multipart_upload(request: Request) -> bool:
    return request.headers.get("content-type", "").startswith("multipart/form-data")


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Counts and times every API request; sizes image and brochure uploads."""

    EXCLUDE_PATHS = {"/metrics", "/health", "/ping"}

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in self.EXCLUDE_PATHS:
            return await call_next(request)

        method = request.method
        status_code = 500

        HTTP_REQUESTS_IN_PROGRESS.labels(method=method).inc()
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            # Routing has run by now, so the scope names the matched route
            endpoint = route_template(request)
            HTTP_REQUESTS_IN_PROGRESS.labels(method=method).dec()
            HTTP_REQUEST_DURATION_SECONDS.labels(method=method, endpoint=endpoint).observe(
                time.perf_counter() - start_time
            )
            HTTP_REQUESTS_TOTAL.labels(
                method=method, endpoint=endpoint, status_code=str(status_code)
            ).inc()
            if is_multipart_upload(request):
                self._observe_upload_size(request, endpoint)

    def _observe_upload_size(self, request: Request, endpoint: str):
        content_length = request.headers.get("content-length", "")
        if content_length.isdigit():
            FORM_UPLOAD_SIZE_BYTES.labels(endpoint=endpoint).observe(int(content_length))
