"""Gateway middleware: request correlation and body size limits.

``RequestIdMiddleware`` gives every request an identifier, reused from the
incoming ``X-Request-ID`` header when the client (or an upstream proxy)
sent a usable one and generated as a UUID4 otherwise. The id is stored on
the request, in a context variable read by the logging filter, and echoed
back in the ``X-Request-ID`` response header. Each handled request is
logged once with its method, path and status.

``ApiSizeLimitMiddleware`` rejects API requests whose declared body is
larger than ``API_MAX_BYTES`` before any view parses it.
"""

import contextvars
import logging
import os
import re
import uuid

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

REQUEST_ID_CTX = contextvars.ContextVar("request_id", default="-")
MAX_API_BYTES = int(os.getenv("API_MAX_BYTES", str(1 * 1024 * 1024)))
REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

logger = logging.getLogger("gateway")


class RequestIdMiddleware(MiddlewareMixin):
    """Django middleware that sets and returns a per-request identifier.

    Attributes:
        HEADER (str): Incoming header name, in ``request.META`` casing.
        RESPONSE_HEADER (str): Header set on every response.
    """

    HEADER = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-ID"

    def process_request(self, request):
        rid = request.META.get(self.HEADER)
        if not rid or not REQUEST_ID_RE.match(rid):
            rid = str(uuid.uuid4())
        request.request_id = rid
        REQUEST_ID_CTX.set(rid)

    def process_response(self, request, response):
        rid = getattr(request, "request_id", REQUEST_ID_CTX.get())
        response[self.RESPONSE_HEADER] = rid
        logger.info(
            "request handled",
            extra={"path": request.path, "method": request.method, "status": response.status_code},
        )
        return response


class ApiSizeLimitMiddleware(MiddlewareMixin):
    def process_request(self, request):
        if request.path.startswith("/api/"):
            clen = request.META.get("CONTENT_LENGTH")
            if clen and clen.isdigit() and int(clen) > MAX_API_BYTES:
                return JsonResponse({"detail": "PAYLOAD_TOO_LARGE"}, status=413)
