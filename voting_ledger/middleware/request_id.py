import time
import uuid
from flask import g, request, current_app

MAX_REQUEST_ID_LENGTH = 64


def init_request_id(app):
    @app.before_request
    def _assign_request_id():
        # Honour an upstream id (proxy / frontend) but never trust its length
        rid = (request.headers.get("X-Request-Id") or "")[:MAX_REQUEST_ID_LENGTH]
        g.request_id = rid or str(uuid.uuid4())
        g.request_started = time.monotonic()

    @app.after_request
    def _log_and_tag_response(response):
        if hasattr(g, "request_id"):
            response.headers["X-Request-Id"] = g.request_id
            elapsed_ms = (time.monotonic() - g.request_started) * 1000
            current_app.logger.info(
                "%s %s -> %s (%.1fms) request_id=%s",
                request.method, request.path, response.status_code, elapsed_ms, g.request_id,
            )
        return response
