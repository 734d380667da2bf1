import uuid
from flask import g, request, current_app


def init_request_id(app):
    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())

    @app.after_request
    def _log_and_tag_response(response):
        rid = getattr(g, "request_id", None)
        if rid:
            response.headers["X-Request-Id"] = rid
        current_app.logger.debug(
            "%s %s -> %s request_id=%s",
            request.method, request.path, response.status_code, rid,
        )
        return response
