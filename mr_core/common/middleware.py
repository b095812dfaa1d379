# mr_core/common/middleware.py
from __future__ import annotations

from django.utils.deprecation import MiddlewareMixin

from mr_core.common.api.exceptions import ensure_request_id

REQUEST_ID_HEADER = "X-Request-Id"


def client_ip_from_meta(meta) -> str | None:
    """
    First hop of X-Forwarded-For when behind a proxy, else REMOTE_ADDR.
    """
    forwarded = meta.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return meta.get("REMOTE_ADDR") or None


class RequestContextMiddleware(MiddlewareMixin):
    """
    Attaches request.request_id, request.client_ip and request.user_agent.

    request_id is reused from an inbound X-Request-Id header when present so
    upstream proxies can correlate, and is echoed on every response.
    """

    def process_request(self, request):
        inbound = (request.META.get("HTTP_X_REQUEST_ID") or "").strip()
        if inbound:
            request.request_id = inbound[:64]
        ensure_request_id(request)

        request.client_ip = client_ip_from_meta(request.META)
        request.user_agent = request.META.get("HTTP_USER_AGENT", "")
        return None

    def process_response(self, request, response):
        response[REQUEST_ID_HEADER] = ensure_request_id(request)
        return response
