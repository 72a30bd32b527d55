"""
CORS middleware whose successful preflight answer has an empty body,
matching the OPTIONS route on the chat endpoint.
"""

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """Starlette CORS handling; an accepted preflight returns 200 with no body."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response

        headers = dict(response.headers)
        headers.pop("content-length", None)
        headers.pop("content-type", None)
        return Response(status_code=200, headers=headers)
