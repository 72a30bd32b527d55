"""
FastAPI middleware for logging API requests and responses.

Uses pure ASGI middleware (not BaseHTTPMiddleware) so the response body can
be inspected without buffering the whole app.

For every HTTP request this middleware writes one NDJSON line to the
request logger: timestamp, ip, method, path, status and error (taken from
the JSON error body, or from the exception when the app raised).
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import REQUEST_LOGGER_NAME, filter_sensitive_data, truncate_large_data
from ..utils.client import client_ip

logger = logging.getLogger(__name__)
request_logger = logging.getLogger(REQUEST_LOGGER_NAME)


def _sanitize_text_or_json(text: str) -> str:
    """Filter sensitive data if payload is JSON, fallback to plain text."""
    try:
        payload = json.loads(text)
        filtered_payload = filter_sensitive_data(payload)
        return truncate_large_data(json.dumps(filtered_payload, ensure_ascii=False), max_length=5000)
    except json.JSONDecodeError:
        return truncate_large_data(text, max_length=5000)


def _extract_error_reason(response_text: str) -> Optional[str]:
    """Extract a concise error reason from response body."""
    try:
        payload = json.loads(response_text)
        if isinstance(payload, dict):
            for key in ("error", "detail", "message"):
                value = payload.get(key)
                if value:
                    return str(value)
    except json.JSONDecodeError:
        if response_text:
            return truncate_large_data(response_text, max_length=500)
    return None


class RequestLoggingMiddleware:
    """Pure ASGI middleware to log all API requests and responses."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[list] = None):
        """
        Initialize the logging middleware.

        Args:
            app: The ASGI application
            exclude_paths: List of paths to skip entirely (e.g., ["/health"])
        """
        self.app = app
        self.exclude_paths = exclude_paths or []

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI entry point."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        if path in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        timestamp = datetime.now(timezone.utc).isoformat()
        method = scope.get("method", "UNKNOWN")
        headers = {
            k.decode("latin-1").lower(): v.decode("latin-1")
            for k, v in scope.get("headers", [])
        }
        ip = client_ip(headers, scope.get("client"))

        status_code = 0
        response_chunks = []

        async def logging_send(message: Message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
            elif message["type"] == "http.response.body" and status_code >= 400:
                response_chunks.append(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, receive, logging_send)
        except Exception as e:
            self._emit(timestamp, ip, method, path, 500, str(e) or e.__class__.__name__)
            raise

        error = None
        if status_code >= 400 and response_chunks:
            body = b"".join(response_chunks).decode("utf-8", errors="ignore")
            error = _extract_error_reason(body)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"Error response body: {_sanitize_text_or_json(body)}")

        self._emit(timestamp, ip, method, path, status_code, error)

    @staticmethod
    def _emit(timestamp: str, ip: str, method: str, path: str,
              status: int, error: Optional[str]) -> None:
        if status < 400:
            log_level = logging.INFO
        elif status < 500:
            log_level = logging.WARNING
        else:
            log_level = logging.ERROR

        request_logger.log(
            log_level,
            f"{method} {path} - {status}",
            extra={"extra_fields": {
                "timestamp": timestamp,
                "ip": ip,
                "method": method,
                "path": path,
                "status": status,
                "error": error,
            }}
        )
