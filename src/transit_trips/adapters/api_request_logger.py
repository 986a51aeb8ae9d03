"""Logging of outgoing backend requests, enabled with TT_LOG_REQUESTS=true."""

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

LOG_REQUESTS_ENV = "TT_LOG_REQUESTS"

_SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}
_SENSITIVE_PARAMS = {"key", "apikey", "token", "access_token"}
_MAX_BODY_CHARS = 2000


def should_log_requests() -> bool:
    """Check the TT_LOG_REQUESTS environment variable."""
    return os.getenv(LOG_REQUESTS_ENV, "").lower() == "true"


def _redact(mapping: dict[str, Any], sensitive: set[str]) -> dict[str, Any]:
    return {k: "***REDACTED***" if k.lower() in sensitive else v for k, v in mapping.items()}


def _build_url_with_params(url: str, params: dict[str, Any] | None) -> str:
    if not params:
        return url
    safe = _redact(params, _SENSITIVE_PARAMS)
    param_str = "&".join(f"{k}={v}" for k, v in sorted(safe.items()))
    return f"{url}&{param_str}" if "?" in url else f"{url}?{param_str}"


def log_api_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> None:
    """Log a request about to be sent, if request logging is enabled.

    Args:
        method: HTTP method (GET, POST, etc.).
        url: Request URL without query string.
        params: Query parameters; credentials are redacted.
        headers: Request headers; credentials are redacted.
    """
    if not should_log_requests():
        return

    log_parts = [f"{method} {_build_url_with_params(url, params)}"]
    if headers:
        log_parts.append(f"Headers: {json.dumps(_redact(headers, _SENSITIVE_HEADERS), indent=2)}")

    logger.info("API Request:\n" + "\n".join(log_parts))


def log_api_response(url: str, status: int, body: str | None = None) -> None:
    """Log the status (and a truncated body) of a response, if request logging is enabled."""
    if not should_log_requests():
        return

    message = f"API Response: {status} from {url}"
    if body:
        truncated = body if len(body) <= _MAX_BODY_CHARS else body[:_MAX_BODY_CHARS] + "..."
        message += f"\n{truncated}"
    logger.info(message)
