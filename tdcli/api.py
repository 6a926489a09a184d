"""
HTTP request layer and security helpers for tdcli.
"""

import hashlib
import json
import re
import sys
import time
import urllib.error
import urllib.parse
import urllib.request
import uuid

from tdcli import config
from tdcli.exceptions import ConfigError, HTTPError, OperationError, UsageError

_RETRYABLE_HTTP_CODES = frozenset({429, 502, 503, 504})
_SENSITIVE_QUERY_KEYS = frozenset({"apikey", "api_key", "token"})


# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _safe_json_parse(text, context="input"):
    """Parse JSON with friendly error message on failure."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise UsageError(f"Invalid JSON in {context}: {e.msg} at position {e.pos}") from None


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


def _server_message(body):
    """Pull the human message out of a TD error body."""
    if not body:
        return ""
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return _sanitize_error(body)
    if isinstance(parsed, dict):
        for key in ("message", "error", "text"):
            value = parsed.get(key)
            if isinstance(value, str) and value:
                return _sanitize_error(value)
    return _sanitize_error(body)


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


def _sanitize_url_for_log(url):
    """Mask sensitive query params in URLs before logging."""
    parsed = urllib.parse.urlsplit(url)
    if not parsed.query:
        return url
    pairs = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
    masked = []
    for key, value in pairs:
        if key.lower() in _SENSITIVE_QUERY_KEYS:
            masked.append((key, "***"))
        else:
            masked.append((key, value))
    safe_query = urllib.parse.urlencode(masked, doseq=True)
    return urllib.parse.urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path, safe_query, parsed.fragment)
    )


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not config.HTTP_LOG_ENABLED:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _is_sampled_request(request_id):
    """Decide if a request should be logged based on sample rate."""
    rate = config.HTTP_LOG_SAMPLE_RATE
    if rate <= 0:
        return False
    if rate >= 1:
        return True
    if not request_id:
        return False
    digest = hashlib.sha256(request_id.encode("utf-8")).digest()
    bucket = int.from_bytes(digest[:4], "big") / 4294967295.0
    return bucket < rate


def _parse_retry_after(headers):
    """Return Retry-After seconds from response headers, or None."""
    if not headers:
        return None
    value = headers.get("Retry-After")
    if value is None:
        return None
    try:
        secs = int(str(value).strip())
    except ValueError:
        return None
    return max(0, secs)


def _retry_delay(attempt, headers=None):
    """Seconds to wait before the next attempt: Retry-After, else exponential."""
    retry_after = _parse_retry_after(headers)
    if retry_after is not None:
        return retry_after
    return config.HTTP_RETRY_BASE_SECONDS * (2**attempt)


def _decode_json(raw, content_type, request_id=None):
    """Decode a response body. An empty body is an empty object."""
    if not raw.strip():
        return {}
    try:
        return json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        if content_type and "json" not in content_type.lower():
            raise OperationError(
                f"Unexpected Content-Type from server ({content_type}). "
                "This may be a proxy or network issue.",
                request_id=request_id,
            ) from None
        raise OperationError(
            "Unexpected response from Treasure Data API (not valid JSON).",
            request_id=request_id,
        ) from None


def _network_failure(e, timeout):
    """Return (log label, user message) for a timeout or connection error."""
    if isinstance(e, TimeoutError):
        return "timeout", f"Request timed out after {timeout} seconds."
    return f"url_error: {e.reason}", f"Connection failed: {e.reason}"


def _http_request(url, data=None, headers=None, method="GET", idempotent=False, text=False):
    """Make an HTTP request with retries and structured logging.

    Returns parsed JSON on success ({} for an empty body), or the decoded
    body as a string when *text* is set. Raises HTTPError
    for HTTP errors (td_request maps them) and OperationError for network,
    timeout, size and parse failures. Only idempotent requests are retried.
    """
    body = json.dumps(data).encode("utf-8") if data is not None else None
    headers = headers or {}
    request_id = headers.get("X-Request-Id")
    safe_url = _sanitize_url_for_log(url)
    sampled = _is_sampled_request(request_id)
    max_attempts = 1 + max(0, config.HTTP_MAX_RETRIES if idempotent else 0)
    timeout = max(1, config.HTTP_TIMEOUT_SECONDS)

    def log(phase, attempt, **fields):
        if sampled:
            _log_http_event(
                phase=phase,
                method=method,
                url=safe_url,
                attempt=attempt + 1,
                request_id=request_id,
                **fields,
            )

    for attempt in range(max_attempts):
        last_attempt = attempt == max_attempts - 1
        start = time.perf_counter()
        req = urllib.request.Request(url, data=body, headers=headers, method=method)
        log(
            "request",
            attempt,
            max_attempts=max_attempts,
            idempotent=idempotent,
            timeout_seconds=timeout,
        )
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                content_type = resp.headers.get("Content-Type", "")
                raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
                if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
                    raise OperationError(
                        "Response too large from Treasure Data API "
                        f"(>{config.HTTP_MAX_RESPONSE_BYTES} bytes).",
                        request_id=request_id,
                    )
                log(
                    "response",
                    attempt,
                    status=getattr(resp, "status", 200),
                    content_type=content_type,
                    bytes=len(raw),
                    latency_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                if text:
                    return raw.decode("utf-8", errors="replace")
                return _decode_json(raw, content_type, request_id)
        except urllib.error.HTTPError as e:
            error_body = (
                e.read(config.HTTP_MAX_RESPONSE_BYTES).decode("utf-8", errors="replace")
                if e.fp
                else ""
            )
            retryable = e.code in _RETRYABLE_HTTP_CODES
            will_retry = idempotent and retryable and not last_attempt
            log(
                "response",
                attempt,
                status=e.code,
                retryable=retryable,
                will_retry=will_retry,
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            if not will_retry:
                raise HTTPError(e.code, e.reason, error_body, headers=e.headers) from e
            time.sleep(_retry_delay(attempt, getattr(e, "headers", None)))
        except (TimeoutError, urllib.error.URLError) as e:
            label, failure = _network_failure(e, timeout)
            will_retry = idempotent and not last_attempt
            log("network_error", attempt, error=label, will_retry=will_retry)
            if not will_retry:
                raise OperationError(
                    f"{method} {safe_url}: {failure}", request_id=request_id
                ) from e
            time.sleep(_retry_delay(attempt))


# ---------------------------------------------------------------------------
# Treasure Data request helper
# ---------------------------------------------------------------------------


def build_url(service, path, params=None, region=None):
    """Join the regional base URL for *service* with *path* and query params."""
    base = config.endpoints_for(region or config.REGION)[service]
    url = f"{base}/{path.lstrip('/')}"
    if params:
        clean = {k: v for k, v in params.items() if v is not None and v != ""}
        if clean:
            url += "?" + urllib.parse.urlencode(clean, doseq=True)
    return url


def td_request(
    service,
    path,
    data=None,
    method="GET",
    params=None,
    api_key=None,
    region=None,
    text=False,
):
    """Make an authenticated request to one of the TD services.

    service is "api", "cdp" or "workflow". GET requests are retried on
    transient failures; everything else is sent once. With *text* the body
    is returned as a string instead of parsed JSON (job results, logs).
    """
    key = api_key if api_key is not None else config.API_KEY
    if not key:
        raise ConfigError("API key is not set.")
    url = build_url(service, path, params, region)
    headers = {
        "Authorization": f"TD1 {key}",
        "Accept": "*/*" if text else "application/json",
        "User-Agent": f"tdcli/{config.VERSION}",
        "X-Request-Id": str(uuid.uuid4()),
    }
    if data is not None:
        headers["Content-Type"] = "application/json"
    try:
        return _http_request(
            url, data, headers, method, idempotent=method == "GET", text=text
        )
    except HTTPError as e:
        message = _server_message(e.body) or str(e.reason or "")
        raise OperationError(
            f"{method} {_sanitize_url_for_log(url)}: {e.code} {message}".rstrip(),
            status=e.code,
            server_message=message,
            request_id=e.headers.get("X-Request-Id") or headers["X-Request-Id"],
        ) from e
