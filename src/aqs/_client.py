"""Shared AQS HTTP client.

Provides a requests.Session with optional request pacing, a Retry-After aware
retry loop, and the parsing of the AQS ``{"Header": ..., "Data": ...}``
envelope into a ``QueryResult``. Pacing state lives on the session so
independent callers never share mutable state.
"""

from __future__ import annotations

import re
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from threading import Lock
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

import pandas as pd
import requests

from aqs import config
from aqs.endpoints import Endpoint
from aqs.errors import (
    AQSRemoteError,
    MalformedResponseError,
    TransportError,
)
from aqs.logging_config import get_logger, log_api_call, log_error_with_context
from aqs.models import QueryResult, UserCredential

logger = get_logger(__name__)

_FAILED_STATUS = "Failed"
_REDACT_RE = re.compile(r"((?:^|[?&])(?:email|key)=)[^&]*")


class _Pacer:
    """Minimum delay between successive requests made through one session."""

    def __init__(self, min_delay: float) -> None:
        self.min_delay = min_delay
        self._last = 0.0
        self._lock = Lock()

    def wait(self) -> None:
        if self.min_delay <= 0:
            return
        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last
            if self._last and elapsed < self.min_delay:
                time.sleep(self.min_delay - elapsed)
            self._last = time.monotonic()


def make_session(timeout: int | None = None, min_delay: float | None = None) -> requests.Session:
    """Create a requests.Session whose requests are paced per AQS guidance.

    Retries are handled by ``fetch_json`` rather than a urllib3 adapter so that
    Retry-After headers can be honored.
    """
    session = requests.Session()
    session.headers.update({"User-Agent": config.USER_AGENT})
    pacer = _Pacer(config.AQS_MIN_DELAY if min_delay is None else min_delay)
    session.request = _wrap_request_with_rate(session.request, pacer)
    session.timeout = timeout if timeout is not None else config.AQS_TIMEOUT
    return session


def _wrap_request_with_rate(func, pacer: _Pacer):
    def wrapped(method, url, *args, **kwargs):
        pacer.wait()
        return func(method, url, *args, **kwargs)

    return wrapped


def redact(url: str) -> str:
    """Mask the email and key query parameters of an AQS url."""
    return _REDACT_RE.sub(r"\1***", url)


def build_url(
    service: str,
    endpoint: Union[Endpoint, str],
    user: UserCredential,
    variables: Mapping[str, Any],
    base_url: str | None = None,
) -> str:
    """Compose the GET url: credentials first, then the query fields."""
    root = (base_url or config.AQS_BASE_URL).rstrip("/")
    params = {**user.as_params(), **variables}
    return f"{root}/{service}/{Endpoint.coerce(endpoint).value}?{urlencode(params)}"


def _parse_retry_after(resp) -> int | None:
    header = resp.headers.get("Retry-After") if resp is not None else None
    if not header:
        return None
    try:
        return int(header)
    except ValueError:
        try:
            t = parsedate_to_datetime(header)
        except (TypeError, ValueError):
            return None
        return max(0, int((t - datetime.now(timezone.utc)).total_seconds()))


def _sleep_backoff(attempt: int, retry_after: int | None = None) -> None:
    if retry_after is not None:
        wait = min(retry_after, config.AQS_RETRY_MAX_WAIT)
    else:
        # exponential backoff with jitter
        base = config.AQS_BACKOFF_FACTOR * (2**attempt)
        jitter = base * 0.1
        wait = min(config.AQS_RETRY_MAX_WAIT, base + (jitter * (2 * (time.time() % 1) - 1)))
        wait = max(wait, 0)
    time.sleep(wait)


def fetch_json(
    session: requests.Session,
    url: str,
    retries: int | None = None,
    timeout: int | None = None,
) -> Any:
    """GET ``url`` and decode its JSON body.

    429, 5xx, timeouts and connection errors are retried with backoff; other
    4xx responses fail at once. Raises ``TransportError`` when the exchange
    cannot be completed and ``MalformedResponseError`` when the body never
    decodes as JSON.
    """
    retries = config.AQS_RETRIES if retries is None else retries
    safe_url = redact(url)
    if timeout is None:
        timeout = getattr(session, "timeout", config.AQS_TIMEOUT)
    last_error: Optional[Exception] = None
    last_status: Optional[int] = None

    for attempt in range(retries + 1):
        retry_after = None
        log_api_call(safe_url, attempt=attempt)
        try:
            resp = session.get(url, timeout=timeout)
            if resp.status_code == 429:
                retry_after = _parse_retry_after(resp)
                last_status = 429
                last_error = requests.exceptions.RetryError("429 Too Many Requests")
                logger.warning(
                    f"Rate limited (429), retry {attempt + 1}/{retries} after {retry_after or 'default'}s"
                )
            else:
                resp.raise_for_status()
                try:
                    return resp.json()
                except ValueError as exc:
                    # A truncated body is usually transient
                    last_error = exc
                    if attempt >= retries:
                        raise MalformedResponseError(f"AQS returned a body that is not JSON: {safe_url}") from exc
                    logger.warning(f"Invalid JSON response, retry {attempt + 1}/{retries}")
        except requests.exceptions.RequestException as exc:
            last_error = exc
            response = getattr(exc, "response", None)
            status = getattr(response, "status_code", None)
            last_status = status
            if status is not None and 400 <= status < 500 and status != 429:
                raise TransportError(
                    f"AQS rejected the request with HTTP {status}", status_code=status, url=safe_url
                ) from exc
            retry_after = _parse_retry_after(response)
            logger.warning(f"Request failed ({status or type(exc).__name__}), retry {attempt + 1}/{retries}")
        if attempt < retries:
            _sleep_backoff(attempt, retry_after=retry_after)

    raise TransportError(
        f"All {retries + 1} attempts failed for {safe_url}: {last_error}",
        status_code=last_status,
        url=safe_url,
    ) from last_error


def _header_section(payload: Mapping[str, Any]) -> Dict[str, Any]:
    header = payload.get("Header")
    if isinstance(header, list) and header and isinstance(header[0], dict):
        return dict(header[0])
    if isinstance(header, dict):
        return dict(header)
    raise MalformedResponseError("AQS response has no Header section")


def parse_response(payload: Any, url: str | None = None) -> QueryResult:
    """Turn a decoded AQS body into a ``QueryResult``.

    A header status of ``Failed`` raises ``AQSRemoteError``; "no data matched"
    comes back as an empty result.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Expected a JSON object from AQS, got {type(payload).__name__}")
    header = _header_section(payload)
    if "url" in header and isinstance(header["url"], str):
        header["url"] = redact(header["url"])

    status = header.get("status")
    if status == _FAILED_STATUS:
        messages = header.get("error") or []
        if isinstance(messages, str):
            messages = [messages]
        raise AQSRemoteError(status, messages, url=redact(url) if url else header.get("url"))

    data = payload.get("Data")
    if not isinstance(data, list):
        raise MalformedResponseError("AQS response has no Data list")
    return QueryResult(data=pd.DataFrame(data), header=header)


def aqs_get(
    service: str,
    endpoint: Union[Endpoint, str],
    user: UserCredential,
    variables: Mapping[str, Any],
    *,
    session: requests.Session | None = None,
    timeout: int | None = None,
    retries: int | None = None,
    base_url: str | None = None,
) -> QueryResult:
    """Perform one AQS request and return its parsed result.

    A caller-supplied ``session`` is reused and left open; otherwise a session
    is created for this call and closed afterwards.
    """
    url = build_url(service, endpoint, user, variables, base_url=base_url)
    own_session = session is None
    sess = make_session(timeout=timeout) if own_session else session
    try:
        payload = fetch_json(sess, url, retries=retries, timeout=timeout)
        result = parse_response(payload, url=url)
    except (TransportError, MalformedResponseError, AQSRemoteError) as exc:
        log_error_with_context(exc, f"{service}/{endpoint}", url=redact(url))
        raise
    finally:
        if own_session:
            sess.close()
    logger.info(f"{service}/{endpoint}: {result.rows} rows, status={result.status!r}")
    return result
