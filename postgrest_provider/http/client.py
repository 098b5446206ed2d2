# postgrest_provider/http/client.py
from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Optional

import requests
from requests.structures import CaseInsensitiveDict

from postgrest_provider.errors import HttpError
from postgrest_provider.types import RequestOptions, TransportResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = "postgrest-provider/0.1"


def _parse_json_body(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        # PostgREST error pages and empty 204s are not always JSON
        return None


def _prepare_headers(options: RequestOptions, user_agent: str) -> CaseInsensitiveDict:
    headers = CaseInsensitiveDict(options.headers or {})
    headers.setdefault("Accept", "application/json")
    if options.body is not None:
        headers.setdefault("Content-Type", "application/json")
    headers.setdefault("User-Agent", user_agent)
    return headers


def _error_message(resp: requests.Response, body_json: Any) -> str:
    if isinstance(body_json, dict) and body_json.get("message"):
        return str(body_json["message"])
    return resp.reason or f"HTTP {resp.status_code}"


def send_request(
    url: str,
    options: RequestOptions,
    *,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
    session: Optional[requests.Session] = None,
) -> TransportResponse:
    """
    Blocking send. Returns a TransportResponse for 2xx, raises HttpError otherwise.
    Network failures surface as the underlying requests exception.
    """
    method = (options.method or "GET").upper()
    headers = _prepare_headers(options, user_agent)
    data: Optional[bytes] = (
        options.body.encode("utf-8") if options.body is not None else None
    )

    t0 = time.time()
    sender = session.request if session is not None else requests.request
    resp = sender(method, url, headers=dict(headers), data=data, timeout=timeout)
    elapsed_ms = int((time.time() - t0) * 1000)

    text = resp.text or ""
    body_json = _parse_json_body(text)
    logger.debug("%s %s -> %d in %dms", method, url, resp.status_code, elapsed_ms)

    if resp.status_code < 200 or resp.status_code >= 300:
        raise HttpError(
            _error_message(resp, body_json),
            status=resp.status_code,
            body=text,
            json=body_json,
        )

    return TransportResponse(
        status=resp.status_code,
        headers=CaseInsensitiveDict(resp.headers),
        body=text,
        json=body_json,
    )


async def fetch_json(
    url: str,
    options: RequestOptions,
    *,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
    session: Optional[requests.Session] = None,
) -> TransportResponse:
    """Default transport: runs send_request off the event loop."""
    return await asyncio.to_thread(
        send_request,
        url,
        options,
        timeout=timeout,
        user_agent=user_agent,
        session=session,
    )
