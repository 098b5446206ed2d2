# postgrest_provider/provider.py
"""
Maps generic data-access operations to a PostgREST API.

  GET_LIST           => GET    http://my.api.url/posts?order=title.asc
  GET_ONE            => GET    http://my.api.url/posts?id=eq.123
  GET_MANY           => GET    http://my.api.url/posts?id=in.(123,456,789)
  GET_MANY_REFERENCE => GET    http://my.api.url/comments?order=id.asc&post_id=eq.2
  UPDATE             => PATCH  http://my.api.url/posts?id=eq.123
  CREATE             => POST   http://my.api.url/posts
  DELETE             => DELETE http://my.api.url/posts?id=eq.123
"""
from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from postgrest_provider.config import (
    Settings,
    get_settings,
    token_provider_from_settings,
)
from postgrest_provider.http.auth import TokenProvider
from postgrest_provider.http.client import fetch_json
from postgrest_provider.logging_utils import correlation_scope, setup_logging
from postgrest_provider.request_builder import convert_rest_request_to_http
from postgrest_provider.response_decoder import convert_http_response_to_rest
from postgrest_provider.types import Operation, RequestOptions, TransportResponse
from postgrest_provider.util.url import looks_like_url, normalize_base_url

logger = logging.getLogger(__name__)

HttpClient = Callable[[str, RequestOptions], Awaitable[TransportResponse]]


class PostgrestProvider:
    """
    Stateless dispatcher: build request -> await transport -> decode response.
    Errors from any of the three steps propagate unchanged.
    """

    def __init__(
        self,
        api_url: str,
        http_client: HttpClient = fetch_json,
        token_provider: Optional[TokenProvider] = None,
    ) -> None:
        if not looks_like_url(api_url):
            raise ValueError(f"api_url must be an http(s) URL, got {api_url!r}")
        self.api_url = normalize_base_url(api_url)
        self.http_client = http_client
        self.token_provider = token_provider

    async def __call__(
        self, operation: Any, resource: str, params: Any = None
    ) -> Dict[str, Any]:
        return await self.dispatch(operation, resource, params)

    async def dispatch(
        self, operation: Any, resource: str, params: Any = None
    ) -> Dict[str, Any]:
        params = {} if params is None else params
        with correlation_scope():
            op = Operation.coerce(operation)
            request = convert_rest_request_to_http(
                op,
                resource,
                params,
                api_url=self.api_url,
                token_provider=self.token_provider,
            )
            logger.debug(
                "%s %s %s", op.value, request.options.method or "GET", request.url
            )

            response = await self.http_client(request.url, request.options)

            result = convert_http_response_to_rest(response, op, resource, params)
            if "total" in result:
                logger.debug(
                    "%s %s -> %d rows of %d",
                    op.value,
                    resource,
                    len(result["data"]),
                    result["total"],
                )
            else:
                logger.debug(
                    "%s %s -> status %s",
                    op.value,
                    resource,
                    getattr(response, "status", "-"),
                )
            return result


def postgrest_provider(
    api_url: str,
    http_client: HttpClient = fetch_json,
    token_provider: Optional[TokenProvider] = None,
) -> PostgrestProvider:
    return PostgrestProvider(
        api_url, http_client=http_client, token_provider=token_provider
    )


def provider_from_settings(
    settings: Optional[Settings] = None,
    http_client: Optional[HttpClient] = None,
) -> PostgrestProvider:
    """Build a provider from PGREST_* env / .env settings."""
    settings = settings or get_settings()
    setup_logging(settings.log_level_value, settings.LOG_JSON)
    if http_client is None:
        http_client = functools.partial(
            fetch_json, timeout=settings.TIMEOUT, user_agent=settings.USER_AGENT
        )
    return PostgrestProvider(
        settings.API_URL,
        http_client=http_client,
        token_provider=token_provider_from_settings(settings),
    )
