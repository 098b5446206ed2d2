# tests/test_provider.py
import asyncio
import logging
from unittest.mock import AsyncMock

import pytest
from requests.structures import CaseInsensitiveDict

from postgrest_provider.config import Settings
from postgrest_provider.errors import (
    HttpError,
    MissingRangeHeader,
    UnsupportedOperation,
)
from postgrest_provider.http.auth import StaticTokenProvider
from postgrest_provider.provider import (
    PostgrestProvider,
    postgrest_provider,
    provider_from_settings,
)
from postgrest_provider.types import Operation, RequestOptions, TransportResponse


def run(coro):
    return asyncio.run(coro)


def transport_returning(json=None, headers=None, status=200):
    return AsyncMock(
        return_value=TransportResponse(
            status=status, headers=CaseInsensitiveDict(headers or {}), json=json
        )
    )


def test_list_end_to_end():
    http = transport_returning(
        json=[{"id": 11}, {"id": 12}], headers={"Content-Range": "10-11/12"}
    )
    provider = postgrest_provider("http://api.test/", http_client=http)
    out = run(
        provider(
            Operation.GET_LIST,
            "posts",
            {
                "pagination": {"page": 2, "perPage": 10},
                "sort": {"field": "id", "order": "ASC"},
                "filter": {"title": "foo"},
            },
        )
    )
    assert out == {"data": [{"id": 11}, {"id": 12}], "total": 12}

    http.assert_awaited_once()
    url, options = http.await_args.args
    assert url == "http://api.test/posts?order=id.asc&title=ilike.%2Afoo%2A"
    assert isinstance(options, RequestOptions)
    assert options.headers["Range"] == "10-19"


def test_create_end_to_end_merges_id_only():
    http = transport_returning(json={"id": 42, "name": "y", "extra": "z"}, status=201)
    provider = PostgrestProvider("http://api.test", http_client=http)
    out = run(provider.dispatch("CREATE", "posts", {"data": {"name": "x"}}))
    assert out == {"data": {"name": "x", "id": 42}}
    _, options = http.await_args.args
    assert options.method == "POST"


def test_delete_end_to_end():
    http = transport_returning(json={"id": 1})
    provider = PostgrestProvider("http://api.test", http_client=http)
    assert run(provider(Operation.DELETE, "posts", {"id": 1})) == {"data": {}}


def test_unsupported_operation_never_calls_transport():
    http = AsyncMock()
    provider = PostgrestProvider("http://api.test", http_client=http)
    with pytest.raises(UnsupportedOperation):
        run(provider("PURGE", "posts", {}))
    http.assert_not_called()


def test_missing_range_header_propagates():
    http = transport_returning(json=[])
    provider = PostgrestProvider("http://api.test", http_client=http)
    with pytest.raises(MissingRangeHeader):
        run(
            provider(
                Operation.GET_MANY_REFERENCE,
                "comments",
                {"target": "post_id", "id": 1, "sort": {"field": "id", "order": "ASC"}},
            )
        )


def test_transport_errors_pass_through_unchanged():
    err = HttpError("JWT expired", status=401)
    http = AsyncMock(side_effect=err)
    provider = PostgrestProvider("http://api.test", http_client=http)
    with pytest.raises(HttpError) as exc:
        run(provider(Operation.GET_ONE, "posts", {"id": 1}))
    assert exc.value is err
    assert http.await_count == 1


def test_token_provider_is_consulted_per_call():
    tokens = iter(["short", "a-much-longer-bearer-token"])

    class Rotating:
        def get(self):
            return next(tokens)

    http = transport_returning(json={"id": 1})
    provider = PostgrestProvider(
        "http://api.test", http_client=http, token_provider=Rotating()
    )
    run(provider(Operation.GET_ONE, "posts", {"id": 1}))
    assert "Authorization" not in http.await_args.args[1].headers
    run(provider(Operation.GET_ONE, "posts", {"id": 1}))
    assert (
        http.await_args.args[1].headers["Authorization"]
        == "Bearer a-much-longer-bearer-token"
    )


def test_concurrent_dispatches_are_independent():
    async def echo_transport(url, options):
        await asyncio.sleep(0)
        return TransportResponse(
            status=200, headers=CaseInsensitiveDict(), json={"url": url}
        )

    provider = PostgrestProvider("http://api.test", http_client=echo_transport)

    async def many():
        return await asyncio.gather(
            *(provider(Operation.GET_ONE, "posts", {"id": i}) for i in range(5))
        )

    results = run(many())
    assert [r["data"]["url"] for r in results] == [
        f"http://api.test/posts?id=eq.{i}" for i in range(5)
    ]


def test_rejects_non_http_api_url():
    with pytest.raises(ValueError):
        PostgrestProvider("api.test", http_client=AsyncMock())


def test_debug_logging_never_includes_token(caplog):
    token = "super-secret-token-value"
    http = transport_returning(json={"id": 1})
    provider = PostgrestProvider(
        "http://api.test", http_client=http, token_provider=StaticTokenProvider(token)
    )
    with caplog.at_level(logging.DEBUG, logger="postgrest_provider"):
        run(provider(Operation.GET_ONE, "posts", {"id": 1}))
    assert "GET_ONE GET http://api.test/posts?id=eq.1" in caplog.text
    assert token not in caplog.text


def test_provider_from_settings_uses_configured_url_and_token():
    settings = Settings(
        _env_file=None, API_URL="http://db.local:3000/", TOKEN="t" * 20
    )
    http = transport_returning(json={"id": 1})
    provider = provider_from_settings(settings, http_client=http)
    assert provider.api_url == "http://db.local:3000"
    run(provider(Operation.GET_ONE, "posts", {"id": 1}))
    assert http.await_args.args[1].headers["Authorization"] == "Bearer " + "t" * 20
