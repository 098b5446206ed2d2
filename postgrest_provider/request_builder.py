# postgrest_provider/request_builder.py
from __future__ import annotations

import json
from urllib.parse import quote
from typing import Any, Callable, Dict

from requests.structures import CaseInsensitiveDict

from postgrest_provider.errors import UnsupportedOperation
from postgrest_provider.filters import convert_filters, format_scalar
from postgrest_provider.http.auth import TokenProvider, apply_auth_headers
from postgrest_provider.types import (
    CreateParams,
    HttpRequest,
    IdParams,
    ListParams,
    ManyParams,
    Operation,
    ReferenceParams,
    RequestOptions,
    Sort,
    UpdateParams,
)
from postgrest_provider.util.url import resource_url


def _order_param(sort: Sort) -> str:
    return f"{sort.field}.{sort.order.lower()}"


def _single_resource_url(api_url: str, resource: str, id_: Any) -> str:
    return resource_url(api_url, resource, {"id": f"eq.{format_scalar(id_)}"})


def _set_single_response_headers(options: RequestOptions) -> None:
    options.headers["Prefer"] = "return=representation"
    options.headers["Accept"] = "application/vnd.pgrst.object+json"


# ---- per-operation builders ----


def _build_list(
    api_url: str, resource: str, params: Any, options: RequestOptions
) -> str:
    p = ListParams.model_validate(params)
    page, per_page = p.pagination.page, p.pagination.per_page
    options.headers["Range-Unit"] = "items"
    options.headers["Range"] = f"{(page - 1) * per_page}-{page * per_page - 1}"
    options.headers["Prefer"] = "count=exact"
    query = {"order": _order_param(p.sort)}
    query.update(convert_filters(p.filter))
    return resource_url(api_url, resource, query)


def _build_get_one(
    api_url: str, resource: str, params: Any, options: RequestOptions
) -> str:
    p = IdParams.model_validate(params)
    _set_single_response_headers(options)
    return _single_resource_url(api_url, resource, p.id)


def _build_get_many(
    api_url: str, resource: str, params: Any, options: RequestOptions
) -> str:
    p = ManyParams.model_validate(params)
    ids = ",".join(quote(format_scalar(i), safe="") for i in p.ids)
    # parens and commas stay literal: PostgREST reads them as list syntax
    return f"{api_url}/{resource}?id=in.({ids})"


def _build_get_many_reference(
    api_url: str, resource: str, params: Any, options: RequestOptions
) -> str:
    p = ReferenceParams.model_validate(params)
    query = {"order": _order_param(p.sort)}
    query.update(convert_filters({p.target: p.id}))
    return resource_url(api_url, resource, query)


def _build_update(
    api_url: str, resource: str, params: Any, options: RequestOptions
) -> str:
    p = UpdateParams.model_validate(params)
    _set_single_response_headers(options)
    options.method = "PATCH"
    options.body = json.dumps(p.data)
    return _single_resource_url(api_url, resource, p.id)


def _build_create(
    api_url: str, resource: str, params: Any, options: RequestOptions
) -> str:
    p = CreateParams.model_validate(params)
    _set_single_response_headers(options)
    options.method = "POST"
    options.body = json.dumps(p.data)
    return resource_url(api_url, resource)


def _build_delete(
    api_url: str, resource: str, params: Any, options: RequestOptions
) -> str:
    p = IdParams.model_validate(params)
    options.method = "DELETE"
    return _single_resource_url(api_url, resource, p.id)


REQUEST_BUILDERS: Dict[Operation, Callable[[str, str, Any, RequestOptions], str]] = {
    Operation.GET_LIST: _build_list,
    Operation.GET_ONE: _build_get_one,
    Operation.GET_MANY: _build_get_many,
    Operation.GET_MANY_REFERENCE: _build_get_many_reference,
    Operation.UPDATE: _build_update,
    Operation.CREATE: _build_create,
    Operation.DELETE: _build_delete,
}


def convert_rest_request_to_http(
    operation: Any,
    resource: str,
    params: Any,
    *,
    api_url: str,
    token_provider: TokenProvider | None = None,
) -> HttpRequest:
    """
    Build the PostgREST request for one data-access operation.

    Parameters
    ----------
    operation : Operation | str
        e.g. Operation.GET_LIST or "UPDATE"
    resource : str
        Collection name, used verbatim in the path (e.g. "posts")
    params : mapping | pydantic model
        Operation params; shape depends on the operation
    api_url : str
        Base URL without trailing slash

    Returns
    -------
    HttpRequest with url and options (headers, method, body)
    """
    op = Operation.coerce(operation)
    builder = REQUEST_BUILDERS.get(op)
    if builder is None:
        raise UnsupportedOperation(op.value)

    options = RequestOptions(
        headers=CaseInsensitiveDict({"Accept": "application/json"})
    )
    apply_auth_headers(options.headers, token_provider)
    url = builder(api_url, resource, params, options)
    return HttpRequest(url=url, options=options)
