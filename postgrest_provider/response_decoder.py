# postgrest_provider/response_decoder.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from postgrest_provider.errors import MissingRangeHeader
from postgrest_provider.http.headers import get_ci, total_from_content_range
from postgrest_provider.types import CreateParams, Operation, TransportResponse

logger = logging.getLogger(__name__)


def _decode_list(
    response: TransportResponse, resource: str, params: Any
) -> Dict[str, Any]:
    content_range = get_ci(response.headers, "Content-Range")
    if content_range is None:
        logger.warning("no Content-Range on %s list response", resource)
        raise MissingRangeHeader()
    if not isinstance(response.json, list):
        raise TypeError(
            f"expected a JSON array for {resource} list response, "
            f"got {type(response.json).__name__}"
        )
    return {
        "data": list(response.json),
        "total": total_from_content_range(str(content_range)),
    }


def _decode_create(
    response: TransportResponse, resource: str, params: Any
) -> Dict[str, Any]:
    # only the server-assigned id is adopted; other server fields are dropped
    submitted = CreateParams.model_validate(params).data
    body = response.json if isinstance(response.json, dict) else {}
    return {"data": {**submitted, "id": body.get("id")}}


def _decode_delete(
    response: TransportResponse, resource: str, params: Any
) -> Dict[str, Any]:
    return {"data": {}}


def _decode_as_is(
    response: TransportResponse, resource: str, params: Any
) -> Dict[str, Any]:
    return {"data": response.json}


RESPONSE_DECODERS: Dict[
    Operation, Callable[[TransportResponse, str, Any], Dict[str, Any]]
] = {
    Operation.GET_LIST: _decode_list,
    Operation.GET_MANY_REFERENCE: _decode_list,
    Operation.CREATE: _decode_create,
    Operation.DELETE: _decode_delete,
    Operation.GET_ONE: _decode_as_is,
    Operation.GET_MANY: _decode_as_is,
    Operation.UPDATE: _decode_as_is,
}


def convert_http_response_to_rest(
    response: TransportResponse, operation: Any, resource: str, params: Any
) -> Dict[str, Any]:
    """
    Shape a PostgREST response into the operation's result:
      lists  -> {"data": [...], "total": n}
      create -> {"data": {**submitted, "id": <server id>}}
      delete -> {"data": {}}
      others -> {"data": <body>}
    """
    op = Operation.coerce(operation)
    return RESPONSE_DECODERS[op](response, resource, params)
