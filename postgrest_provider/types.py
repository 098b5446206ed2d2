# postgrest_provider/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from requests.structures import CaseInsensitiveDict

from postgrest_provider.errors import UnsupportedOperation


class Operation(str, Enum):
    GET_LIST = "GET_LIST"
    GET_ONE = "GET_ONE"
    GET_MANY = "GET_MANY"
    GET_MANY_REFERENCE = "GET_MANY_REFERENCE"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @classmethod
    def coerce(cls, value: Any) -> "Operation":
        """
        Accepts an Operation or its string name ("GET_LIST", ...; "LIST" is an alias).
        Anything else raises UnsupportedOperation.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = _ALIASES.get(value, value)
            try:
                return cls(name)
            except ValueError:
                pass
        raise UnsupportedOperation(value)


_ALIASES = {"LIST": "GET_LIST"}


# ---- operation params ----


class _Params(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Pagination(_Params):
    page: int = 1
    per_page: int = Field(default=10, alias="perPage")


class Sort(_Params):
    field: str = "id"
    order: str = "ASC"


class ListParams(_Params):
    pagination: Pagination = Field(default_factory=Pagination)
    sort: Sort = Field(default_factory=Sort)
    # None means "unset" and encodes as is.null
    filter: Dict[str, Any] = Field(default_factory=dict)


class IdParams(_Params):
    id: Any


class UpdateParams(_Params):
    id: Any
    data: Dict[str, Any] = Field(default_factory=dict)


class ManyParams(_Params):
    ids: List[Any] = Field(default_factory=list)


class ReferenceParams(_Params):
    target: str
    id: Any
    sort: Sort = Field(default_factory=Sort)
    # accepted for call-site symmetry with GET_LIST; not sent
    pagination: Optional[Pagination] = None
    filter: Dict[str, Any] = Field(default_factory=dict)


class CreateParams(_Params):
    data: Dict[str, Any] = Field(default_factory=dict)


# ---- HTTP descriptors ----


@dataclass
class RequestOptions:
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    # None means GET
    method: Optional[str] = None
    body: Optional[str] = None


@dataclass
class HttpRequest:
    url: str
    options: RequestOptions


@dataclass
class TransportResponse:
    status: int
    headers: CaseInsensitiveDict
    body: str = ""
    json: Any = None
