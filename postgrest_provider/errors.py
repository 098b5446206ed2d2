# postgrest_provider/errors.py
from __future__ import annotations

from typing import Any, Optional


class UnsupportedOperation(ValueError):
    """Raised when an operation kind is not one of the known data-access verbs."""

    def __init__(self, operation: Any) -> None:
        self.operation = operation
        super().__init__(f"Unsupported fetch action type {operation}")


class MissingRangeHeader(RuntimeError):
    """A list response came back without the Content-Range header."""

    def __init__(self) -> None:
        super().__init__(
            "The Content-Range header is missing in the HTTP Response. "
            "The PostgREST client expects responses for lists of resources to contain "
            "this header with the total number of results to build the pagination. "
            "If you are using CORS, did you declare Content-Range in the "
            "Access-Control-Expose-Headers header?"
        )


class HttpError(Exception):
    """
    Non-2xx response from the default transport.
    Message is the server's `message` field when the body carries one,
    otherwise the HTTP reason phrase.
    """

    def __init__(
        self,
        message: str,
        status: int,
        body: Optional[str] = None,
        json: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body
        self.json = json

    def __repr__(self) -> str:
        return f"HttpError(status={self.status}, message={self.message!r})"
