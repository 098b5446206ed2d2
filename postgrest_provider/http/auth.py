# postgrest_provider/http/auth.py
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# Tokens this short are treated as placeholders, not credentials.
MIN_TOKEN_LENGTH = 16


@runtime_checkable
class TokenProvider(Protocol):
    def get(self) -> str:
        """Return the current bearer token, or "" when none is stored."""
        ...


class NullTokenProvider:
    def get(self) -> str:
        return ""


class StaticTokenProvider:
    def __init__(self, token: str | None = None) -> None:
        self._token = token or ""

    def get(self) -> str:
        return self._token


class EnvTokenProvider:
    """Reads the token from an environment variable on every call."""

    def __init__(self, var: str = "PGREST_TOKEN") -> None:
        self.var = var

    def get(self) -> str:
        return os.getenv(self.var, "") or ""


class JsonFileTokenProvider:
    """
    Small key/value store on disk: a JSON object whose `key` entry holds the token.
    A missing file, missing key or null value all read as "".
    """

    def __init__(self, path: str | os.PathLike, key: str = "token") -> None:
        self.path = Path(path)
        self.key = key

    def get(self) -> str:
        if not self.path.exists():
            return ""
        with self.path.open("r", encoding="utf-8") as f:
            store = json.load(f)
        if not isinstance(store, dict):
            raise ValueError(f"token store {self.path} must hold a JSON object")
        val = store.get(self.key)
        return "" if val is None else str(val)

    def set(self, token: str) -> None:
        store = {}
        if self.path.exists():
            with self.path.open("r", encoding="utf-8") as f:
                store = json.load(f)
        store[self.key] = token
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(store, f, indent=2)


def apply_auth_headers(headers, token_provider: TokenProvider | None) -> None:
    """Set `Authorization: Bearer <token>` when the stored token is long enough."""
    if token_provider is None:
        return
    token = token_provider.get() or ""
    if len(token) > MIN_TOKEN_LENGTH:
        headers["Authorization"] = f"Bearer {token}"
    elif token:
        logger.debug(
            "token of %d chars or fewer; Authorization omitted", MIN_TOKEN_LENGTH
        )
