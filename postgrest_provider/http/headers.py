# postgrest_provider/http/headers.py
from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from requests.structures import CaseInsensitiveDict

_INT_RE = re.compile(r"^\s*\d+\s*$")


def get_ci(headers: Mapping[str, Any] | None, name: str):
    if not headers:
        return None
    if isinstance(headers, CaseInsensitiveDict):
        return headers.get(name)
    ln = name.lower()
    for k, v in headers.items():
        if k.lower() == ln:
            return v
    return None


def _parse_int(s: str) -> Optional[int]:
    return int(s) if _INT_RE.match(s) else None


def total_from_content_range(value: str) -> int:
    """
    Total item count from a Content-Range value.

      "0-9/23"  -> 23
      "0-9/*"   -> 10   (end + 1 when the server did not count)
      "*/0"     -> 0
      "*/*"     -> 0    (empty range, no count)
    """
    range_part, _, total_part = value.strip().rpartition("/")
    if not range_part:
        # no slash at all: the whole value is the range portion
        range_part, total_part = total_part, ""

    total = _parse_int(total_part)
    if total is not None:
        return total

    end = _parse_int(range_part.split("-")[-1])
    if end is not None:
        return end + 1
    return 0
