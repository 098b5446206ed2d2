# postgrest_provider/filters.py
from __future__ import annotations

import numbers
from typing import Any, Dict, Mapping


def _strip_first_colon(s: str) -> str:
    # only the first occurrence; "a:b:c" -> "ab:c"
    return s.replace(":", "", 1)


def _format_number(val: numbers.Real) -> str:
    """Render numbers the way the dialect's JS clients do: 2.0 -> '2'."""
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val)


def format_scalar(val: Any) -> str:
    """Scalar text as the dialect's JS clients write it: True -> 'true'."""
    if isinstance(val, bool):
        return "true" if val else "false"
    if val is None:
        return "null"
    if isinstance(val, numbers.Real):
        return _format_number(val)
    return str(val)


def encode_filter_value(val: Any) -> str:
    """
    Map a single filter value to a PostgREST operator string.

      str     -> ilike.*<val>*
      bool    -> is.true / is.false
      None    -> is.null
      number  -> eq.<val>
      other   -> ilike.*<str(val)>*
    """
    if isinstance(val, str):
        return f"ilike.*{_strip_first_colon(val)}*"
    # bool before number: bool is an int subclass
    if isinstance(val, bool):
        return "is.true" if val else "is.false"
    if val is None:
        return "is.null"
    if isinstance(val, numbers.Real):
        return f"eq.{_format_number(val)}"
    return f"ilike.*{_strip_first_colon(str(val))}*"


def convert_filters(filters: Mapping[str, Any] | None) -> Dict[str, str]:
    """
    Encode every field of a filter mapping. Total over all value types.
    A field missing from the mapping produces no query parameter; a field
    mapped to None produces `is.null`.
    """
    return {key: encode_filter_value(val) for key, val in (filters or {}).items()}
