# postgrest_provider/util/url.py
from urllib.parse import urlencode


def stringify(query: dict) -> str:
    """Form-encode a query mapping, keeping the mapping's order."""
    return urlencode(query, doseq=False)


def normalize_base_url(api_url: str) -> str:
    return api_url[:-1] if api_url.endswith("/") else api_url


def resource_url(api_url: str, resource: str, query: dict | None = None) -> str:
    url = f"{api_url}/{resource}"
    if query:
        return f"{url}?{stringify(query)}"
    return url


def looks_like_url(s: object) -> bool:
    return isinstance(s, str) and (s.startswith("http://") or s.startswith("https://"))
