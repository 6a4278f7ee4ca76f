from typing import Any
from urllib.parse import urlsplit


def is_absolute_http_url(value: Any) -> bool:
    """True for http(s) URL strings with a host"""
    if not isinstance(value, str):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc) and " " not in value
