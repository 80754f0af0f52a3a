"""URL helpers."""

from urllib.parse import urlencode, urlsplit


def short_url(url: str) -> str:
    """
    Compact display form of a URL: host without 'www.' plus the path.

    Strings that are not absolute URLs are returned unchanged.

    Example:
        >>> short_url("https://www.benchling.com/s/seq-1/")
        'benchling.com/s/seq-1'
    """
    text = str(url or "")
    try:
        parts = urlsplit(text)
        host = parts.hostname
    except ValueError:
        return text
    if not parts.scheme or not host:
        return text
    if host.startswith("www."):
        host = host[len("www."):]
    path = parts.path
    if path.endswith("/"):
        path = path[:-1]
    return host + path


def append_query_param(base_url: str, name: str, value: str) -> str:
    """Append one url-encoded query parameter, keeping any existing query."""
    separator = "&" if "?" in base_url else "?"
    return base_url + separator + urlencode({name: value})
