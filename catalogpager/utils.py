"""Generic URL helpers shared by extraction and request building."""

from urllib.parse import urlsplit, urlunsplit


def url_without_domain(url: str) -> str:
    """
    Reduce an absolute or relative URL to its path, query and fragment.

    Listing links are stored without scheme and host so that they keep
    working when the base URL of a source is overridden.

    Parameters:
        url (str): The URL taken from an ``href`` attribute.

    Returns:
        str: The URL without scheme and network location, or an empty string.
    """
    url = url.strip()
    if not url:
        return ""
    parts = urlsplit(url)
    return urlunsplit(("", "", parts.path, parts.query, parts.fragment))


def join_base_url(base_url: str, path: str) -> str:
    """
    Join a base URL and a site-relative path with exactly one slash.

    Absolute ``path`` values are returned unchanged.

    Parameters:
        base_url (str): The scheme and host of the source, optionally with a path prefix.
        path (str): The relative path of a listing, title or chapter.

    Returns:
        str: The absolute URL.
    """
    if urlsplit(path).scheme:
        return path
    if not path:
        return base_url.rstrip("/")
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def normalize_base_url(url: str) -> str:
    """Strip whitespace and trailing slashes from a configured base URL."""
    return url.strip().rstrip("/")
