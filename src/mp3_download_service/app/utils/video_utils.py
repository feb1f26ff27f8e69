from typing import Iterable

from pydantic import HttpUrl, TypeAdapter, ValidationError

_http_url_adapter = TypeAdapter(HttpUrl)


def is_allowed_host(host: str, allowed_hosts: Iterable[str]) -> bool:
    """Return True if `host` is one of `allowed_hosts` or a subdomain of one."""
    host = host.lower().rstrip(".")
    for allowed in allowed_hosts:
        allowed = allowed.lower().strip(".")
        if host == allowed or host.endswith(f".{allowed}"):
            return True
    return False


def is_valid_video_url(url: str, allowed_hosts: Iterable[str]) -> bool:
    """
    Check if the given URL points to a video on an allowed platform.

    Args:
    ----
        url: The URL to validate. Must be absolute, http or https.
        allowed_hosts: Platform domains accepted, subdomains included.

    Returns:
    -------
        True if the URL is well formed, its host is allowed and it points
        somewhere past the bare domain, False otherwise.

    """
    try:
        parsed = _http_url_adapter.validate_python(url.strip())
    except ValidationError:
        return False

    if not parsed.host or not is_allowed_host(parsed.host, allowed_hosts):
        return False

    # A bare "https://youtube.com/" does not identify a video
    return (parsed.path or "/") != "/" or bool(parsed.query)
