"""
Base URL resolution.

Computes the absolute URL at which the documented REST API is reachable by
the caller, taking proxies and explicit overrides into account.
"""

import logging
from typing import Optional
from urllib.parse import urljoin

from explorer.config import DEFAULT_REST_API_ROOT

logger = logging.getLogger(__name__)


def _first_header_value(value: Optional[str]) -> Optional[str]:
    # Proxy chains append to forwarding headers; the client-facing value is first
    if not value:
        return None
    first = value.split(",")[0].strip()
    return first or None


def resolve_scheme(request, protocol: Optional[str] = None) -> str:
    if protocol:
        return protocol.rstrip(":/").lower()
    forwarded = _first_header_value(request.headers.get("X-Forwarded-Proto"))
    return (forwarded or request.scheme).lower()


def resolve_host(request) -> str:
    return _first_header_value(request.headers.get("X-Forwarded-Host")) or request.host


def resolve_base_url(
    request,
    rest_api_root: Optional[str] = None,
    base_path: Optional[str] = None,
    protocol: Optional[str] = None,
) -> str:
    """Resolve the externally reachable base URL of the REST API.

    Args:
        request: Incoming request (anything with ``scheme``, ``host`` and ``headers``)
        rest_api_root: Mount path of the REST API, defaults to ``/api``
        base_path: Explicit path (or absolute URL) override, wins over ``rest_api_root``
        protocol: Explicit scheme override, e.g. ``https`` behind a TLS terminator

    Returns:
        str: Absolute URL such as ``https://example.com/api``
    """
    path = base_path or rest_api_root or DEFAULT_REST_API_ROOT
    origin = f"{resolve_scheme(request, protocol)}://{resolve_host(request)}/"
    base_url = urljoin(origin, path)
    logger.debug(f"Resolved basePath {base_url} (path={path}, protocol={protocol})")
    return base_url
