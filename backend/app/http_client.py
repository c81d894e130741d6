"""Minimal JSON-over-HTTPS helper for the billing and dispatch providers."""
from __future__ import annotations

import http.client
import json
import logging
from typing import Any, Dict, Mapping, Optional
from urllib import error as urllib_error, request as urllib_request

from .errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

USER_AGENT = "entitlement-sync/1.0"


def request_json(
    method: str,
    url: str,
    *,
    provider: str,
    headers: Mapping[str, str],
    timeout: float,
    body: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Perform a single request and return the decoded JSON object.

    Any transport failure, non-2xx status or non-object body is raised as
    :class:`UpstreamUnavailable`. There is no retry.
    """

    data = json.dumps(body).encode("utf-8") if body is not None else None
    request_headers = {"Accept": "application/json", "User-Agent": USER_AGENT, **headers}
    if data is not None:
        request_headers["Content-Type"] = "application/json"

    try:
        # Request rejects malformed URLs with ValueError.
        req = urllib_request.Request(url=url, data=data, headers=request_headers, method=method)
        with urllib_request.urlopen(req, timeout=timeout) as response:
            raw = response.read()
    except urllib_error.HTTPError as exc:
        logger.warning(
            "Provider request rejected",
            extra={"provider": provider, "url": url, "http_status": exc.code},
        )
        raise UpstreamUnavailable(
            f"{provider} responded with status {exc.code}",
            detail={"provider": provider, "http_status": exc.code},
        ) from exc
    except (urllib_error.URLError, http.client.HTTPException, TimeoutError, OSError, ValueError) as exc:
        logger.warning(
            "Provider unreachable",
            extra={"provider": provider, "url": url, "error": str(exc)},
        )
        raise UpstreamUnavailable(f"{provider} is unreachable", detail={"provider": provider}) from exc

    if not raw:
        return {}
    try:
        parsed = json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise UpstreamUnavailable(f"{provider} returned an undecodable body", detail={"provider": provider}) from exc
    if not isinstance(parsed, dict):
        raise UpstreamUnavailable(f"{provider} returned an unexpected body", detail={"provider": provider})
    return parsed


__all__ = ["request_json"]
