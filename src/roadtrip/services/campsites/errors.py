"""Classified failures of the overnight-stop provider.

The same taxonomy is shown on the map when campsite loading fails, so the
messages are written for end users.
"""

from __future__ import annotations

from enum import Enum

import httpx


class SearchFailureKind(str, Enum):
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    AREA_TOO_LARGE = "area_too_large"
    NO_DATA = "no_data"
    PROVIDER_UNAVAILABLE = "provider_unavailable"


_MESSAGES: dict[SearchFailureKind, tuple[str, str, bool]] = {
    SearchFailureKind.TIMEOUT: (
        "Request timed out while loading campsites",
        "The area may be too large. Try a smaller search radius.",
        True,
    ),
    SearchFailureKind.RATE_LIMITED: (
        "Too many requests",
        "Please wait a moment before searching again.",
        True,
    ),
    SearchFailureKind.AREA_TOO_LARGE: (
        "Search area too large",
        "Please search a smaller area.",
        False,
    ),
    SearchFailureKind.NO_DATA: (
        "No campsites found in this area",
        "Try a larger search radius or pick a stop manually.",
        False,
    ),
    SearchFailureKind.PROVIDER_UNAVAILABLE: (
        "Campsite service temporarily unavailable",
        "Please try again in a few moments.",
        True,
    ),
}


class OvernightSearchError(Exception):
    """A search for overnight stops failed in a classified way."""

    def __init__(self, kind: SearchFailureKind, detail: str | None = None) -> None:
        message, suggestion, retryable = _MESSAGES[kind]
        super().__init__(detail or message)
        self.kind = kind
        self.message = message
        self.suggestion = suggestion
        self.retryable = retryable
        self.detail = detail


def classify_search_error(exc: BaseException) -> OvernightSearchError:
    """Map an arbitrary provider exception onto the failure taxonomy."""

    if isinstance(exc, OvernightSearchError):
        return exc
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return OvernightSearchError(SearchFailureKind.TIMEOUT, str(exc) or None)
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        if status_code == 429:
            return OvernightSearchError(SearchFailureKind.RATE_LIMITED, str(exc))
        if status_code == 404:
            return OvernightSearchError(SearchFailureKind.NO_DATA, str(exc))
        if status_code in (400, 413, 414):
            return OvernightSearchError(SearchFailureKind.AREA_TOO_LARGE, str(exc))
        return OvernightSearchError(SearchFailureKind.PROVIDER_UNAVAILABLE, str(exc))
    if isinstance(exc, (httpx.NetworkError, ConnectionError)):
        return OvernightSearchError(SearchFailureKind.PROVIDER_UNAVAILABLE, str(exc) or None)

    error_msg = str(exc).lower()
    if "timeout" in error_msg or "timed out" in error_msg:
        kind = SearchFailureKind.TIMEOUT
    elif "rate limit" in error_msg or "too many requests" in error_msg:
        kind = SearchFailureKind.RATE_LIMITED
    elif "bounding box too large" in error_msg:
        kind = SearchFailureKind.AREA_TOO_LARGE
    elif "no data" in error_msg or "404" in error_msg:
        kind = SearchFailureKind.NO_DATA
    else:
        kind = SearchFailureKind.PROVIDER_UNAVAILABLE
    return OvernightSearchError(kind, str(exc) or None)
