"""Exception hierarchy for upstream and transport failures."""

from __future__ import annotations


class HarvestError(Exception):
    """Base class for every error raised while harvesting."""


class UpstreamError(HarvestError):
    """The upstream service answered, but not with a usable body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class TransientUpstreamError(UpstreamError):
    """5xx responses that outlasted a finite retry budget."""


class PermanentUpstreamError(UpstreamError):
    """Non-5xx failures (4xx); never retried."""


class GraphQLError(UpstreamError):
    """A 2xx GraphQL response that carried a non-empty ``errors`` list."""


class NetworkFailureError(HarvestError):
    """Transport-level failure (DNS, connection reset, timeout)."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


__all__ = [
    "HarvestError",
    "UpstreamError",
    "TransientUpstreamError",
    "PermanentUpstreamError",
    "GraphQLError",
    "NetworkFailureError",
]
