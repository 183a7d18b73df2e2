"""
Resilient HTTP client for the start.gg API.

Responses are classified into three outcomes:

- 2xx: the parsed JSON body is returned.
- 5xx: treated as transient; the identical request is retried after an
  exponentially growing delay (1s, 2s, 4s, ...). Retries are unbounded by
  default because server outages are expected to end.
- anything else (4xx): raised immediately as ``PermanentUpstreamError``.

Transport exceptions are never retried. GraphQL calls additionally raise
``GraphQLError`` when a 2xx body carries a non-empty ``errors`` list.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import requests

from melee_census.core.config import RetryPolicy
from melee_census.core.constants import DEFAULT_TIMEOUT, STARTGG_GQL_URL
from melee_census.core.errors import (
    GraphQLError,
    NetworkFailureError,
    PermanentUpstreamError,
    TransientUpstreamError,
)

logger = logging.getLogger(__name__)


class FetchClient:
    """Issue requests with the retry policy applied.

    Args:
        api_key: Bearer token for the GraphQL endpoint. REST endpoints are
            called unauthenticated.
        session: Reusable session; a new one is created when omitted.
        retry: Backoff policy for 5xx responses.
        timeout: Per-request timeout in seconds, None for the stack default.
        sleep: Called with the delay in seconds before each retry.
    """

    def __init__(
        self,
        api_key: str | None = None,
        session: requests.Session | None = None,
        retry: RetryPolicy | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.api_key = api_key
        self.session = session or requests.Session()
        self.retry = retry or RetryPolicy()
        self.timeout = timeout
        self.sleep = sleep

    def request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and return its parsed JSON body."""
        failures = 0
        while True:
            try:
                response = self.session.request(
                    method, url, timeout=self.timeout, **kwargs
                )
            except requests.RequestException as e:
                logger.error("%s %s failed: %s", method, url, e)
                raise NetworkFailureError(str(e), url=url) from e

            status = response.status_code
            if response.ok:
                try:
                    return response.json()
                except ValueError as e:
                    logger.error("%s: %s returned a non-JSON body", status, url)
                    raise PermanentUpstreamError(
                        f"Invalid JSON body: {e}", status_code=status, url=url
                    ) from e

            if status < 500:
                logger.error("%s: %s", status, url)
                raise PermanentUpstreamError(
                    response.reason or f"HTTP {status}",
                    status_code=status,
                    url=url,
                )

            if not self.retry.allows(failures + 1):
                raise TransientUpstreamError(
                    f"{status} after {failures + 1} attempts",
                    status_code=status,
                    url=url,
                )
            delay = self.retry.delay_for(failures)
            logger.warning("%s: %s, retrying in %.1fs", status, url, delay)
            self.sleep(delay)
            failures += 1

    def get_json(self, url: str) -> Any:
        return self.request("GET", url)

    def graphql(self, query: str, variables: dict[str, Any]) -> Any:
        """Run a GraphQL query and return its ``data`` member."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        body = self.request(
            "POST",
            STARTGG_GQL_URL,
            headers=headers,
            json={"query": query, "variables": variables},
        )
        errors = body.get("errors") if isinstance(body, dict) else None
        if isinstance(errors, list) and errors:
            first = errors[0]
            message = (
                first.get("message") if isinstance(first, dict) else str(first)
            )
            raise GraphQLError(str(message), url=STARTGG_GQL_URL)
        return body.get("data") if isinstance(body, dict) else None
