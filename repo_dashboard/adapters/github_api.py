# repo_dashboard/adapters/github_api.py
"""
Anti-corruption layer for GitHub's REST API.

This adapter:
1. Sends authenticated requests with the fixed GitHub headers
2. Gates every request on the shared rate limit tracker
3. Turns error responses into typed exceptions
4. Walks page-numbered collection endpoints to the end
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from repo_dashboard.adapters.errors import ConfigurationError, DecodeError, UpstreamError
from repo_dashboard.adapters.rate_limit import RateLimitInfo, RateLimitTracker

logger = logging.getLogger(__name__)


class GitHubRESTAdapter:
    """
    Thin client over the GitHub REST API.

    No request is ever retried. Pages are fetched strictly one after
    another so results keep upstream order and the rate limit headers are
    applied in the order GitHub sent them.
    """

    ACCEPT_HEADER = 'application/vnd.github.v3+json'
    MAX_PER_PAGE = 100

    def __init__(
        self,
        token: str,
        base_url: str = 'https://api.github.com',
        per_page: int = 100,
        user_agent: str = 'repo-dashboard',
        rate_limiter: Optional[RateLimitTracker] = None,
        session: Optional[requests.Session] = None
    ):
        if not token:
            raise ConfigurationError("GitHub token is required")
        # GitHub caps pages at 100; a larger size would look like a short last page
        if not 1 <= per_page <= self.MAX_PER_PAGE:
            raise ConfigurationError(
                f"Page size must be between 1 and {self.MAX_PER_PAGE}, got {per_page}"
            )
        self._base_url = base_url.rstrip('/')
        self._per_page = per_page
        self._rate_limiter = rate_limiter if rate_limiter is not None else RateLimitTracker()
        self._session = session if session is not None else requests.Session()
        self._headers = {
            'Authorization': f'Bearer {token}',
            'Accept': self.ACCEPT_HEADER,
            'User-Agent': user_agent
        }

    @property
    def per_page(self) -> int:
        return self._per_page

    def _resolve_url(self, endpoint: str) -> str:
        if endpoint.startswith(('http://', 'https://')):
            return endpoint
        if not endpoint.startswith('/'):
            endpoint = f'/{endpoint}'
        return f'{self._base_url}{endpoint}'

    def request(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any
    ) -> Any:
        """
        Issue a single GET request and return the decoded JSON body.

        Args:
            endpoint: Path relative to the API base, or an absolute URL
            headers: Extra headers; these win over the fixed ones
            **kwargs: Passed through to ``requests.Session.get``

        Raises:
            RateLimitExceeded: If the known quota is exhausted until a future reset
            UpstreamError: For any non-success status
            DecodeError: If a success body is not valid JSON
        """
        self._rate_limiter.check()

        url = self._resolve_url(endpoint)
        merged_headers = {**self._headers, **(headers or {})}
        response = self._session.get(url, headers=merged_headers, **kwargs)

        # Error responses carry rate limit headers too
        self._rate_limiter.update_from_headers(response.headers)

        if not response.ok:
            message = _error_message(response)
            logger.debug(f"GET {url} failed: {message}")
            raise UpstreamError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON in response from {url}: {e}") from e

    def fetch_all_pages(self, endpoint: str) -> List[Any]:
        """
        Fetch every page of a collection endpoint and concatenate them.

        A page shorter than ``per_page`` (including an empty one) is taken
        as the last page. Any failure discards what was collected so far.
        """
        results: List[Any] = []
        page = 1

        while True:
            data = self.request(endpoint, params={'per_page': self._per_page, 'page': page})
            if not isinstance(data, list):
                raise DecodeError(
                    f"Expected a JSON array from {endpoint} (page {page}), "
                    f"got {type(data).__name__}"
                )

            results.extend(data)
            logger.debug(f"{endpoint}: page {page} returned {len(data)} items")

            if len(data) < self._per_page:
                break
            page += 1

        return results

    def get_rate_limit_status(self) -> RateLimitInfo:
        """Get current rate limit status."""
        return self._rate_limiter.snapshot()

    def close(self):
        """Clean up resources."""
        self._session.close()
        logger.info("GitHub API adapter closed")


def _error_message(response: requests.Response) -> str:
    """Best-effort human readable message for an error response."""
    fallback = f"{response.status_code} {response.reason}"
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get('message'):
        return str(body['message'])
    return fallback
