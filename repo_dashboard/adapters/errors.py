# repo_dashboard/adapters/errors.py
"""
Error hierarchy for the GitHub access layer.

Every failure raised by the adapters derives from GitHubAPIError so that
callers can surface them uniformly. Nothing in this package retries.
"""

from typing import Optional


class GitHubAPIError(Exception):
    """Base exception for GitHub API access errors."""
    pass


class ConfigurationError(GitHubAPIError):
    """Raised when the adapter is built without a usable credential."""
    pass


class RateLimitExceeded(GitHubAPIError):
    """Raised before a request when the known quota is exhausted."""

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(
            f"GitHub API rate limit exceeded. Resets in {retry_after} seconds."
        )


class UpstreamError(GitHubAPIError):
    """Raised for a non-success HTTP response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(f"GitHub API error: {message}")


class DecodeError(GitHubAPIError):
    """Raised when a response body is not the JSON shape we expect."""
    pass
