# adapters package
from repo_dashboard.adapters.cache import TTLCache
from repo_dashboard.adapters.errors import (
    ConfigurationError,
    DecodeError,
    GitHubAPIError,
    RateLimitExceeded,
    UpstreamError,
)
from repo_dashboard.adapters.github_api import GitHubRESTAdapter
from repo_dashboard.adapters.rate_limit import RateLimitInfo, RateLimitTracker

__all__ = [
    'GitHubRESTAdapter', 'GitHubAPIError', 'ConfigurationError', 'RateLimitExceeded',
    'UpstreamError', 'DecodeError', 'RateLimitInfo', 'RateLimitTracker', 'TTLCache'
]
