# repo_dashboard/config/settings.py
import os
from dataclasses import dataclass


@dataclass(frozen=True)  # Immutable configuration
class GitHubConfig:
    token: str
    api_base_url: str = 'https://api.github.com'
    web_base_url: str = 'https://github.com'
    cache_ttl_seconds: float = 300.0  # 5 minutes
    per_page: int = 100  # Items per page (max 100)
    branch_lookup_workers: int = 8
    user_agent: str = 'repo-dashboard'

    @classmethod
    def from_env(cls) -> 'GitHubConfig':
        return cls(
            token=os.getenv('GITHUB_TOKEN', ''),
            api_base_url=os.getenv('GITHUB_API_URL', 'https://api.github.com').rstrip('/'),
            web_base_url=os.getenv('GITHUB_WEB_URL', 'https://github.com').rstrip('/'),
            cache_ttl_seconds=float(os.getenv('CACHE_TTL_SECONDS', '300')),
            per_page=int(os.getenv('GITHUB_PER_PAGE', '100')),
            branch_lookup_workers=int(os.getenv('BRANCH_LOOKUP_WORKERS', '8')),
            user_agent=os.getenv('GITHUB_USER_AGENT', 'repo-dashboard')
        )
