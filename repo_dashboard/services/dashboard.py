# repo_dashboard/services/dashboard.py
"""
Dashboard service: cached, normalized views over the GitHub REST API.

Each public method follows the same steps: build a cache key from its
arguments, answer from the cache when possible, otherwise page through
the collection endpoint, decode and normalize the records, and cache the
finished list. Upstream failures propagate to the caller untouched; the
only failure absorbed here is a per-branch commit lookup.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Type, TypeVar
import logging

from repo_dashboard.adapters.cache import TTLCache
from repo_dashboard.adapters.errors import ConfigurationError, DecodeError
from repo_dashboard.adapters.github_api import GitHubRESTAdapter
from repo_dashboard.adapters.rate_limit import RateLimitInfo
from repo_dashboard.config.settings import GitHubConfig
from repo_dashboard.models.items import (
    UNKNOWN_AUTHOR,
    Assignee,
    BranchItem,
    IssueItem,
    ItemState,
    Label,
    PullRequestItem,
    Repository,
)
from repo_dashboard.models.payloads import (
    GitHubBranchPayload,
    GitHubCommitPayload,
    GitHubIssuePayload,
    GitHubPullRequestPayload,
    GitHubRepositoryPayload,
)

logger = logging.getLogger(__name__)

P = TypeVar('P')


@dataclass(frozen=True)
class CommitLookup:
    """Outcome of one best-effort branch head commit lookup."""
    sha: str
    date: Optional[str] = None
    error: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.date is not None


class GitHubDashboardService:
    """
    Aggregates repositories, issues, pull requests and branches.

    The adapter (with its rate limit tracker) and the cache are built once
    and owned by the service; pass them in to share or fake them.
    """

    def __init__(
        self,
        config: GitHubConfig,
        adapter: Optional[GitHubRESTAdapter] = None,
        cache: Optional[TTLCache] = None
    ):
        if not config.token:
            raise ConfigurationError(
                "GITHUB_TOKEN environment variable is required. "
                "Please set it before starting the dashboard."
            )
        self._config = config
        self._adapter = adapter if adapter is not None else GitHubRESTAdapter(
            token=config.token,
            base_url=config.api_base_url,
            per_page=config.per_page,
            user_agent=config.user_agent
        )
        self._cache = cache if cache is not None else TTLCache(ttl_seconds=config.cache_ttl_seconds)

    def _cached(self, cache_key: str, fetch: Callable[[], Sequence[Any]]) -> List[Any]:
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit: {cache_key}")
            return list(cached)

        logger.debug(f"Cache miss: {cache_key}")
        result = tuple(fetch())
        self._cache.set(cache_key, result)
        return list(result)

    def _fetch_decoded(self, endpoint: str, payload_cls: Type[P]) -> List[P]:
        records = self._adapter.fetch_all_pages(endpoint)
        return [payload_cls.from_response(record) for record in records]

    def get_organization_repos(self, org: str) -> List[Repository]:
        """Get all repositories for an organization."""
        def fetch() -> List[Repository]:
            payloads = self._fetch_decoded(f'/orgs/{org}/repos', GitHubRepositoryPayload)
            logger.info(f"Fetched {len(payloads)} repositories for {org}")
            return [Repository.from_payload(payload) for payload in payloads]

        return self._cached(f'repos:{org}', fetch)

    def get_repository_issues(self, owner: str, repo: str) -> List[IssueItem]:
        """Get all issues for a repository, open and closed, excluding pull requests."""
        def fetch() -> List[IssueItem]:
            payloads = self._fetch_decoded(
                f'/repos/{owner}/{repo}/issues?state=all', GitHubIssuePayload
            )
            # The issues endpoint also lists pull requests
            issues = [payload for payload in payloads if not payload.is_pull_request]
            logger.info(
                f"Fetched {len(issues)} issues for {owner}/{repo} "
                f"({len(payloads) - len(issues)} pull requests skipped)"
            )
            return [
                IssueItem(
                    id=f'issue-{owner}-{repo}-{issue.id}',
                    repository=repo,
                    repository_full_name=f'{owner}/{repo}',
                    title=issue.title,
                    author=issue.user.login if issue.user else UNKNOWN_AUTHOR,
                    author_avatar_url=issue.user.avatar_url if issue.user else None,
                    labels=tuple(Label.from_payload(label) for label in issue.labels),
                    assignees=tuple(Assignee.from_payload(user) for user in issue.assignees),
                    created_at=issue.created_at,
                    updated_at=issue.updated_at,
                    url=issue.html_url,
                    state=_item_state(issue.state),
                    number=issue.number
                )
                for issue in issues
            ]

        return self._cached(f'issues:{owner}/{repo}', fetch)

    def get_repository_pulls(self, owner: str, repo: str) -> List[PullRequestItem]:
        """Get all pull requests for a repository, whatever their state."""
        def fetch() -> List[PullRequestItem]:
            pulls = self._fetch_decoded(
                f'/repos/{owner}/{repo}/pulls?state=all', GitHubPullRequestPayload
            )
            logger.info(f"Fetched {len(pulls)} pull requests for {owner}/{repo}")
            return [
                PullRequestItem(
                    id=f'pr-{owner}-{repo}-{pr.id}',
                    repository=repo,
                    repository_full_name=f'{owner}/{repo}',
                    title=pr.title,
                    author=pr.user.login if pr.user else UNKNOWN_AUTHOR,
                    author_avatar_url=pr.user.avatar_url if pr.user else None,
                    labels=tuple(Label.from_payload(label) for label in pr.labels),
                    assignees=tuple(Assignee.from_payload(user) for user in pr.assignees),
                    created_at=pr.created_at,
                    updated_at=pr.updated_at,
                    url=pr.html_url,
                    # A merged pull request reports state "closed" upstream
                    state=ItemState.MERGED if pr.merged_at else _item_state(pr.state),
                    number=pr.number,
                    is_draft=pr.draft
                )
                for pr in pulls
            ]

        return self._cached(f'pulls:{owner}/{repo}', fetch)

    def get_repository_branches(self, owner: str, repo: str) -> List[BranchItem]:
        """
        Get all branches for a repository, dated by their head commit.

        Head commits are looked up concurrently. A failed lookup leaves that
        branch undated ('' timestamps) instead of failing the listing.
        """
        def fetch() -> List[BranchItem]:
            branches = self._fetch_decoded(f'/repos/{owner}/{repo}/branches', GitHubBranchPayload)
            lookups = self._lookup_head_commits(owner, repo, branches)

            unresolved = sum(1 for lookup in lookups if not lookup.resolved)
            logger.info(
                f"Fetched {len(branches)} branches for {owner}/{repo} "
                f"({unresolved} without commit date)"
            )

            items = []
            for branch, lookup in zip(branches, lookups):
                last_commit_date = lookup.date or ''
                items.append(BranchItem(
                    id=f'branch-{owner}-{repo}-{branch.name}',
                    repository=repo,
                    repository_full_name=f'{owner}/{repo}',
                    title=branch.name,
                    author='',
                    author_avatar_url=None,
                    labels=(),
                    assignees=(),
                    created_at=last_commit_date,
                    updated_at=last_commit_date,
                    url=f'{self._config.web_base_url}/{owner}/{repo}/tree/{branch.name}'
                ))
            return items

        return self._cached(f'branches:{owner}/{repo}', fetch)

    def _lookup_head_commits(
        self,
        owner: str,
        repo: str,
        branches: Sequence[GitHubBranchPayload]
    ) -> List[CommitLookup]:
        if not branches:
            return []

        workers = max(1, min(self._config.branch_lookup_workers, len(branches)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._lookup_head_commit, owner, repo, branch)
                for branch in branches
            ]
            return [future.result() for future in futures]

    def _lookup_head_commit(self, owner: str, repo: str, branch: GitHubBranchPayload) -> CommitLookup:
        sha = branch.commit_sha
        try:
            commit = GitHubCommitPayload.from_response(
                self._adapter.request(f'/repos/{owner}/{repo}/commits/{sha}')
            )
        except Exception as e:
            # Commit dates only order branches; a missing one is not fatal
            logger.warning(f"Could not load head commit {sha[:7]} of {owner}/{repo}:{branch.name}: {e}")
            return CommitLookup(sha=sha, error=str(e))
        return CommitLookup(sha=sha, date=commit.activity_date)

    def get_rate_limit_info(self) -> RateLimitInfo:
        """Get current rate limit info."""
        return self._adapter.get_rate_limit_status()

    def clear_cache(self) -> None:
        """Clear all cached data."""
        self._cache.clear()
        logger.info("Cache cleared")

    def close(self) -> None:
        self._adapter.close()


def _item_state(raw_state: str) -> ItemState:
    try:
        return ItemState(raw_state)
    except ValueError:
        raise DecodeError(f"Unexpected item state: {raw_state!r}") from None
