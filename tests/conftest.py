"""
Pytest configuration and shared fixtures.

HTTP is faked at the ``requests.Session`` seam: tests hand a Mock session to
the adapter and script the ``requests.Response`` objects it returns. Time is
faked with FakeClock so TTL and rate limit tests never sleep.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest
import requests

from repo_dashboard.adapters.cache import TTLCache
from repo_dashboard.adapters.github_api import GitHubRESTAdapter
from repo_dashboard.adapters.rate_limit import RateLimitTracker
from repo_dashboard.config.settings import GitHubConfig
from repo_dashboard.services.dashboard import GitHubDashboardService

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock usable both as wall clock and monotonic clock."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def monotonic(self) -> float:
        return (self.current - EPOCH).total_seconds()

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)

    def epoch_in(self, seconds: float) -> int:
        """Epoch seconds ``seconds`` from now, as GitHub sends in x-ratelimit-reset."""
        return int((self.current + timedelta(seconds=seconds) - EPOCH).total_seconds())


def make_response(
    status_code: int = 200,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
    reason: Optional[str] = None,
    text: Optional[str] = None
) -> requests.Response:
    """Build a real requests.Response carrying a JSON body (or raw text)."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason if reason is not None else ('OK' if status_code < 400 else 'Error')
    if text is not None:
        response._content = text.encode('utf-8')
    elif body is not None:
        response._content = json.dumps(body).encode('utf-8')
    else:
        response._content = b''
    response.encoding = 'utf-8'
    response.headers.update(headers or {})
    return response


def user_record(login: str = 'octocat') -> Dict[str, Any]:
    return {'login': login, 'avatar_url': f'https://avatars.example/{login}.png'}


def issue_record(issue_id: int, number: Optional[int] = None, state: str = 'open',
                 pull_request: bool = False, **overrides: Any) -> Dict[str, Any]:
    record = {
        'id': issue_id,
        'number': number if number is not None else issue_id,
        'title': f'Issue {issue_id}',
        'html_url': f'https://github.com/acme/widgets/issues/{issue_id}',
        'state': state,
        'created_at': '2024-01-01T00:00:00Z',
        'updated_at': '2024-01-02T00:00:00Z',
        'user': user_record(),
        'labels': [{'name': 'bug', 'color': 'd73a4a'}],
        'assignees': [user_record('hubot')],
    }
    if pull_request:
        record['pull_request'] = {'url': f'https://api.github.com/repos/acme/widgets/pulls/{issue_id}'}
    record.update(overrides)
    return record


def pull_record(pr_id: int, state: str = 'open', merged_at: Optional[str] = None,
                draft: bool = False, **overrides: Any) -> Dict[str, Any]:
    record = {
        'id': pr_id,
        'number': pr_id,
        'title': f'PR {pr_id}',
        'html_url': f'https://github.com/acme/widgets/pull/{pr_id}',
        'state': state,
        'created_at': '2024-02-01T00:00:00Z',
        'updated_at': '2024-02-03T00:00:00Z',
        'user': user_record(),
        'labels': [],
        'assignees': [],
        'draft': draft,
        'merged_at': merged_at,
    }
    record.update(overrides)
    return record


def branch_record(name: str, sha: str) -> Dict[str, Any]:
    return {
        'name': name,
        'commit': {'sha': sha, 'url': f'https://api.github.com/repos/acme/widgets/commits/{sha}'},
        'protected': False,
    }


def commit_record(sha: str, date: str) -> Dict[str, Any]:
    return {
        'sha': sha,
        'commit': {
            'author': {'name': 'Octo Cat', 'email': 'octo@example.com', 'date': date},
            'committer': {'name': 'Octo Cat', 'email': 'octo@example.com', 'date': date},
            'message': 'Update',
        },
        'author': user_record(),
        'committer': user_record(),
    }


def repo_record(repo_id: int, name: str) -> Dict[str, Any]:
    return {
        'id': repo_id,
        'name': name,
        'full_name': f'acme/{name}',
        'description': None,
        'html_url': f'https://github.com/acme/{name}',
        'private': False,
        'default_branch': 'main',
    }


def pages_of(items: List[Any], sizes: List[int]) -> List[requests.Response]:
    """Split ``items`` into consecutive page responses of the given sizes."""
    responses = []
    start = 0
    for size in sizes:
        responses.append(make_response(200, items[start:start + size]))
        start += size
    return responses


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session():
    """Mock requests.Session; script ``session.get.side_effect`` per test."""
    return Mock(spec=requests.Session)


@pytest.fixture
def config():
    return GitHubConfig(token='test-token', branch_lookup_workers=4)


@pytest.fixture
def tracker(clock):
    return RateLimitTracker(clock=clock.now)


@pytest.fixture
def adapter(config, session, tracker):
    return GitHubRESTAdapter(
        token=config.token,
        base_url=config.api_base_url,
        per_page=config.per_page,
        user_agent=config.user_agent,
        rate_limiter=tracker,
        session=session
    )


@pytest.fixture
def cache(config, clock):
    return TTLCache(ttl_seconds=config.cache_ttl_seconds, clock=clock.monotonic)


@pytest.fixture
def service(config, adapter, cache):
    return GitHubDashboardService(config, adapter=adapter, cache=cache)
