# repo_dashboard/models/payloads.py
"""
Decoded shapes of the GitHub REST responses we consume.

Each payload is checked once, here, as it crosses into our code. Anything
missing or of the wrong type raises DecodeError instead of surfacing later
as a KeyError deep inside a normalizer.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Type, Union

from repo_dashboard.adapters.errors import DecodeError

_MISSING = object()


def _field(record: Any, key: str, expected: Union[Type, Tuple[Type, ...]], kind: str,
           optional: bool = False) -> Any:
    if not isinstance(record, dict):
        raise DecodeError(f"Expected a JSON object for {kind}, got {type(record).__name__}")
    value = record.get(key, _MISSING)
    if value is _MISSING or value is None:
        if optional:
            return None
        raise DecodeError(f"{kind} is missing required field '{key}'")
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and bool not in _as_tuple(expected):
        raise DecodeError(f"{kind} field '{key}' has invalid type bool")
    if not isinstance(value, expected):
        raise DecodeError(f"{kind} field '{key}' has invalid type {type(value).__name__}")
    return value


def _as_tuple(expected: Union[Type, Tuple[Type, ...]]) -> Tuple[Type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)


@dataclass(frozen=True)
class GitHubUserPayload:
    login: str
    avatar_url: str

    @classmethod
    def from_response(cls, node: Any) -> 'GitHubUserPayload':
        return cls(
            login=_field(node, 'login', str, 'user'),
            avatar_url=_field(node, 'avatar_url', str, 'user', optional=True) or ''
        )


@dataclass(frozen=True)
class GitHubLabelPayload:
    name: str
    color: str

    @classmethod
    def from_response(cls, node: Any) -> 'GitHubLabelPayload':
        return cls(
            name=_field(node, 'name', str, 'label'),
            color=_field(node, 'color', str, 'label', optional=True) or ''
        )


def _user_or_none(node: dict, key: str, kind: str) -> Optional[GitHubUserPayload]:
    user = _field(node, key, dict, kind, optional=True)
    return GitHubUserPayload.from_response(user) if user is not None else None


def _labels(node: dict, kind: str) -> Tuple[GitHubLabelPayload, ...]:
    labels: List[Any] = _field(node, 'labels', list, kind, optional=True) or []
    return tuple(GitHubLabelPayload.from_response(label) for label in labels)


def _assignees(node: dict, kind: str) -> Tuple[GitHubUserPayload, ...]:
    assignees: List[Any] = _field(node, 'assignees', list, kind, optional=True) or []
    return tuple(GitHubUserPayload.from_response(user) for user in assignees)


@dataclass(frozen=True)
class GitHubRepositoryPayload:
    id: int
    name: str
    full_name: str
    description: Optional[str]
    html_url: str
    private: bool
    default_branch: str

    @classmethod
    def from_response(cls, node: Any) -> 'GitHubRepositoryPayload':
        kind = 'repository'
        return cls(
            id=_field(node, 'id', int, kind),
            name=_field(node, 'name', str, kind),
            full_name=_field(node, 'full_name', str, kind),
            description=_field(node, 'description', str, kind, optional=True),
            html_url=_field(node, 'html_url', str, kind),
            private=bool(_field(node, 'private', bool, kind, optional=True)),
            default_branch=_field(node, 'default_branch', str, kind, optional=True) or ''
        )


@dataclass(frozen=True)
class GitHubIssuePayload:
    id: int
    number: int
    title: str
    html_url: str
    state: str
    created_at: str
    updated_at: str
    user: Optional[GitHubUserPayload]
    labels: Tuple[GitHubLabelPayload, ...]
    assignees: Tuple[GitHubUserPayload, ...]
    # The issues endpoint lists pull requests too, marked by this key
    is_pull_request: bool

    @classmethod
    def from_response(cls, node: Any) -> 'GitHubIssuePayload':
        kind = 'issue'
        return cls(
            id=_field(node, 'id', int, kind),
            number=_field(node, 'number', int, kind),
            title=_field(node, 'title', str, kind),
            html_url=_field(node, 'html_url', str, kind),
            state=_field(node, 'state', str, kind),
            created_at=_field(node, 'created_at', str, kind),
            updated_at=_field(node, 'updated_at', str, kind),
            user=_user_or_none(node, 'user', kind),
            labels=_labels(node, kind),
            assignees=_assignees(node, kind),
            is_pull_request=node.get('pull_request') is not None
        )


@dataclass(frozen=True)
class GitHubPullRequestPayload:
    id: int
    number: int
    title: str
    html_url: str
    state: str
    created_at: str
    updated_at: str
    user: Optional[GitHubUserPayload]
    labels: Tuple[GitHubLabelPayload, ...]
    assignees: Tuple[GitHubUserPayload, ...]
    draft: bool
    merged_at: Optional[str]

    @classmethod
    def from_response(cls, node: Any) -> 'GitHubPullRequestPayload':
        kind = 'pull request'
        return cls(
            id=_field(node, 'id', int, kind),
            number=_field(node, 'number', int, kind),
            title=_field(node, 'title', str, kind),
            html_url=_field(node, 'html_url', str, kind),
            state=_field(node, 'state', str, kind),
            created_at=_field(node, 'created_at', str, kind),
            updated_at=_field(node, 'updated_at', str, kind),
            user=_user_or_none(node, 'user', kind),
            labels=_labels(node, kind),
            assignees=_assignees(node, kind),
            draft=bool(_field(node, 'draft', bool, kind, optional=True)),
            merged_at=_field(node, 'merged_at', str, kind, optional=True)
        )


@dataclass(frozen=True)
class GitHubBranchPayload:
    name: str
    commit_sha: str
    protected: bool

    @classmethod
    def from_response(cls, node: Any) -> 'GitHubBranchPayload':
        kind = 'branch'
        commit = _field(node, 'commit', dict, kind)
        return cls(
            name=_field(node, 'name', str, kind),
            commit_sha=_field(commit, 'sha', str, 'branch commit'),
            protected=bool(_field(node, 'protected', bool, kind, optional=True))
        )


@dataclass(frozen=True)
class GitHubCommitPayload:
    sha: str
    author_date: Optional[str]
    committer_date: Optional[str]

    @classmethod
    def from_response(cls, node: Any) -> 'GitHubCommitPayload':
        kind = 'commit'
        detail = _field(node, 'commit', dict, kind)
        author = _field(detail, 'author', dict, 'commit detail', optional=True) or {}
        committer = _field(detail, 'committer', dict, 'commit detail', optional=True) or {}
        return cls(
            sha=_field(node, 'sha', str, kind),
            author_date=author.get('date') or None,
            committer_date=committer.get('date') or None
        )

    @property
    def activity_date(self) -> Optional[str]:
        """Date of the last change on the commit: committer date, else author date."""
        return self.committer_date or self.author_date
