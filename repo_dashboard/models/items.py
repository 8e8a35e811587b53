# repo_dashboard/models/items.py
"""
Immutable data models served by the dashboard.

Issues, pull requests and branches share one set of display fields
(NormalizedItem) and differ only in the kind-specific fields each variant
adds. All of them are frozen so a cached result can be handed to any
number of callers without copying.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from repo_dashboard.models.payloads import (
    GitHubLabelPayload,
    GitHubRepositoryPayload,
    GitHubUserPayload,
)

UNKNOWN_AUTHOR = 'unknown'


class ItemType(str, Enum):
    ISSUE = 'issue'
    PR = 'pr'
    BRANCH = 'branch'


class ItemState(str, Enum):
    OPEN = 'open'
    CLOSED = 'closed'
    MERGED = 'merged'


@dataclass(frozen=True)
class Repository:
    """A repository of the organization, keyed by its GitHub id."""
    id: int
    name: str
    full_name: str             # e.g., "octo-org/octo-repo"
    description: Optional[str]
    url: str
    is_private: bool
    default_branch: str

    @classmethod
    def from_payload(cls, payload: GitHubRepositoryPayload) -> 'Repository':
        return cls(
            id=payload.id,
            name=payload.name,
            full_name=payload.full_name,
            description=payload.description,
            url=payload.html_url,
            is_private=payload.private,
            default_branch=payload.default_branch
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'id': self.id,
            'name': self.name,
            'fullName': self.full_name,
            'description': self.description,
            'url': self.url,
            'isPrivate': self.is_private,
            'defaultBranch': self.default_branch
        }


@dataclass(frozen=True)
class Label:
    name: str
    color: str                 # hex, no leading '#'

    @classmethod
    def from_payload(cls, payload: GitHubLabelPayload) -> 'Label':
        return cls(name=payload.name, color=payload.color.lstrip('#'))

    def to_dict(self) -> dict:
        return {'name': self.name, 'color': self.color}


@dataclass(frozen=True)
class Assignee:
    login: str
    avatar_url: str

    @classmethod
    def from_payload(cls, payload: GitHubUserPayload) -> 'Assignee':
        return cls(login=payload.login, avatar_url=payload.avatar_url)

    def to_dict(self) -> dict:
        return {'login': self.login, 'avatarUrl': self.avatar_url}


@dataclass(frozen=True)
class NormalizedItem:
    """
    Fields shared by every dashboard item.

    ``id`` is ``{type}-{owner}-{repo}-{upstream id or branch name}``, which
    keeps it unique within a result and stable across fetches.
    """
    id: str
    repository: str            # repo name
    repository_full_name: str  # "owner/repo"
    title: str
    author: str
    author_avatar_url: Optional[str]
    labels: Tuple[Label, ...]
    assignees: Tuple[Assignee, ...]
    created_at: str            # ISO-8601, '' when unknown
    updated_at: str
    url: str

    type = None  # set by each variant

    def to_dict(self) -> dict:
        """Convert to the camelCase dictionary the dashboard frontend reads."""
        return {
            'id': self.id,
            'type': self.type.value,
            'repository': self.repository,
            'repositoryFullName': self.repository_full_name,
            'title': self.title,
            'author': self.author,
            'authorAvatarUrl': self.author_avatar_url,
            'labels': [label.to_dict() for label in self.labels],
            'assignees': [assignee.to_dict() for assignee in self.assignees],
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
            'url': self.url
        }


@dataclass(frozen=True)
class IssueItem(NormalizedItem):
    state: ItemState = ItemState.OPEN
    number: int = 0

    type = ItemType.ISSUE

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['state'] = self.state.value
        data['number'] = self.number
        return data


@dataclass(frozen=True)
class PullRequestItem(NormalizedItem):
    state: ItemState = ItemState.OPEN
    number: int = 0
    is_draft: bool = False

    type = ItemType.PR

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['state'] = self.state.value
        data['number'] = self.number
        data['isDraft'] = self.is_draft
        return data


@dataclass(frozen=True)
class BranchItem(NormalizedItem):
    """A branch; author, labels and assignees are always empty."""

    type = ItemType.BRANCH
