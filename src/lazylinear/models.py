from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class User:
    id: str
    name: str


@dataclass(frozen=True)
class Comment:
    body: str
    created_at: str
    author: str = ""


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    key: str = ""


@dataclass(frozen=True)
class Viewer:
    id: str
    name: str


@dataclass(frozen=True)
class Issue:
    id: str
    identifier: str
    title: str
    status: str = ""
    description: str = ""
    url: str = ""
    branch_name: str = ""
    assignee: Optional[User] = None
    comments: tuple[Comment, ...] = field(default_factory=tuple)

    @classmethod
    def placeholder(cls, message: str) -> "Issue":
        """Stand-in shown in the list when issues could not be fetched."""
        return cls(id="", identifier="", title=f"Error loading issues: {message}")
