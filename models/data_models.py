"""Data models for the dashboard session and GitHub pull requests."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Session(BaseModel):
    """Client-held identity record stored in the session cookie.
    
    The server keeps no copy. A session without an access token is
    anonymous and does not authorize any GitHub calls.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)
    
    access_token: Optional[str] = None
    login: Optional[str] = None
    avatar_url: Optional[str] = None
    
    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)


class PullRequest(BaseModel):
    """Normalized open pull request as shown on the dashboard.
    
    Built fresh on every aggregation call from a GitHub GraphQL search
    node (see fetchers.github.normalize_pr_node). `url` is the unique key.
    Serializes with camelCase keys for the frontend.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)
    
    title: str
    url: str
    repo_name: str  # e.g., "facebook/react"
    author: str = "unknown"
    author_avatar: str = ""
    created_at: datetime
    updated_at: datetime
    status_state: str = "none"  # success | failure | pending | error | expected | none
    review_decision: str = ""  # APPROVED | CHANGES_REQUESTED | REVIEW_REQUIRED | ""
    is_draft: bool = False
    number: int
    branch: str = "unknown"
    
    @property
    def org(self) -> str:
        """Owner half of repo_name."""
        return self.repo_name.split("/", 1)[0]
