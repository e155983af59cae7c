"""Search, filter and sort helpers for the dashboard PR list.

The aggregator always returns PRs most recently updated first. These helpers
re-order and narrow that list for display without touching the records.
"""

from datetime import datetime, timezone
from typing import Literal, Optional

from models.data_models import PullRequest

SortMode = Literal["activity", "org"]
SortDirection = Literal["desc", "asc"]

ALL_ORGS = "all"


def list_organizations(prs: list[PullRequest]) -> list[str]:
    """Sorted unique repository owners across the PR list."""
    return sorted({pr.org for pr in prs})


def filter_prs(
    prs: list[PullRequest],
    org: str = ALL_ORGS,
    search: str = ""
) -> list[PullRequest]:
    """
    Narrow PRs by organization and free-text search.

    Args:
        prs: PRs to filter
        org: Owner to keep, or "all"
        search: Case-insensitive substring matched against title, repo and author

    Returns:
        Filtered list in the input order
    """
    filtered = prs

    if org and org != ALL_ORGS:
        prefix = f"{org}/"
        filtered = [pr for pr in filtered if pr.repo_name.startswith(prefix)]

    query = search.strip().lower()
    if query:
        filtered = [
            pr for pr in filtered
            if query in pr.title.lower()
            or query in pr.repo_name.lower()
            or query in pr.author.lower()
        ]

    return filtered


def sort_prs(
    prs: list[PullRequest],
    mode: SortMode = "activity",
    direction: SortDirection = "desc"
) -> list[PullRequest]:
    """
    Sort PRs for display.

    "activity" orders by last update in the requested direction. "org" groups
    by owner alphabetically and shows the most recently updated PR first
    within each owner; direction does not apply to it.
    """
    if mode == "org":
        # Stable sorts: secondary key first
        by_recent = sorted(prs, key=lambda pr: pr.updated_at, reverse=True)
        return sorted(by_recent, key=lambda pr: pr.org)

    return sorted(prs, key=lambda pr: pr.updated_at, reverse=(direction == "desc"))


def time_ago(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """Short relative age such as "5m ago" or "3d ago"."""
    now = now or datetime.now(timezone.utc)
    seconds = int((now - timestamp).total_seconds())

    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"
