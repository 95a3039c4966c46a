from __future__ import annotations

from typing import Iterable, Sequence

from lazylinear.models import Issue

ALL_VIEW = "All"
TRACKED_STATUSES: tuple[str, ...] = ("In Review", "In Progress", "Blocked", "Todo", "Backlog")
STATUS_VIEWS: tuple[str, ...] = (ALL_VIEW, *TRACKED_STATUSES)
STATUS_RANK: dict[str, int] = {status: rank for rank, status in enumerate(TRACKED_STATUSES)}
UNRANKED = 999

NO_INITIALS = "--"


def status_rank(status: str) -> int:
    return STATUS_RANK.get(status, UNRANKED)


def sort_by_status(issues: Iterable[Issue]) -> list[Issue]:
    """Group issues in pipeline order, keeping fetch order within a status."""
    return sorted(issues, key=lambda issue: status_rank(issue.status))


def derive_issues(
    all_issues: Sequence[Issue],
    status_view: str,
    assigned_to_me_only: bool,
    viewer_id: str | None,
    search_text: str,
) -> list[Issue]:
    needle = search_text.lower()
    derived: list[Issue] = []
    for issue in all_issues:
        if assigned_to_me_only and (issue.assignee is None or issue.assignee.id != viewer_id):
            continue
        if status_view != ALL_VIEW and issue.status != status_view:
            continue
        if needle and needle not in issue.title.lower():
            continue
        derived.append(issue)
    return derived


def initials(name: str | None) -> str:
    parts = (name or "").split()
    if not parts:
        return NO_INITIALS
    if len(parts) >= 2:
        return parts[0][0] + parts[1][0]
    return parts[0][:2]
