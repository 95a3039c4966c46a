from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from lazylinear.filters import STATUS_VIEWS, derive_issues
from lazylinear.models import Issue, Team, Viewer


class InputMode(Enum):
    NORMAL = "normal"
    SEARCH = "search"


@dataclass
class ViewState:
    """Everything the screen shows.

    ``issues`` is always ``all_issues`` run through the active filters, and
    ``selected_index`` is either ``None`` or a valid index into ``issues``.
    """

    all_issues: List[Issue] = field(default_factory=list)
    issues: List[Issue] = field(default_factory=list)
    cursor: int = 0
    scroll_offset: int = 0
    selected_index: Optional[int] = None
    view_index: int = 0
    assigned_to_me_only: bool = False
    search_text: str = ""
    search_buffer: str = ""
    teams: List[Team] = field(default_factory=list)
    team_index: int = 0
    viewer: Optional[Viewer] = None
    mode: InputMode = InputMode.NORMAL
    help_visible: bool = False

    @property
    def status_view(self) -> str:
        return STATUS_VIEWS[self.view_index]

    @property
    def current_team(self) -> Team | None:
        if not self.teams:
            return None
        return self.teams[self.team_index]

    @property
    def viewer_id(self) -> str | None:
        return self.viewer.id if self.viewer else None

    @property
    def selected_issue(self) -> Issue | None:
        if self.selected_index is None:
            return None
        return self.issues[self.selected_index]


def rederive(state: ViewState) -> None:
    state.issues = derive_issues(
        state.all_issues,
        state.status_view,
        state.assigned_to_me_only,
        state.viewer_id,
        state.search_text,
    )
    state.selected_index = None
    last = max(0, len(state.issues) - 1)
    state.cursor = max(0, min(state.cursor, last))
    state.scroll_offset = max(0, min(state.scroll_offset, state.cursor))


def replace_issues(state: ViewState, issues: List[Issue]) -> None:
    state.all_issues = list(issues)
    rederive(state)


def move_cursor(state: ViewState, delta: int, visible_rows: int) -> None:
    if state.mode is not InputMode.NORMAL or not state.issues:
        return
    state.cursor = max(0, min(state.cursor + delta, len(state.issues) - 1))
    rows = max(1, visible_rows)
    if state.cursor < state.scroll_offset:
        state.scroll_offset = state.cursor
    elif state.cursor >= state.scroll_offset + rows:
        state.scroll_offset = state.cursor - rows + 1


def confirm_select(state: ViewState) -> None:
    if state.mode is not InputMode.NORMAL:
        return
    if 0 <= state.cursor < len(state.issues):
        state.selected_index = state.cursor


def toggle_help(state: ViewState) -> None:
    state.help_visible = not state.help_visible


def close_help(state: ViewState) -> None:
    state.help_visible = False


def toggle_assigned(state: ViewState) -> None:
    if state.mode is not InputMode.NORMAL:
        return
    state.assigned_to_me_only = not state.assigned_to_me_only
    rederive(state)


def open_search(state: ViewState) -> None:
    if state.mode is not InputMode.NORMAL:
        return
    state.mode = InputMode.SEARCH
    state.search_buffer = state.search_text


def search_insert(state: ViewState, text: str) -> None:
    if state.mode is InputMode.SEARCH:
        state.search_buffer += text


def search_backspace(state: ViewState) -> None:
    if state.mode is InputMode.SEARCH:
        state.search_buffer = state.search_buffer[:-1]


def apply_search(state: ViewState) -> None:
    if state.mode is not InputMode.SEARCH:
        return
    state.search_text = state.search_buffer.strip()
    state.search_buffer = ""
    state.mode = InputMode.NORMAL
    rederive(state)


def cancel_search(state: ViewState) -> None:
    if state.mode is not InputMode.SEARCH:
        return
    state.search_buffer = ""
    state.search_text = ""
    state.mode = InputMode.NORMAL
    rederive(state)


def cycle_view(state: ViewState, delta: int) -> None:
    if state.mode is not InputMode.NORMAL:
        return
    state.view_index = (state.view_index + delta) % len(STATUS_VIEWS)
    rederive(state)


def cycle_team(state: ViewState, delta: int) -> bool:
    """Move the team cursor; the caller refetches when this returns True."""
    if state.mode is not InputMode.NORMAL or not state.teams:
        return False
    state.team_index = (state.team_index + delta) % len(state.teams)
    return True
