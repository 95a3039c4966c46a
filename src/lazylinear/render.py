"""Screen geometry and painting.

Everything here is a pure function of a :class:`ViewState` and the terminal
size: calling it twice with the same inputs gives the same output and never
touches the state, so resizes can re-render freely.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text

from lazylinear.filters import initials
from lazylinear.keymap import HELP_LINES
from lazylinear.state import InputMode, ViewState

TEAM_BAR_HEIGHT = 2
SEARCH_BAR_HEIGHT = 2
STATUS_BAR_HEIGHT = 1
LIST_WIDTH_RATIO = 0.4
PANE_BORDER = 2

TEAM_BAR_TITLE = "Teams ({/} to switch)"
DETAIL_TITLE = "Issue Details"
SEARCH_TITLE = "Search (Enter to apply, Esc/Ctrl+Q to cancel)"
STATUS_HINTS = (
    "j/k/↑/↓: navigate | [/]: switch view | {/}: switch team | Enter: select | r: refresh | "
    "/: search | a: my issues | ,/.: copy url/branch | h: help | q: quit"
)
DETAIL_PROMPT = "Select an issue to view details\nPress 'h' for help"
CONFIG_HINT = "Set your Linear API key in ~/.lazylinear/config.json or LINEAR_API_KEY"


@dataclass(frozen=True)
class Region:
    x: int
    y: int
    width: int
    height: int

    @property
    def visible(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class Layout:
    team_bar: Region
    issue_list: Region
    detail: Region
    search: Region
    status: Region

    @property
    def body(self) -> Region:
        return Region(0, self.issue_list.y, self.issue_list.width + self.detail.width, self.issue_list.height)

    @property
    def list_rows(self) -> int:
        return max(1, self.issue_list.height - PANE_BORDER)

    @property
    def list_columns(self) -> int:
        return max(1, self.issue_list.width - PANE_BORDER)


def compute_layout(width: int, height: int, *, search_active: bool) -> Layout:
    width = max(0, width)
    height = max(0, height)
    team_h = min(TEAM_BAR_HEIGHT, height)
    status_h = min(STATUS_BAR_HEIGHT, max(0, height - team_h))
    search_h = min(SEARCH_BAR_HEIGHT, max(0, height - team_h - status_h)) if search_active else 0
    body_top = team_h
    body_h = max(0, height - team_h - status_h - search_h)
    list_w = int(LIST_WIDTH_RATIO * width)
    return Layout(
        team_bar=Region(0, 0, width, team_h),
        issue_list=Region(0, body_top, list_w, body_h),
        detail=Region(list_w, body_top, width - list_w, body_h),
        search=Region(0, body_top + body_h, width, search_h),
        status=Region(0, height - status_h, width, status_h),
    )


def effective_offset(state: ViewState, rows: int) -> int:
    """Scroll origin that keeps the cursor inside a window of ``rows`` lines."""
    rows = max(1, rows)
    offset = max(0, min(state.scroll_offset, max(0, len(state.issues) - 1)))
    if state.cursor < offset:
        offset = state.cursor
    elif state.cursor >= offset + rows:
        offset = state.cursor - rows + 1
    return max(0, offset)


def team_bar_text(state: ViewState) -> Text:
    if not state.teams:
        return Text("All")
    text = Text()
    for index, team in enumerate(state.teams):
        if index == state.team_index:
            text.append(f"[ {team.name} ]", style="bold green")
        else:
            text.append(team.name)
        text.append(" ")
    text.rstrip()
    return text


def list_title(state: ViewState) -> str:
    title = state.status_view
    if state.assigned_to_me_only:
        title += " (My Issues)"
    if state.search_text:
        title += f" [{state.search_text}]"
    return title


def issue_list_text(state: ViewState, rows: int, columns: int | None = None) -> Text:
    if not state.issues:
        return Text("No issues", style="dim")
    offset = effective_offset(state, rows)
    lines: list[Text] = []
    for index in range(offset, min(len(state.issues), offset + max(1, rows))):
        issue = state.issues[index]
        name = issue.assignee.name if issue.assignee else None
        line = Text.assemble(
            (issue.identifier, "green"),
            " ",
            (initials(name), "yellow"),
            " ",
            issue.title,
        )
        if columns is not None:
            line.truncate(max(1, columns), overflow="ellipsis")
        if index == state.cursor:
            line.stylize("black on green")
        lines.append(line)
    return Text("\n").join(lines)


def help_text() -> str:
    lines = ["LazyLinear Help", "===============", ""]
    for keys, description in HELP_LINES:
        if description:
            lines.append(f"{keys:<14}: {description}")
        else:
            lines.append(keys)
    lines.extend(["", "Configuration:", f"  {CONFIG_HINT}"])
    return "\n".join(lines)


def detail_text(state: ViewState) -> str:
    if state.help_visible:
        return help_text()
    issue = state.selected_issue
    if issue is None:
        return DETAIL_PROMPT
    lines = [
        f"ID: {issue.identifier or issue.id}",
        f"Title: {issue.title}",
        f"State: {issue.status}",
    ]
    if issue.assignee is not None:
        lines.append(f"Assignee: {issue.assignee.name}")
    if issue.url:
        lines.append(f"URL: {issue.url}")
    if issue.branch_name:
        lines.append(f"Branch: {issue.branch_name}")
    lines.extend(["", "Description:", issue.description])
    if issue.comments:
        lines.extend(["", "Comments:"])
        for comment in issue.comments:
            lines.append(f"- {comment.author} ({comment.created_at}): {comment.body}")
    return "\n".join(lines)


def search_text(state: ViewState) -> str:
    if state.mode is not InputMode.SEARCH:
        return ""
    return f"{state.search_buffer}_"


def status_text(state: ViewState, message: str | None = None) -> str:
    status = message or STATUS_HINTS
    if state.assigned_to_me_only:
        status = f"[My Issues] {status}"
    if state.search_text:
        status = f"[Search: {state.search_text}] {status}"
    return status


@dataclass(frozen=True)
class Frame:
    layout: Layout
    team_bar: Text
    list_title: str
    issue_list: Text
    detail: str
    search: str
    status: str


def render_frame(state: ViewState, width: int, height: int, message: str | None = None) -> Frame:
    layout = compute_layout(
        width,
        height,
        search_active=state.mode is InputMode.SEARCH,
    )
    return Frame(
        layout=layout,
        team_bar=team_bar_text(state),
        list_title=list_title(state),
        issue_list=issue_list_text(state, layout.list_rows, layout.list_columns),
        detail=detail_text(state),
        search=search_text(state),
        status=status_text(state, message),
    )
