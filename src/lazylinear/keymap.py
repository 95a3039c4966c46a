from __future__ import annotations

from lazylinear.state import InputMode

# Keys use Textual's key names.
GLOBAL_KEYS: dict[str, str] = {
    "ctrl+c": "quit",
}

KEYMAP: dict[InputMode, dict[str, str]] = {
    InputMode.NORMAL: {
        "down": "cursor_down",
        "j": "cursor_down",
        "up": "cursor_up",
        "k": "cursor_up",
        "enter": "select_issue",
        "r": "refresh",
        "h": "toggle_help",
        "question_mark": "toggle_help",
        "escape": "close_help",
        "a": "toggle_assigned",
        "slash": "open_search",
        "left_square_bracket": "prev_view",
        "right_square_bracket": "next_view",
        "left_curly_bracket": "prev_team",
        "right_curly_bracket": "next_team",
        "comma": "copy_url",
        "full_stop": "copy_branch",
        "q": "quit",
        "ctrl+q": "quit",
    },
    InputMode.SEARCH: {
        "enter": "apply_search",
        "escape": "cancel_search",
        "ctrl+q": "cancel_search",
        "backspace": "search_backspace",
    },
}

HELP_LINES: tuple[tuple[str, str], ...] = (
    ("Navigation:", ""),
    ("  j / ↓", "Move down"),
    ("  k / ↑", "Move up"),
    ("  [ / ]", "Switch view (All/In Review/In Progress/Blocked/Todo/Backlog)"),
    ("  { / }", "Switch team"),
    ("", ""),
    ("Actions:", ""),
    ("  Enter", "Select issue to view details"),
    ("  r", "Refresh issues"),
    ("  a", "Toggle filter by assigned to me"),
    ("  /", "Search issues (Enter to apply, Esc/Ctrl+Q to cancel)"),
    ("  ,", "Copy issue URL to clipboard"),
    ("  .", "Copy git branch name to clipboard"),
    ("  h / ?", "Toggle this help"),
    ("  q / Ctrl+C", "Quit"),
)


def resolve(mode: InputMode, key: str) -> str | None:
    if key in GLOBAL_KEYS:
        return GLOBAL_KEYS[key]
    return KEYMAP[mode].get(key)
