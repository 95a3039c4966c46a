import inspect
import logging

from dotenv import load_dotenv
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.css.query import NoMatches
from textual.widget import Widget
from textual.widgets import Static

from lazylinear import state as transitions
from lazylinear.clipboard import Clipboard, ClipboardError, SystemClipboard
from lazylinear.config import AppConfig
from lazylinear.data import DataManager
from lazylinear.keymap import resolve
from lazylinear.render import (
    DETAIL_TITLE,
    SEARCH_TITLE,
    TEAM_BAR_TITLE,
    Frame,
    Region,
    compute_layout,
    render_frame,
)
from lazylinear.state import InputMode, ViewState

logger = logging.getLogger(__name__)


class LazyLinear(App):
    CSS_PATH = "lazylinear.tcss"
    TITLE = "LazyLinear"
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        config: AppConfig | None = None,
        data_manager: DataManager | None = None,
        clipboard: Clipboard | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.config = config or AppConfig.from_env()
        self.data_manager = data_manager or DataManager(self.config)
        self.clipboard_writer = clipboard or SystemClipboard()
        self.state = ViewState()
        self.status_message: str | None = None

    def compose(self) -> ComposeResult:
        yield Static("", id="team-bar", markup=False)
        with Horizontal(id="body"):
            yield Static("", id="issue-list", markup=False)
            yield Static("", id="detail", markup=False)
        yield Static("", id="search-bar", markup=False)
        yield Static("", id="status-bar", markup=False)

    async def on_mount(self) -> None:
        self.status_message = "Loading issues..."
        self.refresh_views()
        await self.data_manager.initialize(self.state)
        self.status_message = self._fetch_failure_message()
        self.refresh_views()

    def on_resize(self, event: events.Resize) -> None:
        self.refresh_views()

    async def on_key(self, event: events.Key) -> None:
        if await self.dispatch_key(event.key, event.character):
            event.stop()

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        # Built-in quit bindings go through the key map instead, so ctrl+q
        # can cancel a search.
        if action == "help_quit":
            return False
        if action == "quit" and self.state.mode is InputMode.SEARCH:
            return False
        return True

    async def dispatch_key(self, key: str, character: str | None = None) -> bool:
        name = resolve(self.state.mode, key)
        if name is not None:
            await self.run_transition(name)
            return True
        if self.state.mode is InputMode.SEARCH:
            if character and character.isprintable():
                transitions.search_insert(self.state, character)
                self.refresh_views()
            # The search box owns the keyboard while it is open.
            return True
        return False

    async def run_transition(self, name: str) -> None:
        action = getattr(self, f"action_{name}")
        self.status_message = None
        result = action()
        if inspect.isawaitable(result):
            await result
        self.refresh_views()

    def refresh_views(self) -> None:
        width, height = self.size
        self._paint(render_frame(self.state, width, height, self.status_message))

    def _paint(self, frame: Frame) -> None:
        try:
            team_bar = self.query_one("#team-bar", Static)
            body = self.query_one("#body", Horizontal)
            issue_list = self.query_one("#issue-list", Static)
            detail = self.query_one("#detail", Static)
            search_bar = self.query_one("#search-bar", Static)
            status_bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        layout = frame.layout
        self._place(team_bar, layout.team_bar)
        self._place(body, layout.body)
        self._place(issue_list, layout.issue_list)
        self._place(detail, layout.detail)
        self._place(search_bar, layout.search)
        self._place(status_bar, layout.status)

        team_bar.border_title = TEAM_BAR_TITLE
        team_bar.update(frame.team_bar)
        issue_list.border_title = frame.list_title
        issue_list.update(frame.issue_list)
        detail.border_title = DETAIL_TITLE
        detail.update(frame.detail)
        search_bar.border_title = SEARCH_TITLE
        search_bar.update(frame.search)
        status_bar.update(frame.status)

    @staticmethod
    def _place(widget: Widget, region: Region) -> None:
        widget.display = region.visible
        widget.styles.width = region.width
        widget.styles.height = region.height

    def _list_rows(self) -> int:
        width, height = self.size
        layout = compute_layout(
            width,
            height,
            search_active=self.state.mode is InputMode.SEARCH,
        )
        return layout.list_rows

    def action_cursor_down(self) -> None:
        transitions.move_cursor(self.state, 1, self._list_rows())

    def action_cursor_up(self) -> None:
        transitions.move_cursor(self.state, -1, self._list_rows())

    def action_select_issue(self) -> None:
        transitions.confirm_select(self.state)

    async def action_refresh(self) -> None:
        await self.data_manager.load_issues(self.state)
        self.status_message = self._fetch_failure_message()

    def action_toggle_help(self) -> None:
        transitions.toggle_help(self.state)

    def action_close_help(self) -> None:
        transitions.close_help(self.state)

    def action_toggle_assigned(self) -> None:
        transitions.toggle_assigned(self.state)

    def action_open_search(self) -> None:
        transitions.open_search(self.state)

    def action_search_backspace(self) -> None:
        transitions.search_backspace(self.state)

    def action_apply_search(self) -> None:
        transitions.apply_search(self.state)

    def action_cancel_search(self) -> None:
        transitions.cancel_search(self.state)

    def action_prev_view(self) -> None:
        transitions.cycle_view(self.state, -1)

    def action_next_view(self) -> None:
        transitions.cycle_view(self.state, 1)

    async def action_prev_team(self) -> None:
        if transitions.cycle_team(self.state, -1):
            await self.action_refresh()

    async def action_next_team(self) -> None:
        if transitions.cycle_team(self.state, 1):
            await self.action_refresh()

    def action_copy_url(self) -> None:
        ok, message = self._copy_selected("url", "URL")
        self._publish_action_result(ok, message)

    def action_copy_branch(self) -> None:
        ok, message = self._copy_selected("branch_name", "branch name")
        self._publish_action_result(ok, message)

    async def action_quit(self) -> None:
        self.exit()

    def _copy_selected(self, field_name: str, label: str) -> tuple[bool, str]:
        if self.state.mode is not InputMode.NORMAL:
            return False, "Finish the search first"
        issue = self.state.selected_issue
        if issue is None:
            return False, "No issue selected"
        value = getattr(issue, field_name)
        if not value:
            return False, f"{issue.identifier or 'Issue'} has no {label}"
        try:
            self.clipboard_writer.copy(value)
        except ClipboardError as e:
            logger.warning("copy %s failed: %s", label, e)
            return False, f"Copy failed: {e}"
        return True, f"Copied {label}: {value}"

    def _fetch_failure_message(self) -> str | None:
        error = self.data_manager.last_fetch_error
        if error:
            return f"Fetch failed: {error} (press r to retry)"
        return None

    def _publish_action_result(self, ok: bool, message: str) -> None:
        self.status_message = message
        self._notify(message, severity="information" if ok else "error")

    def _notify(self, message: str, severity: str = "information") -> None:
        try:
            self.notify(message, severity=severity)
        except Exception as e:
            logger.debug("notification not shown: %s", e)


def run() -> None:
    load_dotenv()
    app = LazyLinear()
    app.run()


if __name__ == "__main__":
    run()
