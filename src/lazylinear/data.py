from __future__ import annotations

import logging
from typing import List

from lazylinear.config import AppConfig
from lazylinear.filters import sort_by_status
from lazylinear.linear import LinearApiError, LinearClient
from lazylinear.models import Issue
from lazylinear.state import ViewState, replace_issues

logger = logging.getLogger(__name__)


class DataManager:
    def __init__(self, config: AppConfig | None = None, client: LinearClient | None = None):
        self.config = config or AppConfig.from_env()
        self.linear = client or LinearClient(
            api_key=self.config.api_key,
            timeout=self.config.request_timeout_seconds,
        )
        self.last_fetch_error: str | None = None
        self.is_initialized = False

    async def initialize(self, state: ViewState) -> None:
        """Load teams, the first team's issues and the viewer into ``state``."""
        try:
            state.teams = await self.linear.get_teams()
        except LinearApiError as e:
            logger.warning("teams fetch failed: %s", e)
            state.teams = []
        state.team_index = 0
        await self.load_issues(state)
        try:
            state.viewer = await self.linear.get_viewer()
        except LinearApiError as e:
            logger.warning("viewer fetch failed: %s", e)
            state.viewer = None
        self.is_initialized = True

    async def fetch_issues(self, team_id: str | None) -> List[Issue]:
        issues = await self.linear.get_issues(team_id)
        return sort_by_status(issues)

    async def load_issues(self, state: ViewState) -> None:
        """Refetch for the current team; failures become a placeholder issue."""
        team = state.current_team
        try:
            issues = await self.fetch_issues(team.id if team else None)
            self.last_fetch_error = None
        except LinearApiError as e:
            logger.warning("issues fetch failed (team=%s): %s", team.key if team else "all", e)
            self.last_fetch_error = str(e)
            issues = [Issue.placeholder(str(e))]
        replace_issues(state, issues)

    def fetch_status_summary(self) -> str:
        if self.last_fetch_error:
            return f"failed: {self.last_fetch_error}"
        if self.is_initialized:
            return "ok"
        return "idle"
