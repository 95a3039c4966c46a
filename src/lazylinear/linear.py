from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from lazylinear.filters import TRACKED_STATUSES
from lazylinear.models import Comment, Issue, Team, User, Viewer

LINEAR_API_URL = "https://api.linear.app/graphql"

logger = logging.getLogger(__name__)

_ISSUE_FIELDS = """
        nodes {
          id
          identifier
          title
          description
          url
          branchName
          state {
            name
          }
          assignee {
            id
            name
          }
          comments {
            nodes {
              body
              createdAt
              user {
                name
              }
            }
          }
        }
"""


@dataclass(frozen=True)
class LinearApiError(Exception):
    message: str
    code: str | None = None
    type: str | None = None

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.append(f"code={self.code}")
        if self.type:
            parts.append(f"type={self.type}")
        return " | ".join(parts)


class LinearClient:
    def __init__(self, api_key: Optional[str] = None, timeout: float = 30.0, url: str = LINEAR_API_URL):
        self.api_key = api_key or ""
        self.timeout = timeout
        self.url = url
        self.headers = {"Content-Type": "application/json"}
        # Without a key the request still goes out; the service decides.
        if self.api_key:
            self.headers["Authorization"] = self.api_key

    async def _query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.url,
                    json={"query": query, "variables": variables or {}},
                    headers=self.headers,
                )
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as e:
            raise LinearApiError(
                message=f"HTTP {e.response.status_code} from Linear API",
                code=str(e.response.status_code),
            ) from e
        except httpx.HTTPError as e:
            raise LinearApiError(message=str(e) or type(e).__name__, code="transport") from e
        except ValueError as e:
            raise LinearApiError(message=f"invalid JSON response: {e}", code="decode") from e

        if not isinstance(result, dict):
            raise LinearApiError(message="unexpected response shape", code="decode")
        errors = result.get("errors")
        if errors:
            first_error = errors[0] if isinstance(errors, list) else errors
            if not isinstance(first_error, dict):
                first_error = {"message": str(first_error)}
            extensions = first_error.get("extensions")
            if not isinstance(extensions, dict):
                extensions = {}
            raise LinearApiError(
                message=first_error.get("message", "Unknown Linear API error"),
                code=extensions.get("code"),
                type=extensions.get("type"),
            )
        data = result.get("data")
        if not isinstance(data, dict):
            raise LinearApiError(message="response has no data", code="decode")
        return data

    async def get_viewer(self) -> Viewer:
        query = """
        query {
          viewer {
            id
            name
          }
        }
        """
        data = await self._query(query)
        try:
            viewer = data["viewer"]
            return Viewer(id=viewer["id"], name=viewer.get("name") or "")
        except (AttributeError, KeyError, TypeError) as e:
            raise LinearApiError(message=f"malformed viewer payload: {e}", code="decode") from e

    async def get_teams(self) -> list[Team]:
        query = """
        query {
          teams {
            nodes {
              id
              name
              key
            }
          }
        }
        """
        data = await self._query(query)
        try:
            nodes = data["teams"]["nodes"]
            return [Team(id=t["id"], name=t.get("name") or "", key=t.get("key") or "") for t in nodes]
        except (AttributeError, KeyError, TypeError) as e:
            raise LinearApiError(message=f"malformed teams payload: {e}", code="decode") from e

    async def get_issues(self, team_id: str | None = None) -> list[Issue]:
        """Fetch every issue in a tracked state, in the order the API returns them."""
        statuses = ", ".join(f'"{status}"' for status in TRACKED_STATUSES)
        if team_id:
            query = f"""
            query($teamID: ID!) {{
              issues(filter: {{
                team: {{ id: {{ eq: $teamID }} }}
                state: {{ name: {{ in: [{statuses}] }} }}
              }}) {{{_ISSUE_FIELDS}
              }}
            }}
            """
            variables: dict[str, Any] | None = {"teamID": team_id}
        else:
            query = f"""
            query {{
              issues(filter: {{
                state: {{ name: {{ in: [{statuses}] }} }}
              }}) {{{_ISSUE_FIELDS}
              }}
            }}
            """
            variables = None
        data = await self._query(query, variables)
        try:
            nodes = data["issues"]["nodes"]
            issues = [self._parse_issue(node) for node in nodes]
        except (AttributeError, KeyError, TypeError) as e:
            raise LinearApiError(message=f"malformed issues payload: {e}", code="decode") from e
        logger.debug("fetched %d issues (team=%s)", len(issues), team_id or "all")
        return issues

    @staticmethod
    def _parse_issue(node: dict[str, Any]) -> Issue:
        assignee = None
        raw_assignee = node.get("assignee")
        if raw_assignee and raw_assignee.get("id"):
            assignee = User(id=raw_assignee["id"], name=raw_assignee.get("name") or "")
        comments = tuple(
            Comment(
                body=c.get("body") or "",
                created_at=c.get("createdAt") or "",
                author=(c.get("user") or {}).get("name") or "",
            )
            for c in (node.get("comments") or {}).get("nodes") or []
        )
        return Issue(
            id=node["id"],
            identifier=node.get("identifier") or "",
            title=node.get("title") or "",
            status=(node.get("state") or {}).get("name") or "",
            description=node.get("description") or "",
            url=node.get("url") or "",
            branch_name=node.get("branchName") or "",
            assignee=assignee,
            comments=comments,
        )
