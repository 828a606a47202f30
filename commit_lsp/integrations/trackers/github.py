"""GitHub REST API adapter."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from commit_lsp.integrations.credentials import Credential

from .base import USER_AGENT, HttpTrackerAdapter, SetOnce, Ticket, TrackerConfig

logger = logging.getLogger(__name__)

# Statuses of GET /repos/{owner}/{repo}/issues/{number} meaning "no such issue"
_MISSING_ISSUE_STATUSES = frozenset({404, 410})


class GitHubAdapter(HttpTrackerAdapter):
    """Adapter for GitHub issues (REST API v3).

    Listing returns the open issues assigned to the authenticated user. The
    user name is looked up once via ``GET /user`` when a token is configured;
    without a token the repository owner is assumed to be the user.

    There is no batch endpoint for issue details, so one request is issued
    per id.
    """

    API_URL = "https://api.github.com"
    API_VERSION = "2022-11-28"

    def __init__(
        self,
        owner: str,
        repo: str,
        token: Credential | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(http_client)
        self.owner = owner
        self.repo = repo
        self._token = token
        self._username: SetOnce[str] = SetOnce()
        logger.info("Created GitHub adapter for %s/%s", owner, repo)

    @classmethod
    def from_config(
        cls,
        config: TrackerConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> GitHubAdapter | None:
        owner = config.descriptor.owner
        if not owner:
            logger.warning("GitHub remote %s has no owner", config.descriptor)
            return None
        return cls(owner, config.descriptor.name, config.credential, http_client)

    @property
    def platform_name(self) -> str:
        return "GitHub"

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.API_VERSION,
            "User-Agent": USER_AGENT,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token.reveal()}"
        return headers

    async def username(self) -> str:
        """Name of the user whose assigned issues are listed."""
        if not self._token:
            return self.owner
        return await self._username.get_or_init(self._fetch_username)

    async def _fetch_username(self) -> str:
        response = await self._execute_request(
            "GET", f"{self.API_URL}/user", headers=self._headers()
        )
        data = self._parse_json(response)
        login = data.get("login") if isinstance(data, dict) else None
        if not isinstance(login, str) or not login:
            raise self._malformed("user info without 'login'")
        logger.debug("Resolved GitHub user %s", login)
        return login

    async def list_ticket_ids(self) -> list[int]:
        """List open issues of the repository assigned to the current user.

        API endpoint: GET /repos/{owner}/{repo}/issues?assignee={user}
        """
        user = await self.username()
        response = await self._execute_request(
            "GET",
            f"{self.API_URL}/repos/{self.owner}/{self.repo}/issues",
            headers=self._headers(),
            params={"assignee": user, "state": "open", "per_page": "100"},
        )
        data = self._parse_json(response)
        if not isinstance(data, list):
            raise self._malformed("issue list is not an array")

        ids: list[int] = []
        for issue in data:
            number = issue.get("number") if isinstance(issue, dict) else None
            if not isinstance(number, int):
                raise self._malformed("issue without numeric 'number'")
            # The issues endpoint also lists pull requests
            if "pull_request" in issue:
                continue
            ids.append(number)
        return ids

    async def get_ticket_details(self, ids: Sequence[int]) -> list[Ticket]:
        """Fetch each issue individually.

        API endpoint: GET /repos/{owner}/{repo}/issues/{number}
        """
        tickets: list[Ticket] = []
        for ticket_id in ids:
            response = await self._execute_request(
                "GET",
                f"{self.API_URL}/repos/{self.owner}/{self.repo}/issues/{ticket_id}",
                headers=self._headers(),
                allowed_statuses=_MISSING_ISSUE_STATUSES,
            )
            if response.status_code in _MISSING_ISSUE_STATUSES:
                logger.debug("GitHub issue #%s not found", ticket_id)
                continue
            tickets.append(self._to_ticket(self._parse_json(response), ticket_id))
        return tickets

    def _to_ticket(self, data: Any, requested_id: int) -> Ticket:
        if not isinstance(data, dict):
            raise self._malformed("issue is not an object")

        title = data.get("title")
        if not isinstance(title, str):
            raise self._malformed(f"issue #{requested_id} has no title")

        number = data.get("number", requested_id)
        if not isinstance(number, int):
            raise self._malformed(f"issue #{requested_id} has a non-numeric number")

        return Ticket(id=number, title=title, body=data.get("body") or "")


__all__ = ["GitHubAdapter"]
