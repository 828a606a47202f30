"""GitLab REST API (v4) adapter."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, ClassVar
from urllib.parse import quote

import httpx

from commit_lsp.integrations.credentials import Credential

from .base import USER_AGENT, HttpTrackerAdapter, SetOnce, Ticket, TrackerConfig

logger = logging.getLogger(__name__)


class GitLabAdapter(HttpTrackerAdapter):
    """Adapter for GitLab issues, including self-hosted instances.

    An authenticated client handle is built lazily on first use and shared
    by all later calls. Building it verifies the host and token with
    ``GET /user``, so a bad host or a rejected token surfaces on first use
    and a failed attempt is retried by the next call.

    Listing returns all open issues of the project; details are fetched in a
    single request filtered by ``iids[]``.
    """

    # GitLab answers 403 for tokens lacking the api/read_api scope
    AUTH_STATUS_CODES: ClassVar[frozenset[int]] = frozenset({401, 403})

    PAGE_SIZE = 100

    def __init__(
        self,
        host: str,
        project: str,
        token: Credential,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(http_client)
        self.host = host
        self.project = project
        self._token = token
        self._client: SetOnce[httpx.AsyncClient] = SetOnce()
        logger.info("Created GitLab adapter for %s on %s", project, host)

    @classmethod
    def from_config(
        cls,
        config: TrackerConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> GitLabAdapter | None:
        """Build from a remote; needs host, owner, name and a token."""
        descriptor = config.descriptor
        if not descriptor.owner or config.credential is None:
            logger.warning("GitLab remote %s needs an owner and a credential", descriptor)
            return None
        return cls(descriptor.host, descriptor.full_name, config.credential, http_client)

    @property
    def platform_name(self) -> str:
        return "GitLab"

    @property
    def base_url(self) -> str:
        return f"https://{self.host}/api/v4"

    def _headers(self) -> dict[str, str]:
        return {
            "PRIVATE-TOKEN": self._token.reveal(),
            "User-Agent": USER_AGENT,
        }

    def _issues_url(self) -> str:
        return f"{self.base_url}/projects/{quote(self.project, safe='')}/issues"

    async def client(self) -> httpx.AsyncClient:
        """The verified client handle, built on first use."""
        return await self._client.get_or_init(self._build_client)

    async def _build_client(self) -> httpx.AsyncClient:
        owns_client = self._http_client is None
        client = self._http_client or httpx.AsyncClient()

        try:
            await self._execute_request(
                "GET", f"{self.base_url}/user", client=client, headers=self._headers()
            )
        except BaseException:
            if owns_client:
                await client.aclose()
            raise
        logger.debug("Connected to GitLab at %s", self.host)
        return client

    async def _query_issues(self, params: list[tuple[str, str]]) -> list[dict[str, Any]]:
        response = await self._execute_request(
            "GET",
            self._issues_url(),
            client=await self.client(),
            headers=self._headers(),
            params=[*params, ("per_page", str(self.PAGE_SIZE))],
        )
        data = self._parse_json(response)
        if not isinstance(data, list) or not all(isinstance(issue, dict) for issue in data):
            raise self._malformed("issue list is not an array of objects")
        return data

    async def list_ticket_ids(self) -> list[int]:
        """List open issues of the project.

        API endpoint: GET /projects/{id}/issues?state=opened
        """
        issues = await self._query_issues([("state", "opened")])
        ids: list[int] = []
        for issue in issues:
            iid = issue.get("iid")
            if not isinstance(iid, int):
                raise self._malformed("issue without numeric 'iid'")
            ids.append(iid)
        return ids

    async def get_ticket_details(self, ids: Sequence[int]) -> list[Ticket]:
        """Fetch issues filtered by their project-scoped ids.

        API endpoint: GET /projects/{id}/issues?iids[]=1&iids[]=2
        """
        if not ids:
            # Without an iids filter GitLab would return every issue
            return []

        issues = await self._query_issues([("iids[]", str(i)) for i in ids])
        tickets: list[Ticket] = []
        for issue in issues:
            iid = issue.get("iid")
            title = issue.get("title")
            if not isinstance(iid, int) or not isinstance(title, str):
                raise self._malformed("issue without 'iid' or 'title'")
            tickets.append(Ticket(id=iid, title=title, body=issue.get("description") or ""))
        return tickets

    async def aclose(self) -> None:
        client = self._client.get()
        if client is not None and client is not self._http_client:
            await client.aclose()


__all__ = ["GitLabAdapter"]
