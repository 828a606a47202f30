"""Azure DevOps REST API adapter."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, ClassVar

import httpx

from commit_lsp.integrations.credentials import Credential

from .base import HttpTrackerAdapter, Ticket, TrackerConfig

logger = logging.getLogger(__name__)

# Work items assigned to the current user that they touched recently
WIQL_ASSIGNED_RECENT = (
    "SELECT [System.Id] FROM WorkItems "
    "WHERE [System.TeamProject] = @project "
    "AND [Assigned To] = @me "
    "AND [System.Id] in (@MyRecentActivity)"
)

TITLE_FIELD = "System.Title"
DESCRIPTION_FIELD = "System.Description"


class AzureDevOpsAdapter(HttpTrackerAdapter):
    """Adapter for Azure Boards work items.

    Authentication uses Basic auth with an empty username and the Personal
    Access Token as password. The batch endpoint has no notion of the
    current user, so ids always come from the WIQL query or the caller.

    API Version:
        Uses Azure DevOps REST API version 7.0 via query parameter.
    """

    API_VERSION = "7.0"

    # workitemsbatch accepts at most 200 ids per request
    BATCH_SIZE = 200

    # An invalid PAT yields 203 with an HTML sign-in page instead of 401
    AUTH_STATUS_CODES: ClassVar[frozenset[int]] = frozenset({401, 203})

    def __init__(
        self,
        organization: str,
        project: str,
        pat: Credential,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(http_client)
        self.organization = organization
        self.project = project
        self._pat = pat
        logger.info("Created Azure DevOps adapter for %s/%s", organization, project)

    @classmethod
    def from_config(
        cls,
        config: TrackerConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> AzureDevOpsAdapter | None:
        """Build from a remote; needs organization, project and a PAT."""
        descriptor = config.descriptor
        if not descriptor.organization or not descriptor.owner or config.credential is None:
            logger.warning(
                "Azure DevOps remote %s needs an organization, a project and a credential",
                descriptor,
            )
            return None
        return cls(descriptor.organization, descriptor.owner, config.credential, http_client)

    @property
    def platform_name(self) -> str:
        return "Azure DevOps"

    @property
    def base_url(self) -> str:
        return f"https://dev.azure.com/{self.organization}/{self.project}/_apis"

    async def _post(self, path: str, body: dict[str, Any]) -> Any:
        response = await self._execute_request(
            "POST",
            f"{self.base_url}/{path}",
            headers={"Accept": "application/json"},
            params={"api-version": self.API_VERSION},
            json_data=body,
            auth=httpx.BasicAuth("", self._pat.reveal()),
        )
        return self._parse_json(response)

    async def list_ticket_ids(self) -> list[int]:
        """Run the WIQL query for recently touched work items assigned to me.

        API endpoint: POST /{organization}/{project}/_apis/wit/wiql
        """
        data = await self._post("wit/wiql", {"query": WIQL_ASSIGNED_RECENT})
        items = data.get("workItems") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise self._malformed("query result without 'workItems'")

        ids: list[int] = []
        for item in items:
            item_id = item.get("id") if isinstance(item, dict) else None
            if not isinstance(item_id, int):
                raise self._malformed("work item reference without numeric 'id'")
            ids.append(item_id)
        return ids

    async def get_ticket_details(self, ids: Sequence[int]) -> list[Ticket]:
        """Fetch title and description of the given work items.

        API endpoint: POST /{organization}/{project}/_apis/wit/workitemsbatch
        """
        tickets: list[Ticket] = []
        for start in range(0, len(ids), self.BATCH_SIZE):
            chunk = list(ids[start : start + self.BATCH_SIZE])
            data = await self._post(
                "wit/workitemsbatch",
                {
                    "ids": chunk,
                    "fields": [TITLE_FIELD, DESCRIPTION_FIELD],
                    # Missing ids are left out instead of failing the batch
                    "errorPolicy": "omit",
                },
            )
            items = data.get("value") if isinstance(data, dict) else None
            if not isinstance(items, list):
                raise self._malformed("batch result without 'value'")
            tickets.extend(self._to_ticket(item) for item in items if item is not None)
        return tickets

    def _to_ticket(self, item: Any) -> Ticket:
        if not isinstance(item, dict):
            raise self._malformed("work item is not an object")

        item_id = item.get("id")
        fields = item.get("fields")
        if not isinstance(item_id, int) or not isinstance(fields, dict):
            raise self._malformed("work item without 'id' or 'fields'")

        title = fields.get(TITLE_FIELD)
        if not isinstance(title, str):
            raise self._malformed(f"work item {item_id} has no title")

        # Work items without a description omit the field entirely
        return Ticket(id=item_id, title=title, body=fields.get(DESCRIPTION_FIELD) or "")


__all__ = ["AzureDevOpsAdapter", "WIQL_ASSIGNED_RECENT"]
