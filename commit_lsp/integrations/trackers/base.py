"""Base classes for issue tracker adapters.

This module defines:
- Ticket dataclass, the platform-agnostic ticket representation
- TrackerConfig, the input every remote adapter is built from
- IssueTrackerAdapter abstract base class that all backends implement
- HttpTrackerAdapter with the shared request/error-translation helpers
- SetOnce, a write-once cell for lazily memoized adapter state
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Collection, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Literal, TypeVar

import httpx

from commit_lsp.integrations.credentials import Credential
from commit_lsp.integrations.exceptions import (
    UpstreamAuthenticationError,
    UpstreamOtherError,
    UpstreamTransportError,
)
from commit_lsp.integrations.remote import RemoteDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_AGENT = "commit-lsp"


@dataclass(frozen=True)
class Ticket:
    """A unit of work tracked by an issue tracker.

    Attributes:
        id: Numeric ticket id as referenced in commit messages (``#42``)
        title: One-line summary
        body: Description text, empty when the ticket has none
    """

    id: int
    title: str
    body: str = ""


@dataclass(frozen=True)
class TrackerConfig:
    """Input for constructing a remote adapter.

    Attributes:
        descriptor: The parsed remote (or issue tracker override) URL
        credential: Secret from the credentials command, if one is configured
    """

    descriptor: RemoteDescriptor
    credential: Credential | None = None


class SetOnce(Generic[T]):
    """A lazily initialized, write-once cell.

    The first successful initialization wins. Concurrent callers wait for it
    and reuse the stored value instead of running the initializer again. A
    failed initialization stores nothing, so the next caller retries.
    """

    def __init__(self) -> None:
        self._value: T | None = None
        self._is_set = False
        self._lock = asyncio.Lock()

    @property
    def is_set(self) -> bool:
        return self._is_set

    def get(self) -> T | None:
        """Return the stored value without initializing."""
        return self._value

    async def get_or_init(self, factory: Callable[[], Awaitable[T]]) -> T:
        """Return the stored value, running factory if nothing is stored yet."""
        if self._is_set:
            return self._value  # type: ignore[return-value]

        async with self._lock:
            if not self._is_set:
                self._value = await factory()
                self._is_set = True
        return self._value  # type: ignore[return-value]


class IssueTrackerAdapter(ABC):
    """Base class for issue tracker backends.

    Each adapter implements the same two read-only operations against a
    different remote service. Returned tickets need not be sorted; ids with
    no matching ticket are simply absent from the result. Deciding that a
    ticket is "not found" is left to the caller.
    """

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Human-readable backend name."""
        pass

    @abstractmethod
    async def list_ticket_ids(self) -> list[int]:
        """List the ids of tickets relevant to the current user.

        Raises:
            UpstreamError: If the backend cannot be queried
        """
        pass

    @abstractmethod
    async def get_ticket_details(self, ids: Sequence[int]) -> list[Ticket]:
        """Request title and description for the given ids.

        Ids that do not exist upstream are left out of the result.

        Raises:
            UpstreamError: If the backend cannot be queried
        """
        pass

    async def aclose(self) -> None:
        """Release network resources held by the adapter."""
        return None


class HttpTrackerAdapter(IssueTrackerAdapter):
    """Base class for adapters talking to a REST API with httpx.

    HTTP Client Sharing:
        An ``httpx.AsyncClient`` may be injected to enable connection pooling
        (and to substitute a mock transport in tests). Without one, a client
        is created for each request.

    Error translation:
        - httpx.TransportError -> UpstreamTransportError
        - status in AUTH_STATUS_CODES -> UpstreamAuthenticationError
        - any other non-success status -> UpstreamOtherError
        - invalid JSON -> UpstreamOtherError
    """

    AUTH_STATUS_CODES: ClassVar[frozenset[int]] = frozenset({401})

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self._http_client = http_client

    @classmethod
    @abstractmethod
    def from_config(
        cls,
        config: TrackerConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> HttpTrackerAdapter | None:
        """Construct the adapter, or return None if required fields are missing."""
        pass

    async def _execute_request(
        self,
        method: Literal["GET", "POST"],
        url: str,
        *,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
        params: Any = None,
        json_data: Any = None,
        auth: httpx.Auth | None = None,
        allowed_statuses: Collection[int] = (),
    ) -> httpx.Response:
        """Execute an HTTP request and translate failures.

        Args:
            method: HTTP method
            url: Absolute URL, or a path relative to the client's base_url
            client: Client to use instead of the injected one
            headers: Optional request headers
            params: Optional query parameters
            json_data: Optional JSON body (POST requests)
            auth: Optional authentication (e.g., httpx.BasicAuth)
            allowed_statuses: Error statuses returned to the caller instead
                of raising (e.g. 404 when probing for a ticket)

        Returns:
            The HTTP response

        Raises:
            UpstreamTransportError: If the remote cannot be reached
            UpstreamAuthenticationError: If the credential is rejected
            UpstreamOtherError: For any other unsuccessful status
        """
        # GitHub answers 301 for renamed or transferred repositories
        kwargs: dict[str, Any] = {"follow_redirects": True}
        if headers is not None:
            kwargs["headers"] = headers
        if params is not None:
            kwargs["params"] = params
        if json_data is not None:
            kwargs["json"] = json_data
        if auth is not None:
            kwargs["auth"] = auth

        client = client or self._http_client
        try:
            if client is not None:
                response = await client.request(method, url, **kwargs)
            else:
                async with httpx.AsyncClient() as fallback_client:
                    response = await fallback_client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.debug("%s request to %s failed: %s", self.platform_name, url, type(e).__name__)
            raise UpstreamTransportError(
                f"IO error interacting with remote: {e}", platform=self.platform_name
            ) from e

        self._check_status(response, allowed_statuses)
        return response

    def _check_status(self, response: httpx.Response, allowed_statuses: Collection[int]) -> None:
        status = response.status_code
        if status in self.AUTH_STATUS_CODES:
            raise UpstreamAuthenticationError(platform=self.platform_name)
        if status in allowed_statuses or response.is_success:
            return
        raise UpstreamOtherError(
            f"Unexpected HTTP {status} for {response.request.url.path}",
            platform=self.platform_name,
        )

    def _parse_json(self, response: httpx.Response) -> Any:
        """Decode a JSON response body.

        Raises:
            UpstreamOtherError: If the body is not valid JSON
        """
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamOtherError(
                f"Malformed JSON response: {e}", platform=self.platform_name
            ) from e

    def _malformed(self, details: str) -> UpstreamOtherError:
        return UpstreamOtherError(f"Unexpected response shape: {details}", platform=self.platform_name)


__all__ = [
    "HttpTrackerAdapter",
    "IssueTrackerAdapter",
    "SetOnce",
    "Ticket",
    "TrackerConfig",
    "USER_AGENT",
]
