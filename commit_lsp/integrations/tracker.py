"""IssueTracker facade with an in-memory ticket cache.

Concurrency Model:
    Protocol requests are served by independent asyncio tasks, all sharing
    one IssueTracker. The cache is a plain dict guarded by a threading.Lock
    that is held only while the dict is read or updated, never across an
    await on the network.

    Two concurrent lookups missing the same id may both reach the network
    and both insert the result. Fetches are idempotent, so the last write
    wins and no in-flight deduplication is done.
"""

from __future__ import annotations

import logging
import threading

from commit_lsp.integrations.exceptions import TrackerInconsistencyError
from commit_lsp.integrations.trackers.base import IssueTrackerAdapter, Ticket

logger = logging.getLogger(__name__)


class IssueTracker:
    """The single entry point for ticket information.

    Owns one adapter, chosen once at startup, and a cache that only grows:
    entries are overwritten on refresh but never evicted.
    """

    def __init__(self, adapter: IssueTrackerAdapter) -> None:
        self._adapter = adapter
        self._cache: dict[int, Ticket] = {}
        self._lock = threading.Lock()

    @property
    def adapter(self) -> IssueTrackerAdapter:
        return self._adapter

    @property
    def platform_name(self) -> str:
        return self._adapter.platform_name

    async def request_ticket_information(self) -> list[Ticket]:
        """Fetch all relevant tickets from the remote and cache them.

        Returns:
            The freshly fetched tickets (not the whole cache)

        Raises:
            UpstreamError: If listing or fetching fails. The cache is left
                unchanged in that case.
        """
        ids = await self._adapter.list_ticket_ids()
        tickets = await self._adapter.get_ticket_details(ids)

        with self._lock:
            self._cache.update((ticket.id, ticket) for ticket in tickets)

        logger.debug("Cached %d ticket(s) from %s", len(tickets), self.platform_name)
        return tickets

    def list_tickets(self) -> list[Ticket]:
        """Return a snapshot of all cached tickets without network access."""
        with self._lock:
            return list(self._cache.values())

    async def get_ticket_details(self, ticket_id: int) -> Ticket | None:
        """Look up a single ticket, asking the remote on a cache miss.

        Returns:
            The ticket, or None if the remote does not know the id

        Raises:
            UpstreamError: If the remote cannot be queried
            TrackerInconsistencyError: If the adapter answers with a
                different ticket than the one requested
        """
        with self._lock:
            cached = self._cache.get(ticket_id)
        if cached is not None:
            return cached

        tickets = await self._adapter.get_ticket_details([ticket_id])
        if len(tickets) != 1:
            if tickets:
                logger.warning(
                    "%s returned %d tickets for #%d, treating as not found",
                    self.platform_name,
                    len(tickets),
                    ticket_id,
                )
            return None

        ticket = tickets[0]
        if ticket.id != ticket_id:
            raise TrackerInconsistencyError(ticket_id, ticket.id)

        with self._lock:
            self._cache[ticket_id] = ticket
        return ticket

    async def aclose(self) -> None:
        """Release network resources held by the adapter."""
        await self._adapter.aclose()


__all__ = ["IssueTracker"]
