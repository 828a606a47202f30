"""Reusable FakeAdapter for testing the IssueTracker facade.

Serves tickets from an in-memory mapping, counts calls, and can be told to
fail or to misbehave so cache and error-propagation behavior can be verified
without network access.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence

from commit_lsp.integrations.exceptions import UpstreamError
from commit_lsp.integrations.trackers.base import IssueTrackerAdapter, Ticket


class FakeAdapter(IssueTrackerAdapter):
    """Fake IssueTrackerAdapter backed by a dict of tickets.

    Attributes:
        tickets: Tickets the fake "remote" knows, by id
        list_calls: Number of list_ticket_ids() calls
        detail_calls: Ids requested per get_ticket_details() call
        list_error: Raised by list_ticket_ids() when set
        detail_error: Raised by get_ticket_details() when set
        detail_override: Returned by get_ticket_details() instead of the
            real lookup when set (simulates a misbehaving backend)
        delay: Seconds to sleep inside get_ticket_details()
        closed: Whether aclose() was called
    """

    def __init__(self, tickets: Iterable[Ticket] = ()) -> None:
        self.tickets: dict[int, Ticket] = {ticket.id: ticket for ticket in tickets}
        self.list_calls = 0
        self.detail_calls: list[list[int]] = []
        self.list_error: UpstreamError | None = None
        self.detail_error: UpstreamError | None = None
        self.detail_override: list[Ticket] | None = None
        self.delay = 0.0
        self.closed = False

    @property
    def platform_name(self) -> str:
        return "Fake"

    @property
    def detail_call_count(self) -> int:
        return len(self.detail_calls)

    async def list_ticket_ids(self) -> list[int]:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return list(self.tickets)

    async def get_ticket_details(self, ids: Sequence[int]) -> list[Ticket]:
        self.detail_calls.append(list(ids))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.detail_error is not None:
            raise self.detail_error
        if self.detail_override is not None:
            return list(self.detail_override)
        return [self.tickets[i] for i in ids if i in self.tickets]

    async def aclose(self) -> None:
        self.closed = True
