"""Offline adapter backed by a local fixture directory.

Used for demos and manual testing of the language server. Each ticket is a
file named by its numeric id:

    Fix login redirect          <- line 1: title
                                <- line 2: blank separator
    Users end up on /home ...   <- lines 3+: body
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from commit_lsp.integrations.exceptions import UpstreamTransportError

from .base import IssueTrackerAdapter, Ticket

logger = logging.getLogger(__name__)


def _parse_ticket_id(name: str) -> int | None:
    if name.isascii() and name.isdigit():
        return int(name)
    return None


class DemoAdapter(IssueTrackerAdapter):
    """Adapter reading tickets from files in a directory."""

    def __init__(self, source_folder: Path) -> None:
        self.source_folder = Path(source_folder)
        logger.info("Created demo adapter for %s", self.source_folder)

    @property
    def platform_name(self) -> str:
        return "Demo"

    def load_ticket(self, ticket_id: int) -> Ticket | None:
        """Read and parse a single ticket file, or None if unavailable."""
        path = self.source_folder / str(ticket_id)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping demo ticket %s: %s", ticket_id, e)
            return None

        lines = text.splitlines()
        if not lines:
            return None

        title = lines[0]
        body = "\n".join(lines[2:])
        return Ticket(id=ticket_id, title=title, body=body)

    async def list_ticket_ids(self) -> list[int]:
        try:
            entries = list(self.source_folder.iterdir())
        except OSError as e:
            raise UpstreamTransportError(
                f"Failed to read demo folder {self.source_folder}: {e}",
                platform=self.platform_name,
            ) from e

        ids: list[int] = []
        for entry in entries:
            ticket_id = _parse_ticket_id(entry.name)
            if ticket_id is not None:
                ids.append(ticket_id)
        return ids

    async def get_ticket_details(self, ids: Sequence[int]) -> list[Ticket]:
        tickets: list[Ticket] = []
        for ticket_id in ids:
            ticket = self.load_ticket(ticket_id)
            if ticket is not None:
                tickets.append(ticket)
        return tickets


__all__ = ["DemoAdapter"]
