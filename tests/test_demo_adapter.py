"""Tests for the offline demo adapter."""

from pathlib import Path

import pytest

from commit_lsp.integrations.exceptions import UpstreamTransportError
from commit_lsp.integrations.trackers.base import Ticket
from commit_lsp.integrations.trackers.demo import DemoAdapter


class TestLoadTicket:
    """Tests for DemoAdapter.load_ticket."""

    def test_title_and_body(self, demo_folder):
        ticket = DemoAdapter(demo_folder).load_ticket(42)

        assert ticket == Ticket(id=42, title="Fix bug", body="Details here")

    def test_multiline_body(self, demo_folder):
        ticket = DemoAdapter(demo_folder).load_ticket(7)

        assert ticket is not None
        assert ticket.body == "Users need to log in.\nUse OAuth."

    def test_title_only(self, tmp_path: Path):
        (tmp_path / "5").write_text("Just a title\n")

        assert DemoAdapter(tmp_path).load_ticket(5) == Ticket(id=5, title="Just a title")

    def test_missing_file(self, demo_folder):
        assert DemoAdapter(demo_folder).load_ticket(1) is None

    def test_empty_file(self, tmp_path: Path):
        (tmp_path / "3").write_text("")

        assert DemoAdapter(tmp_path).load_ticket(3) is None

    def test_invalid_utf8(self, tmp_path: Path):
        (tmp_path / "4").write_bytes(b"\xff\xfe\xfa")

        assert DemoAdapter(tmp_path).load_ticket(4) is None


class TestListTicketIds:
    """Tests for DemoAdapter.list_ticket_ids."""

    @pytest.mark.asyncio
    async def test_numeric_names_only(self, demo_folder):
        (demo_folder / "12a").write_text("x")
        (demo_folder / "-3").write_text("x")

        ids = await DemoAdapter(demo_folder).list_ticket_ids()

        assert sorted(ids) == [7, 42]

    @pytest.mark.asyncio
    async def test_missing_folder(self, tmp_path: Path):
        with pytest.raises(UpstreamTransportError):
            await DemoAdapter(tmp_path / "absent").list_ticket_ids()


class TestGetTicketDetails:
    """Tests for DemoAdapter.get_ticket_details."""

    @pytest.mark.asyncio
    async def test_round_trip(self, demo_folder):
        adapter = DemoAdapter(demo_folder)

        ids = await adapter.list_ticket_ids()
        tickets = await adapter.get_ticket_details(ids)

        assert {t.id: t.title for t in tickets} == {42: "Fix bug", 7: "Add login page"}

    @pytest.mark.asyncio
    async def test_unknown_ids_are_absent(self, demo_folder):
        tickets = await DemoAdapter(demo_folder).get_ticket_details([42, 1000])

        assert [t.id for t in tickets] == [42]

    def test_platform_name(self, demo_folder):
        assert DemoAdapter(demo_folder).platform_name == "Demo"
