"""Shared pytest fixtures for commit-lsp tests."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from commit_lsp.healthcheck import HealthReport
from commit_lsp.integrations.credentials import Credential
from commit_lsp.integrations.trackers.base import Ticket
from tests.fakes import FakeAdapter

# Enable pytest-asyncio for async test support
pytest_plugins = ("pytest_asyncio",)

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def mock_subprocess():
    """Mock subprocess.run for git and credential commands."""
    with patch("subprocess.run") as mock:
        mock.return_value = MagicMock(
            returncode=0,
            stdout="",
            stderr="",
        )
        yield mock


@pytest.fixture
def silent_health() -> HealthReport:
    """A health report that records entries without printing."""
    return HealthReport.silent()


@pytest.fixture
def token() -> Credential:
    return Credential("test-token")


@pytest.fixture
def demo_folder(tmp_path: Path) -> Path:
    """Fixture directory for the offline backend with two tickets."""
    folder = tmp_path / "tickets"
    folder.mkdir()
    (folder / "42").write_text("Fix bug\n\nDetails here")
    (folder / "7").write_text("Add login page\n\nUsers need to log in.\nUse OAuth.\n")
    (folder / "README").write_text("not a ticket")
    return folder


@pytest.fixture
def sample_tickets() -> list[Ticket]:
    return [
        Ticket(id=1, title="First", body="first body"),
        Ticket(id=2, title="Second", body=""),
        Ticket(id=3, title="Third", body="third body"),
    ]


@pytest.fixture
def fake_adapter(sample_tickets) -> FakeAdapter:
    return FakeAdapter(sample_tickets)


@pytest.fixture
def make_client() -> Callable[[Handler], httpx.AsyncClient]:
    """Build an httpx.AsyncClient answering requests with a handler function."""

    def factory(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
