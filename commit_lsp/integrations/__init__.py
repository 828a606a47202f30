"""Issue tracker integration.

This package provides:
- Remote URL parsing and backend detection
- Credential retrieval through user-configured commands
- Adapters for GitHub, GitLab, Azure DevOps and an offline fixture backend
- TrackerBuilder, which selects and constructs the adapter for a remote
- IssueTracker, the cached facade used by the language server

Example usage:
    from commit_lsp.integrations import initialize_issue_tracker

    tracker = initialize_issue_tracker(load_user_config())
    if tracker is not None:
        await tracker.request_ticket_information()
        ticket = await tracker.get_ticket_details(42)
"""

from commit_lsp.integrations.builder import TrackerBuilder, initialize_issue_tracker
from commit_lsp.integrations.credentials import Credential, resolve_credential
from commit_lsp.integrations.exceptions import (
    TrackerInconsistencyError,
    UpstreamAuthenticationError,
    UpstreamError,
    UpstreamOtherError,
    UpstreamTransportError,
)
from commit_lsp.integrations.remote import (
    BackendKind,
    RemoteDescriptor,
    RemoteUrlParseError,
    guess_backend_kind,
    parse_remote_url,
)
from commit_lsp.integrations.tracker import IssueTracker
from commit_lsp.integrations.trackers import Ticket, TrackerConfig

__all__ = [
    # Facade
    "IssueTracker",
    "TrackerBuilder",
    "initialize_issue_tracker",
    # Data Models
    "BackendKind",
    "Credential",
    "RemoteDescriptor",
    "Ticket",
    "TrackerConfig",
    # Functions
    "guess_backend_kind",
    "parse_remote_url",
    "resolve_credential",
    # Exceptions
    "RemoteUrlParseError",
    "TrackerInconsistencyError",
    "UpstreamError",
    "UpstreamAuthenticationError",
    "UpstreamOtherError",
    "UpstreamTransportError",
]
