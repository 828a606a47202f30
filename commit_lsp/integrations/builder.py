"""Construction of the IssueTracker for the current repository.

The builder decides which backend to use, retrieves the credential and
instantiates the matching adapter:

1. Backend kind: demo folder (debug only) > explicit per-remote ``kind`` >
   guess from the remote host. No kind means the host is not integrated.
2. URL override: a per-remote ``issue_tracker_url`` replaces the remote URL.
   If it cannot be parsed the original remote URL is kept.
3. Credential: the per-remote credentials command is run once. A missing
   command is fine; a failing one stops backends that require a token.
4. Adapter: constructed from the final TrackerConfig. Missing required
   fields yield no tracker rather than an error.

Every step is reported to a HealthReport so ``checkhealth`` can explain why
an integration is not active.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from commit_lsp.git import find_repo_root, get_remote_url
from commit_lsp.healthcheck import HealthReport
from commit_lsp.integrations.credentials import Credential, resolve_credential
from commit_lsp.integrations.remote import (
    BackendKind,
    RemoteDescriptor,
    RemoteUrlParseError,
    guess_backend_kind,
    parse_remote_url,
    redact_url,
)
from commit_lsp.integrations.tracker import IssueTracker
from commit_lsp.integrations.trackers.azure_devops import AzureDevOpsAdapter
from commit_lsp.integrations.trackers.base import (
    HttpTrackerAdapter,
    IssueTrackerAdapter,
    TrackerConfig,
)
from commit_lsp.integrations.trackers.demo import DemoAdapter
from commit_lsp.integrations.trackers.github import GitHubAdapter
from commit_lsp.integrations.trackers.gitlab import GitLabAdapter
from commit_lsp.utils.errors import CredentialCommandError, GitOperationError

if TYPE_CHECKING:
    from commit_lsp.config.settings import RemoteConfig, UserConfig

logger = logging.getLogger(__name__)

# Remote adapters by backend kind; DEMO is built from its folder instead
ADAPTER_CLASSES: dict[BackendKind, type[HttpTrackerAdapter]] = {
    BackendKind.GITHUB: GitHubAdapter,
    BackendKind.GITLAB: GitLabAdapter,
    BackendKind.AZURE_DEVOPS: AzureDevOpsAdapter,
}


class TrackerBuilder:
    """Builds an IssueTracker from a remote URL and optional per-remote config.

    Attributes:
        descriptor: The parsed remote (or override) URL, None if unparseable
        health: Report receiving an entry for each decision
        demo_folder: Fixture directory forcing the offline backend
    """

    def __init__(
        self,
        remote_url: str,
        health: HealthReport | None = None,
        demo_folder: Path | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.health = health if health is not None else HealthReport.silent()
        self.demo_folder = demo_folder
        self.credentials_command: tuple[str, ...] = ()
        self._explicit_kind: BackendKind | None = None
        self._http_client = http_client

        try:
            self.descriptor: RemoteDescriptor | None = parse_remote_url(remote_url)
        except RemoteUrlParseError as e:
            logger.warning("%s", e)
            self.health.start("Parse remote url").error(str(e))
            self.descriptor = None

    def add_remote_config(self, remote: RemoteConfig) -> None:
        """Apply per-remote settings (credentials, explicit kind, URL override)."""
        self.credentials_command = tuple(remote.credentials_command)
        if remote.kind is not None:
            self._explicit_kind = remote.kind

        if remote.issue_tracker_url:
            check = self.health.start("Apply url override")
            try:
                self.descriptor = parse_remote_url(remote.issue_tracker_url)
            except RemoteUrlParseError as e:
                logger.warning("Ignoring url override: %s", e)
                check.error(f"{e}; keeping the remote url")
            else:
                check.ok_with(redact_url(remote.issue_tracker_url))

    def resolve_kind(self) -> BackendKind | None:
        """Determine the backend kind; None if the host is not supported."""
        if self.demo_folder is not None:
            return BackendKind.DEMO
        if self._explicit_kind is not None:
            return self._explicit_kind
        if self.descriptor is None:
            return None
        return guess_backend_kind(self.descriptor)

    def build(self) -> IssueTracker | None:
        """Create the IssueTracker, or None if no integration is possible."""
        check = self.health.start("Determine issue tracker")
        kind = self.resolve_kind()
        if kind is None:
            host = self.descriptor.host if self.descriptor is not None else "unknown host"
            check.warn(f"Unsupported host '{host}'")
            return None
        check.ok_with(str(kind))

        credential, usable = self._retrieve_credential(kind)
        if not usable:
            return None

        adapter = self._create_adapter(kind, credential)
        if adapter is None:
            return None

        logger.info("Using %s issue tracker", kind)
        return IssueTracker(adapter)

    def _retrieve_credential(self, kind: BackendKind) -> tuple[Credential | None, bool]:
        """Run the credentials command if one is configured.

        Returns:
            Tuple of (credential or None, whether building may continue)
        """
        check = self.health.start("Check for credentials command")
        if not self.credentials_command:
            check.info("None configured")
            return None, True
        check.ok_with(self.credentials_command[0])

        check = self.health.start("Get credentials")
        try:
            credential = resolve_credential(self.credentials_command)
        except CredentialCommandError as e:
            if kind.requires_credential:
                check.error(str(e))
                return None, False
            check.warn(f"{e}; continuing without credentials")
            return None, True

        check.ok()
        return credential, True

    def _create_adapter(
        self,
        kind: BackendKind,
        credential: Credential | None,
    ) -> IssueTrackerAdapter | None:
        check = self.health.start("Create adapter")

        if kind is BackendKind.DEMO:
            if self.demo_folder is None:
                check.error("The demo backend needs a fixture folder")
                return None
            check.ok_with(str(self.demo_folder))
            return DemoAdapter(self.demo_folder)

        if self.descriptor is None:
            check.error("No valid remote url")
            return None

        config = TrackerConfig(descriptor=self.descriptor, credential=credential)
        adapter = ADAPTER_CLASSES[kind].from_config(config, self._http_client)
        if adapter is None:
            missing = "a credential" if kind.requires_credential and credential is None else "url parts"
            check.error(f"{kind} integration is missing {missing} for '{self.descriptor}'")
            return None

        check.ok_with(str(self.descriptor))
        return adapter


def initialize_issue_tracker(
    config: UserConfig,
    health: HealthReport | None = None,
    cwd: Path | None = None,
    demo_folder: Path | None = None,
) -> IssueTracker | None:
    """Find the repository, read its remote and build the tracker.

    Args:
        config: User configuration with per-remote settings
        health: Report receiving an entry for each step
        cwd: Directory to resolve the repository from
        demo_folder: Fixture directory forcing the offline backend

    Returns:
        The IssueTracker, or None if the repository has no usable integration
    """
    health = health if health is not None else HealthReport.silent()
    health.set_context("Issue Tracker")

    check = health.start("Find repository root")
    try:
        root = find_repo_root(cwd)
    except GitOperationError as e:
        check.error(str(e))
        return None
    check.ok_with(str(root))

    check = health.start("Retrieve repo url")
    url = get_remote_url(cwd=root)
    if url is None:
        check.error("Failed to get remote url")
        return None
    check.ok_with(f"Got '{redact_url(url)}'")

    check = health.start("Lookup remote config")
    remote = config.find_remote(url)
    if remote is None:
        check.info("No remote specific config found")
    else:
        check.ok_with(f"Using config for '{remote.host}'")

    builder = TrackerBuilder(url, health=health, demo_folder=demo_folder)
    if remote is not None:
        builder.add_remote_config(remote)
    return builder.build()


__all__ = [
    "ADAPTER_CLASSES",
    "TrackerBuilder",
    "initialize_issue_tracker",
]
