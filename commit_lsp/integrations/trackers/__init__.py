"""Issue tracker adapters.

One adapter per backend, all implementing IssueTrackerAdapter:
- GitHubAdapter: GitHub REST API
- GitLabAdapter: GitLab REST API v4 (gitlab.com and self-hosted)
- AzureDevOpsAdapter: Azure Boards work items
- DemoAdapter: offline fixture directory
"""

from commit_lsp.integrations.trackers.azure_devops import AzureDevOpsAdapter
from commit_lsp.integrations.trackers.base import (
    HttpTrackerAdapter,
    IssueTrackerAdapter,
    SetOnce,
    Ticket,
    TrackerConfig,
)
from commit_lsp.integrations.trackers.demo import DemoAdapter
from commit_lsp.integrations.trackers.github import GitHubAdapter
from commit_lsp.integrations.trackers.gitlab import GitLabAdapter

__all__ = [
    # Data Models
    "Ticket",
    "TrackerConfig",
    # Abstract Base Classes
    "IssueTrackerAdapter",
    "HttpTrackerAdapter",
    "SetOnce",
    # Adapters
    "AzureDevOpsAdapter",
    "DemoAdapter",
    "GitHubAdapter",
    "GitLabAdapter",
]
