"""Shared utilities for commit-lsp."""

from commit_lsp.utils.errors import (
    CommitLspError,
    ConfigError,
    CredentialCommandError,
    CredentialError,
    CredentialNotConfiguredError,
    GitOperationError,
    NotInRepositoryError,
)
from commit_lsp.utils.logging import (
    get_logger,
    log_command,
    log_message,
    setup_logging,
)

__all__ = [
    "CommitLspError",
    "ConfigError",
    "CredentialError",
    "CredentialNotConfiguredError",
    "CredentialCommandError",
    "GitOperationError",
    "NotInRepositoryError",
    "setup_logging",
    "get_logger",
    "log_message",
    "log_command",
]
