"""Custom exceptions for commit-lsp.

This module defines the exception hierarchy used by the repository,
configuration and credential layers. Errors raised while talking to a remote
issue tracker live in ``commit_lsp.integrations.exceptions``.
"""


class CommitLspError(Exception):
    """Base exception for commit-lsp errors."""


class GitOperationError(CommitLspError):
    """A git command failed."""


class NotInRepositoryError(GitOperationError):
    """The working directory could not be resolved to a repository root.

    Raised both when git reports that the directory is not inside a
    repository and when no registered worktree matches the current one.
    Callers are not expected to distinguish the two.
    """

    def __init__(self, message: str = "Not in a git repository") -> None:
        super().__init__(message)


class ConfigError(CommitLspError):
    """The user configuration file could not be parsed."""


class CredentialError(CommitLspError):
    """Base class for credential retrieval failures."""


class CredentialNotConfiguredError(CredentialError):
    """No credential command is configured for the remote."""

    def __init__(self, message: str = "No credentials command configured") -> None:
        super().__init__(message)


class CredentialCommandError(CredentialError):
    """The credential command could not be run or exited unsuccessfully.

    Attributes:
        command: Name of the executable (arguments are omitted on purpose)
        returncode: Exit status, or None when the process could not be spawned
        stderr: Captured error stream of the command
    """

    def __init__(
        self,
        command: str,
        returncode: int | None = None,
        stderr: str = "",
        message: str | None = None,
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        if message is None:
            if returncode is None:
                message = f"Failed to run credentials command '{command}'"
            else:
                message = f"Credentials command '{command}' exited with status {returncode}"
            if stderr:
                message += f": {stderr}"
        super().__init__(message)

    @property
    def is_spawn_failure(self) -> bool:
        """True when the process never started (missing executable, permissions)."""
        return self.returncode is None


__all__ = [
    "CommitLspError",
    "GitOperationError",
    "NotInRepositoryError",
    "ConfigError",
    "CredentialError",
    "CredentialNotConfiguredError",
    "CredentialCommandError",
]
