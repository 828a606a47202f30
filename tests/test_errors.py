"""Tests for commit_lsp error types."""

from commit_lsp.integrations.exceptions import (
    TrackerInconsistencyError,
    UpstreamAuthenticationError,
    UpstreamError,
    UpstreamOtherError,
    UpstreamTransportError,
)
from commit_lsp.utils.errors import (
    CommitLspError,
    ConfigError,
    CredentialCommandError,
    CredentialError,
    CredentialNotConfiguredError,
    GitOperationError,
    NotInRepositoryError,
)


class TestCommitLspError:
    """Tests for the CommitLspError hierarchy."""

    def test_hierarchy(self):
        assert issubclass(NotInRepositoryError, GitOperationError)
        assert issubclass(CredentialCommandError, CredentialError)
        assert issubclass(CredentialNotConfiguredError, CredentialError)
        for error_type in (GitOperationError, ConfigError, CredentialError):
            assert issubclass(error_type, CommitLspError)

    def test_message(self):
        assert str(ConfigError("bad kind")) == "bad kind"

    def test_not_in_repository_message(self):
        assert str(NotInRepositoryError()) == "Not in a git repository"


class TestCredentialCommandError:
    """Tests for CredentialCommandError messages."""

    def test_exit_status_message(self):
        error = CredentialCommandError("pass", returncode=2, stderr="locked")

        assert str(error) == "Credentials command 'pass' exited with status 2: locked"

    def test_spawn_failure_message(self):
        error = CredentialCommandError("pass")

        assert error.is_spawn_failure
        assert str(error) == "Failed to run credentials command 'pass'"


class TestUpstreamErrors:
    """Tests for the upstream error taxonomy."""

    def test_subclasses(self):
        for error in (
            UpstreamTransportError(),
            UpstreamAuthenticationError(),
            UpstreamOtherError("bad"),
        ):
            assert isinstance(error, UpstreamError)

    def test_platform_prefix(self):
        error = UpstreamAuthenticationError(platform="GitLab")

        assert str(error) == "[GitLab] Authentication failed"
        assert error.platform == "GitLab"

    def test_inconsistency_is_not_upstream(self):
        error = TrackerInconsistencyError(1, 2)

        assert not isinstance(error, UpstreamError)
        assert "#2" in str(error) and "#1" in str(error)
