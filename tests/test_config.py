"""Tests for commit_lsp.config.settings module."""

from pathlib import Path

import pytest

from commit_lsp.config import (
    ConfigError,
    RemoteConfig,
    UserConfig,
    default_config_path,
    demo_folder_from_env,
    is_debug_enabled,
    load_user_config,
    parse_backend_kind,
)
from commit_lsp.healthcheck import ComponentState
from commit_lsp.integrations.remote import BackendKind

SAMPLE_CONFIG = """
[[remotes]]
host = "dev.azure.com"
credentials_command = ["pass", "show", "azure/pat"]

[[remotes]]
host = "git.example.com"
kind = "gitlab"
issue_tracker_url = "https://gitlab.example.com/team/project"
credentials_command = ["secret-tool", "lookup", "service", "gitlab"]
"""


class TestParseBackendKind:
    """Tests for parse_backend_kind function."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("github", BackendKind.GITHUB),
            ("GitLab", BackendKind.GITLAB),
            ("azure_devops", BackendKind.AZURE_DEVOPS),
            ("AzureDevOps", BackendKind.AZURE_DEVOPS),
            ("azure-devops", BackendKind.AZURE_DEVOPS),
            (" demo ", BackendKind.DEMO),
        ],
    )
    def test_valid_values(self, value, expected):
        assert parse_backend_kind(value) is expected

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_values(self, value):
        assert parse_backend_kind(value) is None

    def test_invalid_value_mentions_context(self):
        with pytest.raises(ConfigError, match="remote 'x'"):
            parse_backend_kind("bitbucket", context="remote 'x'")


class TestRemoteConfig:
    """Tests for RemoteConfig.from_dict."""

    def test_minimal_entry(self):
        remote = RemoteConfig.from_dict({"host": "github.com"})

        assert remote == RemoteConfig(host="github.com")

    def test_full_entry(self):
        remote = RemoteConfig.from_dict(
            {
                "host": "git.example.com",
                "kind": "gitlab",
                "issue_tracker_url": "https://gitlab.example.com/a/b",
                "credentials_command": ["pass", "show", "x"],
            }
        )

        assert remote.kind is BackendKind.GITLAB
        assert remote.credentials_command == ("pass", "show", "x")
        assert remote.issue_tracker_url == "https://gitlab.example.com/a/b"

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"host": ""},
            {"host": 1},
            {"host": "h", "credentials_command": "pass show x"},
            {"host": "h", "credentials_command": ["pass", 1]},
            {"host": "h", "kind": 3},
            {"host": "h", "kind": "svn"},
            {"host": "h", "issue_tracker_url": ["u"]},
        ],
    )
    def test_invalid_entries(self, data):
        with pytest.raises(ConfigError):
            RemoteConfig.from_dict(data)


class TestUserConfig:
    """Tests for UserConfig."""

    def test_find_remote_substring_match(self):
        config = UserConfig(remotes=(RemoteConfig(host="dev.azure.com"),))

        assert config.find_remote("https://org@dev.azure.com/org/p/_git/r") is not None
        assert config.find_remote("git@github.com:o/r.git") is None

    def test_find_remote_first_match_wins(self):
        first = RemoteConfig(host="example.com", kind=BackendKind.GITHUB)
        second = RemoteConfig(host="git.example.com", kind=BackendKind.GITLAB)
        config = UserConfig(remotes=(first, second))

        assert config.find_remote("git@git.example.com:a/b.git") is first

    def test_empty_config(self):
        assert UserConfig().find_remote("anything") is None

    def test_remotes_must_be_tables(self):
        with pytest.raises(ConfigError):
            UserConfig.from_dict({"remotes": ["github.com"]})


class TestLoadUserConfig:
    """Tests for load_user_config function."""

    def test_loads_toml(self, tmp_path: Path, silent_health):
        path = tmp_path / "config.toml"
        path.write_text(SAMPLE_CONFIG)

        config = load_user_config(path, health=silent_health)

        assert [r.host for r in config.remotes] == ["dev.azure.com", "git.example.com"]
        assert config.remotes[1].kind is BackendKind.GITLAB
        assert silent_health.entries[-1].state is ComponentState.OK

    def test_missing_file_is_empty(self, tmp_path: Path, silent_health):
        config = load_user_config(tmp_path / "absent.toml", health=silent_health)

        assert config == UserConfig()
        assert silent_health.entries[-1].state is ComponentState.INFO

    def test_invalid_toml(self, tmp_path: Path, silent_health):
        path = tmp_path / "config.toml"
        path.write_text("[[remotes]\nhost = ")

        with pytest.raises(ConfigError):
            load_user_config(path, health=silent_health)

        assert silent_health.has_errors

    def test_invalid_entry(self, tmp_path: Path, silent_health):
        path = tmp_path / "config.toml"
        path.write_text('[[remotes]]\nhost = "h"\nkind = "svn"\n')

        with pytest.raises(ConfigError, match="svn"):
            load_user_config(path, health=silent_health)

        assert silent_health.has_errors

    def test_without_health_report(self, tmp_path: Path):
        assert load_user_config(tmp_path / "absent.toml") == UserConfig()


class TestEnvironment:
    """Tests for environment-driven settings."""

    def test_config_path_override(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("COMMIT_LSP_CONFIG", str(tmp_path / "c.toml"))

        assert default_config_path() == tmp_path / "c.toml"

    def test_config_path_xdg(self, monkeypatch, tmp_path: Path):
        monkeypatch.delenv("COMMIT_LSP_CONFIG", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert default_config_path() == tmp_path / "commit-lsp" / "config.toml"

    def test_demo_folder_requires_debug(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("COMMIT_LSP_DEMO_FOLDER", str(tmp_path))
        monkeypatch.delenv("COMMIT_LSP_DEBUG", raising=False)

        assert not is_debug_enabled()
        assert demo_folder_from_env() is None

    def test_demo_folder_in_debug_mode(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("COMMIT_LSP_DEMO_FOLDER", str(tmp_path))
        monkeypatch.setenv("COMMIT_LSP_DEBUG", "true")

        assert demo_folder_from_env() == tmp_path
