"""User configuration for commit-lsp.

The configuration file is TOML and lists per-remote settings:

    [[remotes]]
    host = "dev.azure.com"
    credentials_command = ["pass", "show", "azure/pat"]

    [[remotes]]
    host = "git.example.com"
    kind = "gitlab"
    issue_tracker_url = "https://gitlab.example.com/team/project"
    credentials_command = ["secret-tool", "lookup", "service", "gitlab"]

A remote entry applies to every remote URL containing its ``host`` string.
Entries are checked in file order and the first match wins.

Environment Variables:
    COMMIT_LSP_CONFIG: Path to the configuration file
    XDG_CONFIG_HOME: Base directory for the default configuration path
    COMMIT_LSP_DEBUG: Set to "true" to enable debug-only behavior
    COMMIT_LSP_DEMO_FOLDER: Fixture directory for the offline backend
        (only honored when COMMIT_LSP_DEBUG is enabled)
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from commit_lsp.integrations.remote import BackendKind
from commit_lsp.utils.errors import ConfigError

if TYPE_CHECKING:
    from commit_lsp.healthcheck import HealthReport

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "COMMIT_LSP_CONFIG"
DEBUG_ENV_VAR = "COMMIT_LSP_DEBUG"
DEMO_FOLDER_ENV_VAR = "COMMIT_LSP_DEMO_FOLDER"

# Accepted spellings of backend kinds in the configuration file
_KIND_ALIASES: dict[str, BackendKind] = {
    "demo": BackendKind.DEMO,
    "github": BackendKind.GITHUB,
    "gitlab": BackendKind.GITLAB,
    "azure_devops": BackendKind.AZURE_DEVOPS,
    "azuredevops": BackendKind.AZURE_DEVOPS,
    "azure-devops": BackendKind.AZURE_DEVOPS,
}


def parse_backend_kind(value: str | None, context: str = "") -> BackendKind | None:
    """Safely parse a BackendKind from a configuration value.

    Args:
        value: The string value to parse (e.g., "github", "AzureDevOps")
        context: Context string for error messages (e.g., the remote host)

    Returns:
        Parsed BackendKind, or None if value is None or empty

    Raises:
        ConfigError: If value is not a known backend kind
    """
    if value is None or value.strip() == "":
        return None

    kind = _KIND_ALIASES.get(value.strip().lower())
    if kind is None:
        context_msg = f" in {context}" if context else ""
        allowed = ", ".join(sorted(_KIND_ALIASES))
        raise ConfigError(f"Invalid issue tracker kind '{value}'{context_msg}. Allowed values: {allowed}")
    return kind


@dataclass(frozen=True)
class RemoteConfig:
    """Per-remote settings.

    Attributes:
        host: Substring matched against the remote URL
        credentials_command: Argument list printing the access token
        kind: Explicit backend kind, overriding the guess from the host
        issue_tracker_url: URL used instead of the remote URL when building
            the tracker (e.g. a mirror whose issues live elsewhere)
    """

    host: str
    credentials_command: tuple[str, ...] = ()
    kind: BackendKind | None = None
    issue_tracker_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RemoteConfig:
        """Create a RemoteConfig from a parsed TOML table.

        Raises:
            ConfigError: If required keys are missing or have the wrong type
        """
        host = data.get("host")
        if not isinstance(host, str) or not host:
            raise ConfigError("Remote entry is missing a 'host' string")

        command = data.get("credentials_command", [])
        if not isinstance(command, list) or not all(isinstance(arg, str) for arg in command):
            raise ConfigError(f"'credentials_command' for '{host}' must be a list of strings")

        kind_value = data.get("kind")
        if kind_value is not None and not isinstance(kind_value, str):
            raise ConfigError(f"'kind' for '{host}' must be a string")

        url = data.get("issue_tracker_url")
        if url is not None and not isinstance(url, str):
            raise ConfigError(f"'issue_tracker_url' for '{host}' must be a string")

        return cls(
            host=host,
            credentials_command=tuple(command),
            kind=parse_backend_kind(kind_value, context=f"remote '{host}'"),
            issue_tracker_url=url or None,
        )


@dataclass(frozen=True)
class UserConfig:
    """The complete user configuration."""

    remotes: tuple[RemoteConfig, ...] = field(default_factory=tuple)

    def find_remote(self, url: str) -> RemoteConfig | None:
        """Return the first remote entry whose host occurs in url."""
        for remote in self.remotes:
            if remote.host in url:
                return remote
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserConfig:
        remotes = data.get("remotes", [])
        if not isinstance(remotes, list) or not all(isinstance(r, dict) for r in remotes):
            raise ConfigError("'remotes' must be an array of tables")
        return cls(remotes=tuple(RemoteConfig.from_dict(r) for r in remotes))


def default_config_path() -> Path:
    """Location of the user configuration file."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()

    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "commit-lsp" / "config.toml"


def load_user_config(
    path: Path | None = None,
    health: HealthReport | None = None,
) -> UserConfig:
    """Load the user configuration.

    A missing file is not an error and yields an empty configuration.

    Args:
        path: Configuration file (default: default_config_path())
        health: Optional report receiving the outcome

    Returns:
        The loaded configuration

    Raises:
        ConfigError: If the file cannot be read or is not valid
    """
    path = path or default_config_path()
    check = health.start("Load user config") if health is not None else None

    if not path.exists():
        logger.debug("No config file at %s", path)
        if check is not None:
            check.info(f"No config file at {path}")
        return UserConfig()

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
        config = UserConfig.from_dict(data)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if check is not None:
            check.error(f"Failed to read {path}: {e}")
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    except ConfigError as e:
        if check is not None:
            check.error(str(e))
        raise

    if check is not None:
        check.ok_with(f"Loaded {len(config.remotes)} remote(s) from {path}")
    return config


def is_debug_enabled() -> bool:
    """Whether debug-only behavior (such as the demo backend) is enabled."""
    return os.environ.get(DEBUG_ENV_VAR, "false").lower() == "true"


def demo_folder_from_env() -> Path | None:
    """Fixture directory forcing the offline backend, if enabled."""
    if not is_debug_enabled():
        return None
    folder = os.environ.get(DEMO_FOLDER_ENV_VAR)
    return Path(folder) if folder else None


__all__ = [
    "RemoteConfig",
    "UserConfig",
    "default_config_path",
    "demo_folder_from_env",
    "is_debug_enabled",
    "load_user_config",
    "parse_backend_kind",
]
