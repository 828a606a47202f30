"""Remote URL parsing and backend detection.

This module provides:
- BackendKind enum for the supported issue tracker backends
- RemoteDescriptor dataclass describing a parsed remote URL
- parse_remote_url() for https/ssh/scp-like remote URLs, including the
  Azure DevOps layouts
- guess_backend_kind() for picking a backend from the remote host
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class RemoteUrlParseError(ValueError):
    """Raised when a remote URL cannot be parsed."""

    def __init__(self, url: str, reason: str = "unrecognized remote url format") -> None:
        self.url = url
        super().__init__(f"Failed to parse remote url '{redact_url(url)}': {reason}")


class BackendKind(Enum):
    """Supported issue tracker backends.

    The value is the human-readable name shown in health reports.
    """

    DEMO = "<DEMO>"
    GITHUB = "GitHub"
    GITLAB = "GitLab"
    AZURE_DEVOPS = "Azure DevOps"

    @property
    def requires_credential(self) -> bool:
        """Whether an adapter of this kind cannot work without a credential."""
        return self in (BackendKind.GITLAB, BackendKind.AZURE_DEVOPS)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RemoteDescriptor:
    """Components of a parsed remote URL.

    Attributes:
        host: Host name without user info or port
        name: Repository name without a trailing ``.git``
        owner: Everything between host and name (user, group/subgroup, or
            the Azure DevOps project)
        organization: Azure DevOps organization, None for other hosts
        scheme: ``https``, ``ssh``, ... (``ssh`` for scp-like urls)
    """

    host: str
    name: str
    owner: str | None = None
    organization: str | None = None
    scheme: str = "https"

    @property
    def full_name(self) -> str:
        """``owner/name`` or just ``name`` if there is no owner."""
        if self.owner:
            return f"{self.owner}/{self.name}"
        return self.name

    def __str__(self) -> str:
        if self.organization:
            return f"{self.host}/{self.organization}/{self.full_name}"
        return f"{self.host}/{self.full_name}"


# scheme://[user[:password]@]host[:port][/path]
_URL_PATTERN = re.compile(
    r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.-]*)://"
    r"(?:(?P<userinfo>[^@/]*)@)?"
    r"(?P<host>\[[^\]]+\]|[^:/]+)"
    r"(?::(?P<port>\d*))?"
    r"(?P<path>/.*)?$"
)

# [user@]host:path (scp-like syntax, no slash before the colon)
_SCP_PATTERN = re.compile(r"^(?:(?P<user>[^@/]+)@)?(?P<host>[^:/]+):(?P<path>.+)$")

_AZURE_HOSTS = frozenset({"dev.azure.com", "ssh.dev.azure.com"})
_VISUALSTUDIO_SUFFIX = ".visualstudio.com"


def _split_path(path: str) -> list[str]:
    return [segment for segment in path.split("/") if segment]


def _strip_git_suffix(name: str) -> str:
    return name[: -len(".git")] if name.endswith(".git") else name


def _parse_azure(url: str, host: str, segments: list[str], scheme: str) -> RemoteDescriptor:
    """Parse the Azure DevOps remote layouts.

    - https://dev.azure.com/<org>/<project>/_git/<repo>
    - git@ssh.dev.azure.com:v3/<org>/<project>/<repo>
    - https://<org>.visualstudio.com/[DefaultCollection/]<project>/_git/<repo>
    - <org>@vs-ssh.visualstudio.com:v3/<org>/<project>/<repo>
    """
    if segments and segments[0] == "v3":
        parts = segments[1:]
    elif host.endswith(_VISUALSTUDIO_SUFFIX):
        org = host[: -len(_VISUALSTUDIO_SUFFIX)]
        parts = [org, *[s for s in segments if s != "DefaultCollection"]]
    else:
        parts = segments

    parts = [segment for segment in parts if segment != "_git"]
    if len(parts) != 3:
        raise RemoteUrlParseError(url, "expected <organization>/<project>/<repository>")

    organization, project, repository = parts
    return RemoteDescriptor(
        host=host,
        name=_strip_git_suffix(repository),
        owner=project,
        organization=organization,
        scheme=scheme,
    )


def parse_remote_url(url: str) -> RemoteDescriptor:
    """Parse a git remote URL into its components.

    Args:
        url: Remote URL as printed by ``git ls-remote --get-url``

    Returns:
        The parsed RemoteDescriptor

    Raises:
        RemoteUrlParseError: If the URL has no recognizable host and path
    """
    url = url.strip()
    if not url:
        raise RemoteUrlParseError(url, "empty url")

    match = _URL_PATTERN.match(url)
    if match:
        scheme = match.group("scheme").lower()
        host = match.group("host")
        path = match.group("path") or ""
        if scheme == "file":
            raise RemoteUrlParseError(url, "local repositories have no issue tracker")
    else:
        # Local paths such as /srv/repo.git or ./repo also contain no host
        if url.startswith(("/", ".", "~")) or url.lower().startswith("file:") or Path(url).drive:
            raise RemoteUrlParseError(url, "local repositories have no issue tracker")
        if "://" in url:
            raise RemoteUrlParseError(url)
        match = _SCP_PATTERN.match(url)
        if not match:
            raise RemoteUrlParseError(url)
        scheme = "ssh"
        host = match.group("host")
        path = match.group("path")

    host = host.lower()
    segments = _split_path(path)
    if not segments:
        raise RemoteUrlParseError(url, "missing repository path")

    if host in _AZURE_HOSTS or host.endswith(_VISUALSTUDIO_SUFFIX):
        return _parse_azure(url, host, segments, scheme)

    owner = "/".join(segments[:-1]) or None
    return RemoteDescriptor(
        host=host,
        name=_strip_git_suffix(segments[-1]),
        owner=owner,
        scheme=scheme,
    )


_HTTP_USERINFO_PATTERN = re.compile(r"^(https?://)[^@/]+@", re.IGNORECASE)


def redact_url(url: str) -> str:
    """Mask user info of http(s) URLs, which may embed an access token."""
    return _HTTP_USERINFO_PATTERN.sub(r"\1***@", url.strip())


def guess_backend_kind(
    descriptor: RemoteDescriptor,
    demo_folder: Path | None = None,
) -> BackendKind | None:
    """Guess the issue tracker backend from a remote.

    The first matching rule wins:
    1. A demo folder was supplied (debug builds only) -> DEMO
    2. dev.azure.com or ssh.dev.azure.com -> AZURE_DEVOPS
    3. github.com -> GITHUB
    4. host containing "gitlab" -> GITLAB

    Args:
        descriptor: Parsed remote URL
        demo_folder: Local fixture directory forcing the offline backend

    Returns:
        The guessed BackendKind, or None for unsupported hosts
    """
    if demo_folder is not None:
        return BackendKind.DEMO

    host = descriptor.host
    if host in _AZURE_HOSTS:
        return BackendKind.AZURE_DEVOPS
    if host == "github.com":
        return BackendKind.GITHUB
    if "gitlab" in host:
        return BackendKind.GITLAB
    return None


__all__ = [
    "BackendKind",
    "RemoteDescriptor",
    "RemoteUrlParseError",
    "guess_backend_kind",
    "parse_remote_url",
    "redact_url",
]
