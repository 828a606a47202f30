"""Credential retrieval through a user-configured command.

Users keep their issue tracker tokens in a password manager and configure a
command that prints the token, e.g. ``["pass", "show", "azure/pat"]``. The
command is executed once while the tracker is being built.

SECURITY: the command's standard output is the secret. It is never logged
and never included in exception messages; only the exit status and the
error stream are kept for diagnostics.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

from commit_lsp.utils.errors import CredentialCommandError, CredentialNotConfiguredError
from commit_lsp.utils.logging import log_command

logger = logging.getLogger(__name__)


class Credential:
    """An opaque secret held only in memory.

    ``str()`` and ``repr()`` are masked so the value cannot leak into logs
    or tracebacks by accident. Use ``reveal()`` at the point of use.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        self._value = value

    def reveal(self) -> str:
        """Return the secret value."""
        return self._value

    def __bool__(self) -> bool:
        return bool(self._value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Credential):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return "Credential('***')"

    __str__ = __repr__


def resolve_credential(command: Sequence[str] | None) -> Credential:
    """Run a credential command and capture its output as a secret.

    Args:
        command: Argument list; the first element is the executable. The
            list is passed to the OS as-is, no shell is involved.

    Returns:
        The trimmed standard output wrapped as a Credential

    Raises:
        CredentialNotConfiguredError: If command is None or empty
        CredentialCommandError: If the command cannot be started or exits
            with a non-zero status
    """
    if not command:
        raise CredentialNotConfiguredError()

    executable = command[0]
    try:
        result = subprocess.run(
            list(command),
            capture_output=True,
            stdin=subprocess.DEVNULL,
        )
    except OSError as e:
        log_command(executable, None)
        raise CredentialCommandError(executable, stderr=str(e)) from e

    log_command(executable, result.returncode)

    # stderr is diagnostic only, so undecodable bytes are replaced
    stderr = (result.stderr or b"").decode("utf-8", errors="replace").strip()
    if result.returncode != 0:
        logger.warning(
            "Failed to execute credentials command %s (exit code %s): %s",
            executable,
            result.returncode,
            stderr,
        )
        raise CredentialCommandError(executable, returncode=result.returncode, stderr=stderr)

    try:
        secret = (result.stdout or b"").decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("Credentials command %s printed output that is not UTF-8", executable)
        raise CredentialCommandError(
            executable,
            returncode=result.returncode,
            message=f"Credentials command '{executable}' printed output that is not valid UTF-8",
        ) from None

    return Credential(secret.strip())


__all__ = [
    "Credential",
    "resolve_credential",
]
