"""Exceptions raised while talking to a remote issue tracker.

Every adapter translates its backend-specific failures into this closed
hierarchy at its boundary, so callers only ever see:

- UpstreamTransportError: the remote could not be reached (network, spawn)
- UpstreamAuthenticationError: the remote rejected the credential
- UpstreamOtherError: anything else (malformed payloads, unexpected shapes)

TrackerInconsistencyError is deliberately outside the hierarchy. It signals
an adapter returning a different ticket than the one requested, which is a
programming error rather than a remote failure.
"""

from __future__ import annotations


class UpstreamError(Exception):
    """Base exception for failures interacting with an issue tracker.

    Attributes:
        platform: Optional name of the backend that failed
    """

    def __init__(self, message: str, platform: str | None = None) -> None:
        self.platform = platform
        if platform:
            message = f"[{platform}] {message}"
        super().__init__(message)


class UpstreamTransportError(UpstreamError):
    """Input/output with the remote failed (e.g. no internet connection)."""

    def __init__(
        self,
        message: str = "IO error interacting with remote",
        platform: str | None = None,
    ) -> None:
        super().__init__(message, platform)


class UpstreamAuthenticationError(UpstreamError):
    """The remote rejected the configured credential.

    This can occur due to:
    - Invalid or expired access tokens
    - A missing credential for a backend that requires one
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        platform: str | None = None,
    ) -> None:
        super().__init__(message, platform)


class UpstreamOtherError(UpstreamError):
    """Unspecified other errors, carrying a free-text description."""

    def __init__(self, message: str, platform: str | None = None) -> None:
        super().__init__(message, platform)


class TrackerInconsistencyError(RuntimeError):
    """An adapter returned a ticket whose id differs from the requested one."""

    def __init__(self, requested_id: int, returned_id: int) -> None:
        self.requested_id = requested_id
        self.returned_id = returned_id
        super().__init__(
            f"Adapter returned ticket #{returned_id} when asked for ticket #{requested_id}"
        )


__all__ = [
    "UpstreamError",
    "UpstreamTransportError",
    "UpstreamAuthenticationError",
    "UpstreamOtherError",
    "TrackerInconsistencyError",
]
