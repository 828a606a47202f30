"""Health reporting for the ``checkhealth`` command.

Components report their state at each decision point (remote lookup,
credential retrieval, adapter construction, ...). The language server uses
a silent report so nothing reaches stdout, while ``checkhealth`` prints every
entry so users can diagnose a missing integration.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rich.console import Console
from rich.markup import escape

from commit_lsp.utils.logging import log_message


class ComponentState(Enum):
    """Outcome of a single health check."""

    OK = "ok"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# (label, theme style) used when printing each state
_STATE_LABELS: dict[ComponentState, tuple[str, str]] = {
    ComponentState.OK: ("OK", "success"),
    ComponentState.INFO: ("INFO", "info"),
    ComponentState.WARNING: ("WARNING", "warning"),
    ComponentState.ERROR: ("ERROR", "error"),
}


@dataclass(frozen=True)
class HealthEntry:
    """A recorded health check result."""

    context: str
    name: str
    state: ComponentState
    detail: str | None = None


class HealthReport:
    """Collects health check results and optionally prints them.

    Attributes:
        context: Title of the current group of checks
        entries: Every entry reported so far, in order
    """

    def __init__(
        self,
        context: str = "",
        *,
        is_silent: bool = False,
        console: Console | None = None,
    ) -> None:
        self.context = context
        self.is_silent = is_silent
        self.entries: list[HealthEntry] = []
        if console is None:
            from commit_lsp.utils.console import console as default_console

            console = default_console
        self._console = console

    @classmethod
    def silent(cls) -> HealthReport:
        """Create a report that records entries without printing them."""
        return cls(is_silent=True)

    def set_context(self, context: str) -> None:
        """Start a new group of checks and print its header."""
        self.context = context
        if self.is_silent:
            return

        from commit_lsp.utils.console import print_header

        print_header(context, target=self._console)

    def report(self, name: str, state: ComponentState, detail: str | None = None) -> None:
        """Record the result of a check."""
        self.entries.append(HealthEntry(self.context, name, state, detail))
        if state is ComponentState.ERROR:
            log_message(f"Health check '{name}' failed: {detail or ''}")

        if self.is_silent:
            return

        label, style = _STATE_LABELS[state]
        self._console.print(f"\n- {escape(name)}: [{style}]{label}[/{style}]")
        if detail:
            self._console.print(f"    {escape(detail)}")

    def start(self, name: str) -> OngoingCheck:
        """Begin a named check that is completed through the returned handle."""
        return OngoingCheck(self, name)

    @property
    def has_errors(self) -> bool:
        return any(entry.state is ComponentState.ERROR for entry in self.entries)


class OngoingCheck:
    """A started check waiting for its outcome."""

    def __init__(self, health: HealthReport, name: str) -> None:
        self._health = health
        self.name = name

    def complete(self, state: ComponentState, detail: str | None = None) -> None:
        self._health.report(self.name, state, detail)

    def ok(self) -> None:
        self.complete(ComponentState.OK)

    def ok_with(self, detail: str) -> None:
        self.complete(ComponentState.OK, detail)

    def info(self, detail: str) -> None:
        self.complete(ComponentState.INFO, detail)

    def warn(self, detail: str) -> None:
        self.complete(ComponentState.WARNING, detail)

    def error(self, detail: str) -> None:
        self.complete(ComponentState.ERROR, detail)


__all__ = [
    "ComponentState",
    "HealthEntry",
    "HealthReport",
    "OngoingCheck",
]
