"""Git repository discovery.

Resolves the top-level directory of the repository the editor is working in
and reads the URL of its remote. Linked worktrees need special handling:
``git rev-parse --show-toplevel`` can fail inside them (for example while
git is editing a commit message from within the worktree's metadata
directory), so the root is recovered by matching the current metadata
directory against every registered worktree.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from commit_lsp.utils.errors import GitOperationError, NotInRepositoryError
from commit_lsp.utils.logging import log_command

logger = logging.getLogger(__name__)


def _run_git(args: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run a git command and capture its output.

    Raises:
        GitOperationError: If the git executable cannot be started
    """
    command = ["git", *args]
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            # Worktree paths are raw bytes; keep undecodable ones as surrogates
            encoding="utf-8",
            errors="surrogateescape",
            stdin=subprocess.DEVNULL,
        )
    except OSError as e:
        log_command(" ".join(command), None)
        raise GitOperationError(f"Failed to run git: {e}") from e

    log_command(" ".join(command), result.returncode)
    return result


def _query_path(args: list[str], cwd: Path | None = None) -> Path | None:
    """Run a git query that prints a single path, or None if it fails."""
    result = _run_git(args, cwd)
    output = result.stdout.strip() if result.stdout else ""
    if result.returncode != 0 or not output:
        return None
    return Path(output)


def parse_worktree_list(output: str) -> list[Path]:
    """Extract worktree paths from ``git worktree list --porcelain`` output.

    Each worktree is a block of ``key value`` lines; the first line of a block
    is ``worktree <path>``.
    """
    worktrees: list[Path] = []
    for line in output.splitlines():
        if line.startswith("worktree "):
            worktrees.append(Path(line[len("worktree ") :]))
    return worktrees


def list_worktrees(cwd: Path | None = None) -> list[Path]:
    """List the working directories of all worktrees registered for a repository."""
    result = _run_git(["worktree", "list", "--porcelain"], cwd)
    if result.returncode != 0:
        return []
    return parse_worktree_list(result.stdout or "")


def find_repo_root(cwd: Path | None = None) -> Path:
    """Determine the top-level directory of the current repository.

    Ordinary clones are answered by ``git rev-parse --show-toplevel``. When
    that fails, the metadata directory of ``cwd`` is compared against the
    metadata directory of each registered worktree. The first exact match
    wins; the main worktree (whose metadata directory is the common one) is
    used when nothing matches exactly.

    Args:
        cwd: Directory to resolve from (default: process working directory)

    Returns:
        The repository root directory

    Raises:
        NotInRepositoryError: If cwd is not inside a repository or no
            worktree matches it
    """
    toplevel = _query_path(["rev-parse", "--show-toplevel"], cwd)
    if toplevel is not None:
        return toplevel

    target = _query_path(["rev-parse", "--absolute-git-dir"], cwd)
    common = _query_path(["rev-parse", "--path-format=absolute", "--git-common-dir"], cwd)
    if target is None or common is None:
        raise NotInRepositoryError()

    main_worktree: Path | None = None
    for candidate in list_worktrees(cwd):
        git_dir = _query_path(["rev-parse", "--absolute-git-dir"], candidate)
        if git_dir is None:
            # Stale worktree (directory removed without `git worktree prune`)
            logger.debug("Skipping worktree %s: metadata query failed", candidate)
            continue

        if git_dir == target:
            return candidate
        if git_dir == common and main_worktree is None:
            main_worktree = candidate

    if main_worktree is not None:
        logger.debug("No worktree matched %s, using main worktree %s", target, main_worktree)
        return main_worktree

    raise NotInRepositoryError(f"No worktree matches git directory {target}")


def get_remote_url(remote: str = "origin", cwd: Path | None = None) -> str | None:
    """Get the URL configured for a remote.

    Args:
        remote: Name of the remote
        cwd: Directory inside the repository

    Returns:
        The remote URL, or None if the remote does not exist
    """
    try:
        result = _run_git(["ls-remote", "--get-url", remote], cwd)
    except GitOperationError as e:
        logger.debug("Failed to query remote url: %s", e)
        return None

    url = result.stdout.strip() if result.stdout else ""
    # git echoes the remote name back when no such remote is configured
    if result.returncode != 0 or not url or url == remote:
        return None
    return url


__all__ = [
    "find_repo_root",
    "get_remote_url",
    "list_worktrees",
    "parse_worktree_list",
]
