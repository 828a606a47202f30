"""Logging configuration for commit-lsp.

The language server talks to the editor over stdio, so nothing may be
written to stdout. Logging therefore goes to a file and is disabled unless
requested through environment variables.

Environment Variables:
    COMMIT_LSP_LOG: Set to "true" to enable logging (default: "false")
    COMMIT_LSP_LOG_FILE: Path to log file (default: ~/.commit-lsp.log)
"""

import logging
import os
from pathlib import Path

# Environment variable configuration
LOG_ENABLED = os.environ.get("COMMIT_LSP_LOG", "false").lower() == "true"
LOG_FILE = Path(os.environ.get("COMMIT_LSP_LOG_FILE", str(Path.home() / ".commit-lsp.log")))

# Module-level logger instance
_logger: logging.Logger | None = None


def setup_logging() -> logging.Logger:
    """Configure the package logger based on environment variables.

    Creates a logger that writes to the configured log file when
    COMMIT_LSP_LOG is set to "true". Otherwise, uses a NullHandler
    to suppress all log output. Module loggers created with
    ``logging.getLogger(__name__)`` propagate into this logger.

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger("commit_lsp")

    # Clear any existing handlers
    logger.handlers.clear()

    if LOG_ENABLED:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(LOG_FILE)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.addHandler(logging.NullHandler())

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured logger instance, creating it if necessary."""
    global _logger
    if _logger is None:
        return setup_logging()
    return _logger


def log_message(message: str) -> None:
    """Log a message if logging is enabled.

    Args:
        message: Message to log
    """
    logger = get_logger()
    logger.info(message)


def log_command(command: str, exit_code: int | None = 0) -> None:
    """Log external command execution with its exit code.

    Only the command and its exit status are recorded. Output is never
    logged because credential commands print secrets.

    Args:
        command: The command that was executed
        exit_code: The exit code returned by the command (None if not spawned)
    """
    logger = get_logger()
    logger.info(f"COMMAND: {command} | EXIT_CODE: {exit_code}")


__all__ = [
    "LOG_ENABLED",
    "LOG_FILE",
    "setup_logging",
    "get_logger",
    "log_message",
    "log_command",
]
