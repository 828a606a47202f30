"""Allow running as ``python -m commit_lsp``."""

from commit_lsp.cli import run

if __name__ == "__main__":
    run()
