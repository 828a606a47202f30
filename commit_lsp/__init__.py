"""commit-lsp - issue tracker integration for commit message editing.

This package resolves the issue tracker behind the current repository and
exposes ticket titles and descriptions to the commit message language server.
"""

__version__ = "0.2.0"

__all__ = [
    "__version__",
]
