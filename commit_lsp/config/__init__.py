"""Configuration management for commit-lsp."""

from commit_lsp.config.settings import (
    RemoteConfig,
    UserConfig,
    default_config_path,
    demo_folder_from_env,
    is_debug_enabled,
    load_user_config,
    parse_backend_kind,
)
from commit_lsp.utils.errors import ConfigError

__all__ = [
    "ConfigError",
    "RemoteConfig",
    "UserConfig",
    "default_config_path",
    "demo_folder_from_env",
    "is_debug_enabled",
    "load_user_config",
    "parse_backend_kind",
]
