"""Configuration for gemini-auth.

Key Components:
    - Settings: Merged settings with YAML/JSON loading and env overrides
    - AuthSettings: Selected and enforced auth types
    - AuthConfig: Interface of the runtime config collaborator
    - RuntimeConfig: Runtime config used by the CLI

Example:
    >>> from gemini_auth.config import Settings
    >>> settings = Settings.load()
    >>> settings.security.auth.enforced_type
"""

from gemini_auth.config.runtime import AuthConfig, RuntimeConfig
from gemini_auth.config.settings import (
    USER_SETTINGS_PATH,
    AuthSettings,
    SecuritySettings,
    Settings,
)

__all__ = [
    "AuthConfig",
    "AuthSettings",
    "RuntimeConfig",
    "SecuritySettings",
    "Settings",
    "USER_SETTINGS_PATH",
]
