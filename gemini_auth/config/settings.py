"""
Settings using Pydantic for type-safe auth policy management.

Settings are read from the user settings file (JSON or YAML) and can be
overridden through ``GEMINI_AUTH_`` prefixed environment variables, e.g.
``GEMINI_AUTH_SECURITY__AUTH__ENFORCED_TYPE=vertex-ai``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from gemini_auth.enums import AuthType
from gemini_auth.exceptions import ConfigurationError

SETTINGS_DIRECTORY_NAME = ".gemini"
USER_SETTINGS_DIR = Path.home() / SETTINGS_DIRECTORY_NAME
USER_SETTINGS_PATH = USER_SETTINGS_DIR / "settings.json"


class AuthSettings(BaseModel):
    """Authentication selection and policy."""

    selected_type: AuthType | None = Field(
        default=None,
        validation_alias=AliasChoices("selected_type", "selectedType"),
        description="Auth type chosen by the user",
    )
    enforced_type: AuthType | None = Field(
        default=None,
        validation_alias=AliasChoices("enforced_type", "enforcedType"),
        description="Auth type required by organizational policy",
    )
    use_external: bool = Field(
        default=False,
        validation_alias=AliasChoices("use_external", "useExternal"),
        description="Authentication is delegated to an external provider",
    )


class SecuritySettings(BaseModel):
    """Security-related settings."""

    auth: AuthSettings = Field(default_factory=AuthSettings)


class Settings(BaseSettings):
    """Merged CLI settings.

    Only the sections the auth subsystem consumes are modelled; unknown
    top-level keys in the settings file are ignored.
    """

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_AUTH_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment beats values read from the settings file
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @property
    def enforced_auth_type(self) -> AuthType | None:
        """Auth type enforced by policy, if any."""
        return self.security.auth.enforced_type

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> Settings:
        """Load settings from a file, falling back to defaults.

        An explicit path must exist. The default user settings path is
        optional: when it is absent, defaults (plus environment overrides)
        are returned.

        Raises:
            ConfigurationError: If the settings file is invalid
        """
        if config_path is not None:
            return cls.from_yaml(str(config_path))
        if USER_SETTINGS_PATH.exists():
            return cls.from_yaml(str(USER_SETTINGS_PATH))
        return cls()

    @classmethod
    def from_yaml(cls, config_path: str) -> Settings:
        """Load settings from a YAML (or JSON) file with environment variable interpolation.

        Supports ${VAR_NAME} syntax for environment variable substitution.

        Args:
            config_path: Path to the settings file

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If the file is invalid or missing
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Settings file not found: {config_path}")

        try:
            with open(config_file) as f:
                content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read settings file: {config_path}") from e

        try:
            content = cls._interpolate_env_vars(content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in settings: {e}") from e

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid syntax in {config_path}: {e}") from e

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Settings must be an object, not a list or scalar")

        try:
            return cls(**config_dict)
        except Exception as e:
            raise ConfigurationError(f"Failed to validate settings: {e}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        Supports two syntaxes:
        - ${VAR_NAME} - Required environment variable (raises if not set)
        - ${VAR_NAME:-default} - Optional with default value

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            stripped = line.lstrip()
            if stripped.startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))
