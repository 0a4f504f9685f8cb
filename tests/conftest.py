"""Pytest configuration and shared fixtures."""

import os
from pathlib import Path

import pytest
import structlog

from gemini_auth.config.runtime import RuntimeConfig
from gemini_auth.config.settings import Settings
from gemini_auth.credentials.types import CredentialSource, ProbeResult
from gemini_auth.enums import AuthType, OutputFormat

AUTH_ENV_VARS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GOOGLE_GENAI_USE_GCA",
    "GOOGLE_GENAI_USE_VERTEXAI",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "GOOGLE_CLOUD_PROJECT",
    "GOOGLE_CLOUD_LOCATION",
    "INTEGRATION_TEST_FILE_DIR",
)


@pytest.fixture(autouse=True)
def clean_auth_env(monkeypatch):
    """Remove every auth-related environment variable for each test."""
    for var in AUTH_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    for var in list(os.environ):
        if var.startswith("GEMINI_AUTH_"):
            monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore default structlog configuration after CLI tests reconfigure it."""
    yield
    structlog.reset_defaults()


class StaticProbe:
    """Probe returning a fixed credential (or nothing) and counting calls."""

    def __init__(self, name: str, credential: CredentialSource | None = None) -> None:
        self._name = name
        self.credential = credential
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    async def probe(self) -> ProbeResult:
        self.calls += 1
        if self.credential is None:
            return ProbeResult.miss(self._name, "nothing here")
        return ProbeResult.hit(self._name, self.credential)


class RaisingProbe:
    """Probe that violates the never-raise contract."""

    def __init__(self, name: str = "broken") -> None:
        self._name = name
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    async def probe(self) -> ProbeResult:
        self.calls += 1
        raise RuntimeError("probe exploded")


@pytest.fixture
def api_key_credential() -> CredentialSource:
    """API key credential as found in stored credentials."""
    return CredentialSource(source="stored-credentials", value="AIzaStoredKey1234", auth_type=AuthType.USE_GEMINI)


@pytest.fixture
def gcloud_credential() -> CredentialSource:
    """Access token credential from gcloud."""
    return CredentialSource(source="gcloud-cli", value="ya29.token", auth_type=AuthType.OAUTH_PERSONAL)


@pytest.fixture
def settings() -> Settings:
    """Settings with no auth policy."""
    return Settings()


@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """Text-mode runtime config."""
    return RuntimeConfig(output_format=OutputFormat.TEXT)


@pytest.fixture
def settings_file(tmp_path: Path):
    """Factory writing a settings file and returning its path."""

    def _write(content: str, name: str = "settings.json") -> Path:
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def static_probe():
    """Factory for probes returning a fixed credential."""
    return StaticProbe


@pytest.fixture
def raising_probe():
    """Factory for probes that raise."""
    return RaisingProbe
