"""Credential data types and well-known names.

Example:
    >>> cred = CredentialSource(source=SOURCE_GCLOUD_CLI, value="ya29.token", auth_type=AuthType.OAUTH_PERSONAL)
    >>> result = ProbeResult.hit("gcloud-cli", cred)
    >>> result.found
    True
"""

from __future__ import annotations

from dataclasses import dataclass

from gemini_auth.enums import AuthType

# Environment variables
GEMINI_API_KEY_ENV = "GEMINI_API_KEY"
GOOGLE_API_KEY_ENV = "GOOGLE_API_KEY"
USE_GCA_ENV = "GOOGLE_GENAI_USE_GCA"
USE_VERTEXAI_ENV = "GOOGLE_GENAI_USE_VERTEXAI"
ADC_PATH_ENV = "GOOGLE_APPLICATION_CREDENTIALS"

# Source tags
SOURCE_ENV_GEMINI = f"environment:{GEMINI_API_KEY_ENV}"
SOURCE_ENV_GOOGLE = f"environment:{GOOGLE_API_KEY_ENV}"
SOURCE_STORED = "stored-credentials"
SOURCE_GCLOUD_CLI = "gcloud-cli"
SOURCE_ADC = "application-default-credentials"
SOURCE_ADC_USER = f"{SOURCE_ADC}:user"
SOURCE_ADC_SERVICE_ACCOUNT = f"{SOURCE_ADC}:service-account"


@dataclass(frozen=True)
class CredentialSource:
    """A credential found by a probe.

    Attributes:
        source: Origin tag (e.g., "environment:GEMINI_API_KEY", "gcloud-cli")
        value: Credential value: an API key, an access token, or a file path
        auth_type: Auth type this credential authenticates with
    """

    source: str
    value: str
    auth_type: AuthType

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError(f"Credential value cannot be empty (source: {self.source})")

    def masked_value(self) -> str:
        """Value safe for display: file paths as-is, secrets masked."""
        if self.source.startswith(SOURCE_ADC):
            return self.value
        if len(self.value) > 8:
            return self.value[:4] + "*" * (len(self.value) - 8) + self.value[-4:]
        return "*" * len(self.value)


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single probe.

    Either a credential or the reason none was found. Production call sites
    only look at ``credential``; ``reason`` is kept for diagnostics.
    """

    probe: str
    credential: CredentialSource | None = None
    reason: str | None = None

    @property
    def found(self) -> bool:
        return self.credential is not None

    @classmethod
    def hit(cls, probe: str, credential: CredentialSource) -> ProbeResult:
        return cls(probe=probe, credential=credential)

    @classmethod
    def miss(cls, probe: str, reason: str) -> ProbeResult:
        return cls(probe=probe, reason=reason)
