"""Environment variable probe for API keys."""

import os
from collections.abc import MutableMapping

import structlog

from gemini_auth.enums import AuthType

from .types import (
    GEMINI_API_KEY_ENV,
    GOOGLE_API_KEY_ENV,
    SOURCE_ENV_GEMINI,
    SOURCE_ENV_GOOGLE,
    CredentialSource,
    ProbeResult,
)

log = structlog.get_logger(__name__)

# Checked in order; the first variable set wins
ENVIRONMENT_KEYS: tuple[tuple[str, str, AuthType], ...] = (
    (GEMINI_API_KEY_ENV, SOURCE_ENV_GEMINI, AuthType.USE_GEMINI),
    (GOOGLE_API_KEY_ENV, SOURCE_ENV_GOOGLE, AuthType.USE_VERTEX_AI),
)


class EnvironmentProbe:
    """API keys injected as environment variables.

    This is the cheapest source and is always checked first. Suitable for
    CI/CD pipelines, containers and shells with exported keys.

    Example:
        >>> os.environ['GEMINI_API_KEY'] = 'AIza...'
        >>> result = await EnvironmentProbe().probe()
        >>> result.credential.source
        'environment:GEMINI_API_KEY'
    """

    def __init__(self, environ: MutableMapping[str, str] | None = None) -> None:
        """Initialize the probe.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)
        """
        self._environ = environ

    @property
    def name(self) -> str:
        return "environment"

    @property
    def environ(self) -> MutableMapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    async def probe(self) -> ProbeResult:
        for var_name, source, auth_type in ENVIRONMENT_KEYS:
            value = self.environ.get(var_name)
            if value:
                log.debug("environment_credential_found", variable=var_name)
                return ProbeResult.hit(
                    self.name,
                    CredentialSource(source=source, value=value, auth_type=auth_type),
                )

        return ProbeResult.miss(self.name, f"Neither {GEMINI_API_KEY_ENV} nor {GOOGLE_API_KEY_ENV} is set")


def publish_api_key(value: str, environ: MutableMapping[str, str] | None = None) -> None:
    """Expose a discovered API key as ``GEMINI_API_KEY`` for this process.

    Compatibility shim for code paths that read the key straight from the
    environment instead of receiving the resolved credential. Changes only
    affect the current process and its children.

    Args:
        value: API key to publish
        environ: Mapping to write to (defaults to ``os.environ``)
    """
    if not value:
        raise ValueError("Credential value cannot be empty")

    target = environ if environ is not None else os.environ
    target[GEMINI_API_KEY_ENV] = value
    log.debug("api_key_published", variable=GEMINI_API_KEY_ENV)
