"""Probe for an API key saved in secure storage."""

from collections.abc import Awaitable, Callable

import structlog

from gemini_auth.enums import AuthType

from .api_key_storage import load_api_key
from .types import SOURCE_STORED, CredentialSource, ProbeResult

log = structlog.get_logger(__name__)

ApiKeyLoader = Callable[[], Awaitable[str | None]]


class StoredCredentialProbe:
    """API key previously saved to the keyring or the encrypted key file.

    Storage failures (locked keychain, corrupted file) are logged and
    reported as "not available".
    """

    def __init__(self, loader: ApiKeyLoader | None = None) -> None:
        """Initialize the probe.

        Args:
            loader: Coroutine function returning the stored key or None
                (defaults to ``load_api_key``)
        """
        self._loader = loader

    @property
    def name(self) -> str:
        return SOURCE_STORED

    async def probe(self) -> ProbeResult:
        try:
            loader = self._loader or load_api_key
            api_key = await loader()
        except Exception as e:
            log.warning("stored_credentials_load_failed", error=str(e))
            return ProbeResult.miss(self.name, f"Failed to load stored API key: {e}")

        if not api_key:
            return ProbeResult.miss(self.name, "No stored API key")

        log.debug("stored_credential_found")
        return ProbeResult.hit(
            self.name,
            CredentialSource(source=SOURCE_STORED, value=api_key, auth_type=AuthType.USE_GEMINI),
        )
