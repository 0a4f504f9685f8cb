"""Stored API key: OS keyring first, encrypted file as fallback.

The module-level coroutines are the opaque loader the stored-credential
probe depends on. Keyring calls can block on desktop unlock prompts, so they
run in a worker thread.
"""

import asyncio
import logging
from pathlib import Path

from gemini_auth.config.settings import USER_SETTINGS_DIR

from .encrypted_backend import EncryptedFileBackend
from .keyring_backend import KeyringBackend

logger = logging.getLogger(__name__)

DEFAULT_API_KEY_ENTRY = "default-api-key"
API_KEY_FILE_PATH = USER_SETTINGS_DIR / "api-key.enc"


class HybridApiKeyStorage:
    """Store the API key in the keyring, or in an encrypted file without one.

    The backend is chosen once per instance, on first use.
    """

    def __init__(
        self,
        keyring_backend: KeyringBackend | None = None,
        file_backend: EncryptedFileBackend | None = None,
        file_path: Path = API_KEY_FILE_PATH,
        entry: str = DEFAULT_API_KEY_ENTRY,
    ) -> None:
        self.keyring_backend = keyring_backend or KeyringBackend()
        self.file_backend = file_backend or EncryptedFileBackend(file_path)
        self.entry = entry
        self._backend: KeyringBackend | EncryptedFileBackend | None = None

    @property
    def backend(self) -> KeyringBackend | EncryptedFileBackend:
        if self._backend is None:
            if self.keyring_backend.available:
                self._backend = self.keyring_backend
            else:
                logger.debug("Keyring unavailable, using encrypted file storage")
                self._backend = self.file_backend
        return self._backend

    def load(self) -> str | None:
        return self.backend.get(self.entry)

    def save(self, api_key: str | None) -> None:
        """Store the key; an empty or missing key clears the stored one."""
        if not api_key:
            self.clear()
            return
        self.backend.set(self.entry, api_key)

    def clear(self) -> bool:
        return self.backend.delete(self.entry)


_storage: HybridApiKeyStorage | None = None


def get_storage() -> HybridApiKeyStorage:
    """Shared storage instance."""
    global _storage
    if _storage is None:
        _storage = HybridApiKeyStorage()
    return _storage


async def load_api_key() -> str | None:
    """Load the stored API key, if any.

    Raises:
        CredentialError: If the storage backend fails
    """
    return await asyncio.to_thread(get_storage().load)


async def save_api_key(api_key: str | None) -> None:
    """Store the API key, or clear it when ``api_key`` is empty."""
    await asyncio.to_thread(get_storage().save, api_key)


async def clear_api_key() -> bool:
    """Remove the stored API key.

    Returns:
        True if a key was removed
    """
    return await asyncio.to_thread(get_storage().clear)
