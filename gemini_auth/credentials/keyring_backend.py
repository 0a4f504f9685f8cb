"""OS-level keyring backend for the stored API key.

Platform Support:
- Linux: Secret Service API (GNOME Keyring, KWallet)
- macOS: Keychain
- Windows: Windows Credential Locker
"""

import logging
from typing import cast

import keyring
from keyring.backends import fail
from keyring.errors import KeyringError, PasswordDeleteError

from gemini_auth.exceptions import BackendNotAvailableError, CredentialError

logger = logging.getLogger(__name__)

KEYCHAIN_SERVICE_NAME = "gemini-cli-api-key"


class KeyringBackend:
    """Credential storage in the system keyring.

    Entries are namespaced under a single keyring service so the CLI never
    collides with credentials of other applications.

    Example:
        >>> backend = KeyringBackend()
        >>> backend.set('default-api-key', 'AIza...')
        >>> key = backend.get('default-api-key')
        >>> backend.delete('default-api-key')
    """

    def __init__(self, service: str = KEYCHAIN_SERVICE_NAME) -> None:
        self.service = service

    @property
    def name(self) -> str:
        return "keyring"

    @property
    def available(self) -> bool:
        """Check if a functional keyring is configured.

        Returns False on headless systems where keyring falls back to its
        failing backend, or when the backend fails to initialize.
        """
        try:
            backend = keyring.get_keyring()
        except Exception as e:
            logger.debug(f"Keyring not available: {e}")
            return False
        return not isinstance(backend, fail.Keyring)

    def _reference(self, entry: str) -> str:
        return f"keyring:{self.service}/{entry}"

    def get(self, entry: str) -> str | None:
        """Retrieve a credential from the keyring.

        Raises:
            BackendNotAvailableError: If keyring is not available
            CredentialError: If the keyring operation fails
        """
        if not self.available:
            raise BackendNotAvailableError(
                "Keyring backend is not available",
                suggestion="Install a keyring backend or use the GEMINI_API_KEY environment variable",
            )

        try:
            credential = cast(str | None, keyring.get_password(self.service, entry))
        except KeyringError as e:
            raise CredentialError(f"Keyring operation failed: {e}", reference=self._reference(entry)) from e

        if credential is not None:
            logger.debug(f"Retrieved credential from keyring: {self.service}/{entry}")
        return credential

    def set(self, entry: str, value: str) -> None:
        """Store a credential in the keyring.

        Raises:
            BackendNotAvailableError: If keyring is not available
            CredentialError: If the keyring operation fails
        """
        if not self.available:
            raise BackendNotAvailableError("Keyring backend is not available")

        if not value:
            raise ValueError("Credential value cannot be empty")

        try:
            keyring.set_password(self.service, entry, value)
        except KeyringError as e:
            raise CredentialError(f"Failed to store credential: {e}", reference=self._reference(entry)) from e
        logger.info(f"Stored credential in keyring: {self.service}/{entry}")

    def delete(self, entry: str) -> bool:
        """Delete a credential from the keyring.

        Returns:
            True if deleted, False if not found

        Raises:
            BackendNotAvailableError: If keyring is not available
            CredentialError: If the keyring operation fails
        """
        if not self.available:
            raise BackendNotAvailableError("Keyring backend is not available")

        try:
            keyring.delete_password(self.service, entry)
        except PasswordDeleteError:
            return False
        except KeyringError as e:
            raise CredentialError(f"Failed to delete credential: {e}", reference=self._reference(entry)) from e

        logger.info(f"Deleted credential from keyring: {self.service}/{entry}")
        return True
