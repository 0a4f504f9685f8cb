"""Encrypted file backend using Fernet symmetric encryption.

Fallback for systems without a usable keyring.

Security Model:
- Key derived with PBKDF2-HMAC-SHA256 from a master password
- Without an explicit password, the password is derived from host and user
  names, which ties the file to the machine account that wrote it
- Credentials encrypted with Fernet (AES-128-CBC + HMAC)
- File and salt restricted to mode 600
"""

import base64
import getpass
import json
import logging
import secrets
import socket
from pathlib import Path
from typing import cast

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from gemini_auth.exceptions import EncryptionError

logger = logging.getLogger(__name__)

KDF_ITERATIONS = 480_000


def machine_password() -> str:
    """Password bound to the current host and user."""
    return f"{socket.gethostname()}-{getpass.getuser()}-gemini-cli"


class EncryptedFileBackend:
    """Encrypted file credential storage.

    Entries are stored as a JSON object ``{entry: value}`` encrypted as a
    whole. Writes go through a temporary file and an atomic rename.

    Example:
        >>> backend = EncryptedFileBackend(Path("~/.gemini/api-key.enc").expanduser())
        >>> backend.set('default-api-key', 'AIza...')
        >>> key = backend.get('default-api-key')
    """

    def __init__(
        self,
        file_path: Path,
        master_password: str | None = None,
        salt: bytes | None = None,
    ) -> None:
        """Initialize encrypted file backend.

        Args:
            file_path: Path to the encrypted credentials file
            master_password: Encryption password (machine-derived if None)
            salt: Cryptographic salt (loaded or generated if None)
        """
        self.file_path = file_path
        self._salt = salt
        self._master_password = master_password
        self._fernet: Fernet | None = None

    @property
    def name(self) -> str:
        return "encrypted_file"

    @property
    def available(self) -> bool:
        return True

    @property
    def salt_path(self) -> Path:
        return self.file_path.with_suffix(".salt")

    @property
    def fernet(self) -> Fernet:
        """Cipher, derived lazily so that reads of a missing file stay cheap."""
        if self._fernet is None:
            salt = self._salt or self._load_or_generate_salt()
            self._fernet = self._create_fernet(self._master_password or machine_password(), salt)
        return self._fernet

    @staticmethod
    def _create_fernet(password: str, salt: bytes) -> Fernet:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=KDF_ITERATIONS,
        )
        key = kdf.derive(password.encode("utf-8"))
        return Fernet(base64.urlsafe_b64encode(key))

    def _load_or_generate_salt(self) -> bytes:
        if self.salt_path.exists():
            return self.salt_path.read_bytes()

        salt = secrets.token_bytes(16)
        self.salt_path.parent.mkdir(parents=True, exist_ok=True)
        self.salt_path.write_bytes(salt)
        try:
            self.salt_path.chmod(0o600)
        except OSError as e:
            logger.warning(f"Could not set salt file permissions: {e}")
        return salt

    def _load(self) -> dict[str, str]:
        """Load and decrypt all entries.

        Raises:
            EncryptionError: If the file cannot be decrypted or parsed
        """
        if not self.file_path.exists():
            return {}

        try:
            decrypted = self.fernet.decrypt(self.file_path.read_bytes())
            data = json.loads(decrypted.decode("utf-8"))
        except InvalidToken as e:
            raise EncryptionError(
                "Invalid password or corrupted credentials file",
                reference=str(self.file_path),
                suggestion="Delete the file and store the API key again",
            ) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise EncryptionError(
                "Credentials file is corrupted",
                reference=str(self.file_path),
                suggestion="Delete the file and store the API key again",
            ) from e
        except OSError as e:
            raise EncryptionError(f"Failed to read credentials: {e}", reference=str(self.file_path)) from e

        if not isinstance(data, dict):
            raise EncryptionError("Credentials file has an unexpected format", reference=str(self.file_path))
        return cast(dict[str, str], data)

    def _save(self, entries: dict[str, str]) -> None:
        """Encrypt and atomically write all entries.

        Raises:
            EncryptionError: If the file cannot be written
        """
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            encrypted = self.fernet.encrypt(json.dumps(entries).encode("utf-8"))

            temp_file = self.file_path.with_suffix(".tmp")
            temp_file.write_bytes(encrypted)
            try:
                temp_file.chmod(0o600)
            except OSError as e:
                logger.warning(f"Could not set file permissions: {e}")
            temp_file.replace(self.file_path)
        except OSError as e:
            raise EncryptionError(f"Failed to save credentials: {e}", reference=str(self.file_path)) from e

        logger.debug(f"Saved credentials to {self.file_path}")

    def get(self, entry: str) -> str | None:
        value = self._load().get(entry)
        if value is not None:
            logger.debug(f"Retrieved credential from encrypted file: {entry}")
        return value

    def set(self, entry: str, value: str) -> None:
        if not value:
            raise ValueError("Credential value cannot be empty")

        entries = self._load()
        entries[entry] = value
        self._save(entries)
        logger.info(f"Stored credential in encrypted file: {entry}")

    def delete(self, entry: str) -> bool:
        """Delete an entry; removes the file once it holds no entries.

        Returns:
            True if deleted, False if not found
        """
        entries = self._load()
        if entry not in entries:
            return False

        del entries[entry]
        if entries:
            self._save(entries)
        else:
            self.file_path.unlink(missing_ok=True)
        logger.info(f"Deleted credential from encrypted file: {entry}")
        return True
