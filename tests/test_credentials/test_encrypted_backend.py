"""Tests for encrypted file backend."""

import os
from pathlib import Path

import pytest

from gemini_auth.credentials import EncryptedFileBackend, EncryptionError

SALT = b"0123456789abcdef"


class TestEncryptedFileBackend:
    """Test EncryptedFileBackend functionality."""

    @pytest.fixture
    def file_path(self, tmp_path: Path) -> Path:
        return tmp_path / ".gemini" / "api-key.enc"

    @pytest.fixture
    def backend(self, file_path):
        """Create EncryptedFileBackend with a fixed password and salt."""
        return EncryptedFileBackend(file_path, master_password="test-password", salt=SALT)

    def test_backend_properties(self, backend, file_path):
        """Test name, availability and salt location."""
        assert backend.name == "encrypted_file"
        assert backend.available is True
        assert backend.salt_path == file_path.with_suffix(".salt")

    def test_get_from_missing_file(self, backend, file_path):
        """Test reading before anything is stored returns None."""
        assert backend.get("default-api-key") is None
        assert not file_path.exists()

    def test_set_and_get(self, backend, file_path):
        """Test a stored value can be read back and is not stored in plain text."""
        backend.set("default-api-key", "AIzaSecret")

        assert backend.get("default-api-key") == "AIzaSecret"
        assert b"AIzaSecret" not in file_path.read_bytes()

    def test_persists_across_instances(self, backend, file_path):
        """Test a new instance with the same password reads the value."""
        backend.set("default-api-key", "AIzaSecret")

        other = EncryptedFileBackend(file_path, master_password="test-password", salt=SALT)

        assert other.get("default-api-key") == "AIzaSecret"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_file_permissions(self, backend, file_path):
        """Test the credentials file is only readable by the owner."""
        backend.set("default-api-key", "AIzaSecret")

        assert file_path.stat().st_mode & 0o777 == 0o600

    def test_generates_salt_when_not_given(self, file_path):
        """Test a salt file is created on first use and reused afterwards."""
        backend = EncryptedFileBackend(file_path, master_password="test-password")
        backend.set("default-api-key", "AIzaSecret")

        salt_path = file_path.with_suffix(".salt")
        assert salt_path.exists()
        assert len(salt_path.read_bytes()) == 16

        other = EncryptedFileBackend(file_path, master_password="test-password")
        assert other.get("default-api-key") == "AIzaSecret"

    def test_wrong_password(self, backend, file_path):
        """Test decrypting with another password raises EncryptionError."""
        backend.set("default-api-key", "AIzaSecret")
        other = EncryptedFileBackend(file_path, master_password="wrong", salt=SALT)

        with pytest.raises(EncryptionError) as exc_info:
            other.get("default-api-key")

        assert exc_info.value.suggestion is not None

    def test_corrupted_file(self, backend, file_path):
        """Test garbage content raises EncryptionError."""
        file_path.parent.mkdir(parents=True)
        file_path.write_bytes(b"garbage")

        with pytest.raises(EncryptionError):
            backend.get("default-api-key")

    def test_set_empty_value_raises(self, backend):
        """Test empty values are rejected."""
        with pytest.raises(ValueError):
            backend.set("default-api-key", "")

    def test_delete_last_entry_removes_file(self, backend, file_path):
        """Test deleting the only entry removes the file."""
        backend.set("default-api-key", "AIzaSecret")

        assert backend.delete("default-api-key") is True
        assert not file_path.exists()
        assert backend.get("default-api-key") is None

    def test_delete_keeps_other_entries(self, backend):
        """Test deleting one entry keeps the others."""
        backend.set("default-api-key", "one")
        backend.set("other", "two")

        assert backend.delete("default-api-key") is True
        assert backend.get("other") == "two"

    def test_delete_missing(self, backend):
        """Test deleting a missing entry returns False."""
        assert backend.delete("default-api-key") is False
