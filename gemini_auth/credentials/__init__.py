"""Credential discovery for gemini-auth.

Probes, queried in priority order by ``AutomaticCredentialRetriever``:
    - EnvironmentProbe: GEMINI_API_KEY / GOOGLE_API_KEY
    - StoredCredentialProbe: API key saved in the keyring or encrypted file
    - GcloudCLIProbe: access token of the active gcloud account
    - ADCProbe: Application Default Credentials

Example:
    >>> from gemini_auth.credentials import credential_retriever
    >>> credential = await credential_retriever.retrieve_credentials()
"""

from gemini_auth.exceptions import (
    BackendNotAvailableError,
    CredentialError,
    EncryptionError,
    ProbeError,
)

from .adc_probe import ADCFile, ADCProbe
from .api_key_storage import HybridApiKeyStorage, clear_api_key, load_api_key, save_api_key
from .encrypted_backend import EncryptedFileBackend
from .environment_probe import EnvironmentProbe, publish_api_key
from .gcloud_probe import GcloudCLIProbe
from .keyring_backend import KeyringBackend
from .probe import CredentialProbe
from .retriever import AutomaticCredentialRetriever, credential_retriever
from .stored_probe import StoredCredentialProbe
from .types import CredentialSource, ProbeResult

__all__ = [
    "ADCFile",
    "ADCProbe",
    "AutomaticCredentialRetriever",
    "BackendNotAvailableError",
    "CredentialError",
    "CredentialProbe",
    "CredentialSource",
    "EncryptedFileBackend",
    "EncryptionError",
    "EnvironmentProbe",
    "GcloudCLIProbe",
    "HybridApiKeyStorage",
    "KeyringBackend",
    "ProbeError",
    "ProbeResult",
    "StoredCredentialProbe",
    "clear_api_key",
    "credential_retriever",
    "load_api_key",
    "publish_api_key",
    "save_api_key",
]
