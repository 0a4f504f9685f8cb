"""Custom exception hierarchy for gemini-auth.

Exception Hierarchy:
    GeminiAuthError (base)
    ├── ConfigurationError
    ├── CredentialError
    │   ├── BackendNotAvailableError
    │   ├── EncryptionError
    │   └── ProbeError
    └── AuthenticationError
        ├── AuthPolicyViolationError
        ├── NoCredentialsFoundError
        ├── AuthMethodValidationError
        └── LoginError

Probe errors never leave the probe that raised them. Authentication errors
are fatal in non-interactive mode and carry the exit code the process should
terminate with.

Example Usage:
    >>> from gemini_auth.exceptions import ConfigurationError
    >>> try:
    ...     load_settings(path)
    ... except FileNotFoundError as e:
    ...     raise ConfigurationError(f"Settings file not found: {path}") from e
"""

from gemini_auth.enums import AuthType, ExitCode


class GeminiAuthError(Exception):
    """Base exception for all gemini-auth errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(GeminiAuthError):
    """Settings file is missing, unreadable or invalid."""

    pass


class CredentialError(GeminiAuthError):
    """Credential-related errors.

    Raised when stored credentials cannot be loaded, saved or decrypted.

    Attributes:
        message: Human-readable error description
        reference: The credential location that failed (e.g., "keyring:gemini-cli-api-key")
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            reference: The credential location that failed
            suggestion: Optional suggestion for resolution
        """
        self.reference = reference
        self.suggestion = suggestion

        full_message = message
        if reference:
            full_message = f"{message} (reference: {reference})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # Preserve original message (super sets self.message to full_message)
        self.message = message


class BackendNotAvailableError(CredentialError):
    """Requested storage backend is not available on this system."""

    pass


class EncryptionError(CredentialError):
    """Encryption or decryption operation failed."""

    pass


class ProbeError(CredentialError):
    """A credential probe could not complete.

    Used inside probes to classify the failure reason. Probes convert this
    into an absent result and never let it propagate.

    Attributes:
        probe: Name of the probe that failed
    """

    def __init__(self, message: str, probe: str | None = None) -> None:
        self.probe = probe
        super().__init__(message, reference=probe)
        self.message = message


class AuthenticationError(GeminiAuthError):
    """Base class for fatal authentication failures.

    Attributes:
        message: Human-readable error description
        exit_code: Process exit code to terminate with
    """

    def __init__(
        self,
        message: str,
        exit_code: int = ExitCode.FATAL_AUTHENTICATION_ERROR,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            exit_code: Process exit code for this failure
        """
        self.exit_code = int(exit_code)
        super().__init__(message)


class AuthPolicyViolationError(AuthenticationError):
    """The resolved auth type does not match the enforced auth type.

    Attributes:
        enforced_type: Auth type required by policy
        current_type: Auth type that was resolved, or None
    """

    def __init__(self, enforced_type: AuthType, current_type: AuthType | None) -> None:
        self.enforced_type = enforced_type
        self.current_type = current_type

        if current_type is not None:
            message = (
                f"The enforced authentication type is '{enforced_type}', "
                f"but the current type is '{current_type}'. "
                "Please re-authenticate with the correct type."
            )
        else:
            message = f"The auth type '{enforced_type}' is enforced, but no authentication is configured."
        super().__init__(message)


class NoCredentialsFoundError(AuthenticationError):
    """No auth type could be resolved from flags, settings or probes."""

    pass


class AuthMethodValidationError(AuthenticationError):
    """The chosen auth type is missing required configuration."""

    pass


class LoginError(AuthenticationError):
    """Interactive login failed.

    Recoverable: the interactive session reports it and keeps running.
    """

    pass
