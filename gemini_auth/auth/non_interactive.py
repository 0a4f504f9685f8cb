"""Auth validation for non-interactive runs.

Non-interactive runs have no human to re-prompt, so every failure is fatal.
Validation moves through a fixed sequence of states::

    IDLE -> RESOLVING -> POLICY_CHECK -> STRUCTURAL_VALIDATE -> DONE
                              |                  |
                              +----> FAILED <----+

Failures are handed to a single failure handler together with the fatal
authentication exit code. The default handler prints a JSON error payload
in JSON output mode and logs the message otherwise; both exit the process.
"""

from __future__ import annotations

from enum import Enum

import structlog

from gemini_auth.auth.method import validate_auth_method
from gemini_auth.auth.resolver import AuthResolution, AuthTypeResolver
from gemini_auth.config.runtime import AuthConfig
from gemini_auth.config.settings import USER_SETTINGS_PATH, Settings
from gemini_auth.enums import AuthType, ExitCode
from gemini_auth.exceptions import (
    AuthenticationError,
    AuthMethodValidationError,
    AuthPolicyViolationError,
    NoCredentialsFoundError,
)
from gemini_auth.utils.errors import FailureHandler, default_failure_handler, get_error_message

log = structlog.get_logger(__name__)

# Origin recorded when the auth type comes from settings or command-line flags
CONFIGURED_ORIGIN = "configured"


class AuthValidationState(str, Enum):
    """States of non-interactive auth validation."""

    IDLE = "idle"
    RESOLVING = "resolving"
    POLICY_CHECK = "policy_check"
    STRUCTURAL_VALIDATE = "structural_validate"
    DONE = "done"
    FAILED = "failed"


def no_credentials_message(settings_path: str) -> str:
    """Remediation message listing how to configure auth and what was checked."""
    return (
        "No authentication credentials found. Please:\n"
        "1. Set GEMINI_API_KEY, GOOGLE_GENAI_USE_VERTEXAI, or GOOGLE_GENAI_USE_GCA environment variable, OR\n"
        f"2. Configure auth method in {settings_path}, OR\n"
        "3. Authenticate with 'gcloud auth login' (credentials will be auto-detected)\n\n"
        "Automatic credential detection checked:\n"
        "- Environment variables (GEMINI_API_KEY, GOOGLE_API_KEY)\n"
        "- Stored credentials (keychain/file)\n"
        "- Google Cloud SDK (gcloud CLI)\n"
        "- Application Default Credentials (ADC)"
    )


class NonInteractiveAuthValidator:
    """Run the validation state machine once.

    Attributes:
        state: Current state; ``DONE`` or ``FAILED`` after ``run`` returns
        effective_auth_type: Auth type after the resolving step
        resolution: Where the effective auth type came from
        error: Failure that moved the validator to ``FAILED``
    """

    def __init__(
        self,
        settings: Settings,
        resolver: AuthTypeResolver | None = None,
    ) -> None:
        self.settings = settings
        self.resolver = resolver or AuthTypeResolver()
        self.state = AuthValidationState.IDLE
        self.effective_auth_type: AuthType | None = None
        self.resolution: AuthResolution | None = None
        self.error: AuthenticationError | None = None

    def _transition(self, state: AuthValidationState) -> None:
        log.debug("auth_validation_transition", from_state=self.state.value, to_state=state.value)
        self.state = state

    def _fail(self, error: AuthenticationError) -> AuthenticationError:
        self.error = error
        self._transition(AuthValidationState.FAILED)
        return error

    async def run(
        self,
        configured_auth_type: AuthType | None,
        use_external_auth: bool,
    ) -> AuthType:
        """Validate the auth type for a non-interactive run.

        Args:
            configured_auth_type: Auth type selected explicitly (settings or flags)
            use_external_auth: Authentication is delegated to an external
                provider; skips the structural prerequisites check

        Returns:
            The validated auth type

        Raises:
            AuthPolicyViolationError: If the auth type differs from the enforced one
            NoCredentialsFoundError: If no auth type could be resolved
            AuthMethodValidationError: If the auth type lacks required configuration
        """
        self._transition(AuthValidationState.RESOLVING)
        if configured_auth_type:
            self.resolution = AuthResolution(configured_auth_type, origin=CONFIGURED_ORIGIN)
        else:
            self.resolution = await self.resolver.resolve_auth()
        effective = self.resolution.auth_type
        self.effective_auth_type = effective
        if effective is not None:
            credential = self.resolution.credential
            log.info(
                "auth_type_resolved",
                auth_type=str(effective),
                origin=self.resolution.origin,
                credential=credential.masked_value() if credential else None,
            )

        self._transition(AuthValidationState.POLICY_CHECK)
        enforced = self.settings.enforced_auth_type
        if enforced and effective != enforced:
            raise self._fail(AuthPolicyViolationError(enforced, effective))

        if effective is None:
            raise self._fail(NoCredentialsFoundError(no_credentials_message(str(USER_SETTINGS_PATH))))

        self._transition(AuthValidationState.STRUCTURAL_VALIDATE)
        if not use_external_auth:
            message = validate_auth_method(str(effective))
            if message is not None:
                raise self._fail(AuthMethodValidationError(message))

        self._transition(AuthValidationState.DONE)
        return effective


async def validate_non_interactive_auth(
    configured_auth_type: AuthType | None,
    use_external_auth: bool | None,
    config: AuthConfig,
    settings: Settings,
    *,
    resolver: AuthTypeResolver | None = None,
    failure_handler: FailureHandler | None = None,
) -> AuthType:
    """Validate auth for a non-interactive run, terminating on failure.

    Args:
        configured_auth_type: Auth type selected explicitly, if any
        use_external_auth: Authentication is delegated to an external provider
        config: Runtime config (output format)
        settings: Settings providing the enforced auth type
        resolver: Resolver used when no auth type is configured
        failure_handler: Receives ``(error, exit_code)`` on failure and must
            not return. Defaults to the handler for ``config``'s output format.

    Returns:
        The validated auth type
    """
    handler = failure_handler or default_failure_handler(config)
    validator = NonInteractiveAuthValidator(settings, resolver=resolver)

    try:
        return await validator.run(configured_auth_type, bool(use_external_auth))
    except AuthenticationError as error:
        await handler(error, error.exit_code)
        raise
    except Exception as error:
        fatal = AuthenticationError(get_error_message(error), ExitCode.FATAL_AUTHENTICATION_ERROR)
        await handler(fatal, fatal.exit_code)
        raise fatal from error
