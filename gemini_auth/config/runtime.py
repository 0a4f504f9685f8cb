"""Runtime configuration collaborator for the auth entry points.

``AuthConfig`` is the narrow interface the validator and the interactive
entry point depend on. ``RuntimeConfig`` is the implementation the CLI uses:
it records the selected auth type and checks its prerequisites, leaving the
backend and network work to whatever consumes the config afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import structlog

from gemini_auth.auth.method import validate_auth_method
from gemini_auth.enums import AuthType, OutputFormat
from gemini_auth.exceptions import LoginError
from gemini_auth.utils.run_mode import should_skip_auth

log = structlog.get_logger(__name__)


class AuthConfig(Protocol):
    """Interface of the config object consumed by the auth entry points."""

    @property
    def fake_responses(self) -> str | None:
        """Path of a fake responses file, when model responses are replayed."""
        ...

    @property
    def record_responses(self) -> str | None:
        """Path of a record responses file, when model responses are captured."""
        ...

    def get_output_format(self) -> OutputFormat:
        """Output mode of the current invocation."""
        ...

    async def refresh_auth(self, auth_type: AuthType) -> None:
        """Initialize the backend for the given auth type.

        Raises:
            Exception: If the backend cannot be initialized
        """
        ...


@dataclass
class RuntimeConfig:
    """Per-invocation config used by the CLI.

    Attributes:
        output_format: Output mode (text or JSON)
        fake_responses: Fake responses file path, if any
        record_responses: Record responses file path, if any
        auth_type: Auth type the backend was last initialized with
    """

    output_format: OutputFormat = OutputFormat.TEXT
    fake_responses: str | None = None
    record_responses: str | None = None
    auth_type: AuthType | None = field(default=None, init=False)

    def get_output_format(self) -> OutputFormat:
        return self.output_format

    @property
    def skip_auth(self) -> bool:
        """Whether authentication is bypassed for this invocation."""
        return should_skip_auth(self.fake_responses, self.record_responses)

    async def refresh_auth(self, auth_type: AuthType) -> None:
        """Select an auth type after checking its prerequisites.

        Fake-response mode accepts any auth type, since no real backend is
        contacted.

        Raises:
            LoginError: If the auth type is missing required configuration
        """
        if not self.fake_responses:
            error = validate_auth_method(str(auth_type))
            if error is not None:
                raise LoginError(error)

        self.auth_type = AuthType(auth_type)
        log.debug("auth_refreshed", auth_type=str(self.auth_type), fake=bool(self.fake_responses))
