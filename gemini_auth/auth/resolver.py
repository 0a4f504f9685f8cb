"""Resolve the effective auth type from explicit flags and discovered credentials."""

from __future__ import annotations

import os
from collections.abc import MutableMapping
from dataclasses import dataclass

import structlog

from gemini_auth.credentials.environment_probe import publish_api_key
from gemini_auth.credentials.retriever import AutomaticCredentialRetriever, credential_retriever
from gemini_auth.credentials.types import (
    GEMINI_API_KEY_ENV,
    USE_GCA_ENV,
    USE_VERTEXAI_ENV,
    CredentialSource,
)
from gemini_auth.enums import AuthType

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AuthResolution:
    """Result of auth type resolution.

    Attributes:
        auth_type: Resolved auth type, or None when nothing matched
        origin: What decided the type (an environment variable name or a
            credential source tag)
        credential: The discovered credential, when resolution fell back to
            automatic discovery
    """

    auth_type: AuthType | None
    origin: str | None = None
    credential: CredentialSource | None = None


class AuthTypeResolver:
    """Merge explicit auth selection flags with automatic credential discovery.

    Resolution order, first match wins:
    1. ``GOOGLE_GENAI_USE_GCA=true`` -> login-with-google
    2. ``GOOGLE_GENAI_USE_VERTEXAI=true`` -> vertex-ai
    3. ``GEMINI_API_KEY`` set -> gemini-api-key
    4. First credential found by the retriever. A discovered API key is
       also published as ``GEMINI_API_KEY`` for code that reads the
       environment directly.
    """

    def __init__(
        self,
        retriever: AutomaticCredentialRetriever | None = None,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        self.retriever = retriever or credential_retriever
        self._environ = environ

    @property
    def environ(self) -> MutableMapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    async def resolve_auth(self) -> AuthResolution:
        """Resolve the auth type, keeping the credential that decided it."""
        if self.environ.get(USE_GCA_ENV) == "true":
            return AuthResolution(AuthType.LOGIN_WITH_GOOGLE, origin=USE_GCA_ENV)
        if self.environ.get(USE_VERTEXAI_ENV) == "true":
            return AuthResolution(AuthType.USE_VERTEX_AI, origin=USE_VERTEXAI_ENV)
        if self.environ.get(GEMINI_API_KEY_ENV):
            return AuthResolution(AuthType.USE_GEMINI, origin=GEMINI_API_KEY_ENV)

        log.debug("auth_type_not_explicit", action="automatic_credential_retrieval")
        credential = await self.retriever.retrieve_credentials()
        if credential is None:
            return AuthResolution(None)

        log.info("credentials_detected", source=credential.source, auth_type=str(credential.auth_type))
        if credential.auth_type == AuthType.USE_GEMINI:
            publish_api_key(credential.value, self.environ)

        return AuthResolution(credential.auth_type, origin=credential.source, credential=credential)

    async def resolve(self) -> AuthType | None:
        """Resolve the auth type only."""
        return (await self.resolve_auth()).auth_type
