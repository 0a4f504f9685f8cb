"""Probe for Application Default Credentials (ADC)."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import aiofiles
import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

from gemini_auth.enums import AuthType

from .types import (
    ADC_PATH_ENV,
    SOURCE_ADC,
    SOURCE_ADC_SERVICE_ACCOUNT,
    SOURCE_ADC_USER,
    CredentialSource,
    ProbeResult,
)

log = structlog.get_logger(__name__)

DEFAULT_ADC_PATH = Path.home() / ".config" / "gcloud" / "application_default_credentials.json"


class ADCFile(BaseModel):
    """Recognized shape of an ADC JSON file.

    Only the fields used for classification are modelled; everything else
    (secrets, refresh tokens, keys) is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    # Left untyped: classification only compares and tests truthiness
    type: Any = None
    client_id: Any = None
    project_id: Any = None

    @property
    def kind(self) -> Literal["user", "service-account"] | None:
        if self.type == "authorized_user" or self.client_id:
            return "user"
        if self.type == "service_account":
            return "service-account"
        return None


class ADCProbe:
    """Application Default Credentials.

    Checks, first match wins:
    1. ``GOOGLE_APPLICATION_CREDENTIALS`` pointing at an existing file. The
       path itself is the credential; its contents are not inspected.
    2. The well-known per-user ADC file written by
       ``gcloud auth application-default login``, classified by its ``type``.
    """

    def __init__(
        self,
        default_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.default_path = default_path or DEFAULT_ADC_PATH
        self._environ = environ

    @property
    def name(self) -> str:
        return SOURCE_ADC

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    async def probe(self) -> ProbeResult:
        try:
            explicit_path = self.environ.get(ADC_PATH_ENV)
            if explicit_path and Path(explicit_path).exists():
                log.debug("adc_explicit_path_found", path=explicit_path)
                return ProbeResult.hit(
                    self.name,
                    CredentialSource(source=SOURCE_ADC, value=explicit_path, auth_type=AuthType.USE_VERTEX_AI),
                )

            if not self.default_path.exists():
                return ProbeResult.miss(self.name, f"No ADC file at {self.default_path}")

            return await self._probe_default_file()
        except Exception as e:
            log.warning("adc_check_failed", error=str(e))
            return ProbeResult.miss(self.name, f"Failed to check ADC credentials: {e}")

    async def _probe_default_file(self) -> ProbeResult:
        path = str(self.default_path)
        try:
            async with aiofiles.open(self.default_path, encoding="utf-8") as f:
                content = await f.read()
            creds = ADCFile.model_validate_json(content)
        except (OSError, ValidationError) as e:
            log.warning("adc_parse_failed", path=path, error=str(e))
            return ProbeResult.miss(self.name, f"Failed to parse ADC credentials: {e}")

        kind = creds.kind
        if kind == "user":
            log.debug("adc_user_credentials_found", path=path)
            return ProbeResult.hit(
                self.name,
                CredentialSource(source=SOURCE_ADC_USER, value=path, auth_type=AuthType.OAUTH_PERSONAL),
            )
        if kind == "service-account":
            log.debug("adc_service_account_found", path=path)
            return ProbeResult.hit(
                self.name,
                CredentialSource(
                    source=SOURCE_ADC_SERVICE_ACCOUNT,
                    value=path,
                    auth_type=AuthType.USE_VERTEX_AI,
                ),
            )

        log.debug("adc_unrecognized_shape", path=path, type=creds.type)
        return ProbeResult.miss(self.name, f"Unrecognized ADC credential type: {creds.type!r}")
