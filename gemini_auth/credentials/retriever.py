"""Automatic credential discovery across all known sources."""

from collections.abc import Sequence

import structlog

from .adc_probe import ADCProbe
from .environment_probe import EnvironmentProbe
from .gcloud_probe import GcloudCLIProbe
from .probe import CredentialProbe
from .stored_probe import StoredCredentialProbe
from .types import CredentialSource, ProbeResult

log = structlog.get_logger(__name__)


class AutomaticCredentialRetriever:
    """Find credentials by querying probes in a fixed priority order.

    Default order:
    1. Environment variables
    2. Stored credentials (keyring or encrypted file)
    3. Google Cloud SDK (gcloud CLI)
    4. Application Default Credentials (ADC)

    Probes run strictly one after another: cheaper probes go first, so a hit
    in the environment never spawns a gcloud subprocess, and log output keeps
    a stable order. Nothing is cached between calls.

    Example:
        >>> retriever = AutomaticCredentialRetriever()
        >>> credential = await retriever.retrieve_credentials()
        >>> if credential:
        ...     print(credential.source, credential.auth_type)
    """

    def __init__(self, probes: Sequence[CredentialProbe] | None = None) -> None:
        """Initialize the retriever.

        Args:
            probes: Probes in priority order. Defaults to environment,
                stored credentials, gcloud CLI and ADC. The sequence is
                stored as a tuple.
        """
        if probes is None:
            self.environment_probe = EnvironmentProbe()
            self.stored_probe = StoredCredentialProbe()
            self.gcloud_probe = GcloudCLIProbe()
            self.adc_probe = ADCProbe()
            probes = (self.environment_probe, self.stored_probe, self.gcloud_probe, self.adc_probe)
        self.probes: tuple[CredentialProbe, ...] = tuple(probes)

    async def _run_probe(self, probe: CredentialProbe) -> ProbeResult:
        # Last line of defence: a custom probe that raises counts as a miss
        try:
            result = await probe.probe()
        except Exception as e:
            log.warning("credential_probe_failed", probe=probe.name, error=str(e))
            return ProbeResult.miss(probe.name, f"Probe raised: {e}")

        if not result.found:
            log.debug("credential_probe_miss", probe=probe.name, reason=result.reason)
        return result

    async def _credential_from(self, probe_name: str) -> CredentialSource | None:
        for probe in self.probes:
            if probe.name == probe_name:
                return (await self._run_probe(probe)).credential
        return None

    async def get_from_environment(self) -> CredentialSource | None:
        """API key from ``GEMINI_API_KEY`` or ``GOOGLE_API_KEY``."""
        return await self._credential_from("environment")

    async def get_from_stored_credentials(self) -> CredentialSource | None:
        """API key from the keyring or the encrypted key file."""
        return await self._credential_from("stored-credentials")

    async def get_from_gcloud_cli(self) -> CredentialSource | None:
        """Access token of the active gcloud account."""
        return await self._credential_from("gcloud-cli")

    async def get_from_adc(self) -> CredentialSource | None:
        """Application Default Credentials file."""
        return await self._credential_from("application-default-credentials")

    async def retrieve_credentials(self) -> CredentialSource | None:
        """Return the first credential found in priority order.

        Probes after the first hit are not invoked.
        """
        log.debug("credential_retrieval_started", probes=[p.name for p in self.probes])

        for probe in self.probes:
            result = await self._run_probe(probe)
            if result.credential is not None:
                log.debug("credential_found", source=result.credential.source)
                return result.credential

        log.debug("no_credentials_found")
        return None

    async def probe_all(self) -> list[ProbeResult]:
        """Run every probe and return all results, misses included."""
        return [await self._run_probe(probe) for probe in self.probes]

    async def get_all_available_credentials(self) -> list[CredentialSource]:
        """Return every credential found, in priority order.

        All probes run regardless of earlier hits. For diagnostics and
        listing only; resolution uses ``retrieve_credentials``.
        """
        return [result.credential for result in await self.probe_all() if result.credential is not None]


credential_retriever = AutomaticCredentialRetriever()
