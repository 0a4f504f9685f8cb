"""Protocol for credential discovery probes."""

from typing import Protocol

from .types import ProbeResult


class CredentialProbe(Protocol):
    """Interface every credential source implements.

    Probes are queried in isolation by the retriever. A probe must never
    raise: any failure is reported as an absent ``ProbeResult`` carrying
    the reason.
    """

    @property
    def name(self) -> str:
        """Probe identifier (e.g., 'environment', 'gcloud-cli')."""
        ...

    async def probe(self) -> ProbeResult:
        """Attempt to discover a credential.

        Returns:
            ProbeResult with the credential, or with the reason nothing was found
        """
        ...
