"""Probe for an active Google Cloud SDK (gcloud CLI) login."""

import shutil
import subprocess

import structlog

from gemini_auth.enums import AuthType
from gemini_auth.exceptions import ProbeError
from gemini_auth.utils.async_subprocess import run_command

from .types import SOURCE_GCLOUD_CLI, CredentialSource, ProbeResult

log = structlog.get_logger(__name__)

DEFAULT_GCLOUD_TIMEOUT = 10.0


class GcloudCLIProbe:
    """Access token of the account gcloud is logged in with.

    Runs three steps, each of which can end the probe:
    1. the gcloud binary must be on PATH
    2. ``gcloud config get-value account`` must print an account
    3. ``gcloud auth print-access-token`` must print a token

    Every subprocess must exit 0 within ``timeout`` seconds.
    """

    def __init__(self, binary: str = "gcloud", timeout: float = DEFAULT_GCLOUD_TIMEOUT) -> None:
        self.binary = binary
        self.timeout = timeout

    @property
    def name(self) -> str:
        return SOURCE_GCLOUD_CLI

    async def _run(self, *args: str) -> str:
        """Run a gcloud subcommand and return its trimmed stdout.

        Raises:
            ProbeError: If the command fails, times out or cannot be started
        """
        command = " ".join((self.binary, *args))
        try:
            stdout, _, _ = await run_command(self.binary, *args, check=True, timeout=self.timeout)
        except TimeoutError as e:
            raise ProbeError(f"'{command}' timed out after {self.timeout}s", probe=self.name) from e
        except subprocess.CalledProcessError as e:
            raise ProbeError(f"'{command}' exited with status {e.returncode}", probe=self.name) from e
        except OSError as e:
            raise ProbeError(f"'{command}' could not be started: {e}", probe=self.name) from e
        return stdout.strip()

    async def probe(self) -> ProbeResult:
        if shutil.which(self.binary) is None:
            log.debug("gcloud_cli_not_installed", binary=self.binary)
            return ProbeResult.miss(self.name, f"{self.binary} is not installed")

        try:
            account = await self._run("config", "get-value", "account")
            if not account:
                log.debug("gcloud_no_active_account")
                return ProbeResult.miss(self.name, "gcloud has no active account")

            log.debug("gcloud_active_account_found", account=account)
            token = await self._run("auth", "print-access-token")
            if not token:
                return ProbeResult.miss(self.name, "gcloud returned an empty access token")
        except ProbeError as e:
            log.debug("gcloud_cli_unavailable", reason=e.message)
            return ProbeResult.miss(self.name, e.message)
        except Exception as e:
            log.warning("gcloud_probe_failed", error=str(e))
            return ProbeResult.miss(self.name, f"gcloud probe failed: {e}")

        return ProbeResult.hit(
            self.name,
            CredentialSource(source=SOURCE_GCLOUD_CLI, value=token, auth_type=AuthType.OAUTH_PERSONAL),
        )
