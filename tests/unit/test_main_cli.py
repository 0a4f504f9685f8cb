"""Unit tests for the gemini-auth CLI.

This module tests:
- check: non-interactive validation, policy enforcement and exit codes
- login: interactive initial authentication
- sources: credential listing
- key: stored API key management
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from gemini_auth.credentials import CredentialError, CredentialSource, ProbeResult
from gemini_auth.enums import AuthType
from gemini_auth.main import cli
from gemini_auth.utils.cleanup import register_cleanup


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def empty_settings(settings_file):
    """Settings file without any auth configuration."""
    return str(settings_file("{}"))


@pytest.fixture
def no_discovered_credentials():
    """Make automatic credential discovery find nothing."""
    retriever = MagicMock()
    retriever.retrieve_credentials = AsyncMock(return_value=None)
    with patch("gemini_auth.auth.resolver.credential_retriever", retriever):
        yield retriever


# =============================================================================
# check
# =============================================================================


class TestCheckCommand:
    def test_explicit_auth_type(self, cli_runner, empty_settings, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "AIzaKey")

        result = cli_runner.invoke(cli, ["--settings", empty_settings, "check", "--auth-type", "gemini-api-key"])

        assert result.exit_code == 0
        assert result.output.strip().splitlines()[-1] == "gemini-api-key"

    def test_selected_type_from_settings(self, cli_runner, settings_file):
        path = settings_file('{"security": {"auth": {"selectedType": "oauth-personal"}}}')

        result = cli_runner.invoke(cli, ["--settings", str(path), "check"])

        assert result.exit_code == 0
        assert "oauth-personal" in result.output

    def test_detected_from_environment_flag(self, cli_runner, empty_settings, monkeypatch):
        monkeypatch.setenv("GOOGLE_GENAI_USE_GCA", "true")

        result = cli_runner.invoke(cli, ["--settings", empty_settings, "check"])

        assert result.exit_code == 0
        assert "login-with-google" in result.output

    def test_log_shows_resolution_origin(self, cli_runner, empty_settings, monkeypatch):
        monkeypatch.setenv("GOOGLE_GENAI_USE_GCA", "true")

        result = cli_runner.invoke(cli, ["--settings", empty_settings, "--log-level", "INFO", "check"])

        assert result.exit_code == 0
        assert "auth_type_resolved" in result.output
        assert "origin=GOOGLE_GENAI_USE_GCA" in result.output

    def test_json_output(self, cli_runner, empty_settings, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "AIzaKey")

        result = cli_runner.invoke(
            cli, ["--settings", empty_settings, "--output-format", "json", "check", "--auth-type", "gemini-api-key"]
        )

        assert result.exit_code == 0
        assert json.loads(result.output.strip().splitlines()[-1]) == {"auth_type": "gemini-api-key"}

    def test_policy_violation_exits_41(self, cli_runner, settings_file, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "AIzaKey")
        path = settings_file('{"security": {"auth": {"enforcedType": "vertex-ai"}}}')

        result = cli_runner.invoke(cli, ["--settings", str(path), "check", "--auth-type", "gemini-api-key"])

        assert result.exit_code == 41
        assert "The enforced authentication type is 'vertex-ai'" in result.output

    def test_no_credentials_exits_41(self, cli_runner, empty_settings, no_discovered_credentials):
        result = cli_runner.invoke(cli, ["--settings", empty_settings, "check"])

        assert result.exit_code == 41
        assert "No authentication credentials found" in result.output
        no_discovered_credentials.retrieve_credentials.assert_awaited_once()

    def test_failure_runs_registered_cleanup(self, cli_runner, empty_settings, no_discovered_credentials):
        closed = []

        async def close_client():
            closed.append("client")

        register_cleanup(close_client)

        result = cli_runner.invoke(cli, ["--settings", empty_settings, "check"])

        assert result.exit_code == 41
        assert closed == ["client"]

    def test_no_credentials_json(self, cli_runner, empty_settings, no_discovered_credentials):
        result = cli_runner.invoke(cli, ["--settings", empty_settings, "--output-format", "json", "check"])

        assert result.exit_code == 41
        assert '"type": "NoCredentialsFoundError"' in result.output
        assert '"code": 41' in result.output

    def test_missing_prerequisites_exits_41(self, cli_runner, empty_settings):
        result = cli_runner.invoke(cli, ["--settings", empty_settings, "check", "--auth-type", "vertex-ai"])

        assert result.exit_code == 41
        assert "When using Vertex AI" in result.output

    def test_external_auth_skips_prerequisites(self, cli_runner, empty_settings):
        result = cli_runner.invoke(
            cli, ["--settings", empty_settings, "check", "--auth-type", "vertex-ai", "--use-external-auth"]
        )

        assert result.exit_code == 0
        assert "vertex-ai" in result.output

    def test_external_auth_from_settings(self, cli_runner, settings_file):
        path = settings_file('{"security": {"auth": {"selectedType": "gemini-api-key", "useExternal": true}}}')

        result = cli_runner.invoke(cli, ["--settings", str(path), "check"])

        assert result.exit_code == 0

    def test_fake_responses_skip_auth(self, cli_runner, empty_settings, no_discovered_credentials):
        result = cli_runner.invoke(cli, ["--settings", empty_settings, "--fake-responses", "/tmp/fake.json", "check"])

        assert result.exit_code == 0
        assert "skipped" in result.output
        no_discovered_credentials.retrieve_credentials.assert_not_awaited()

    def test_missing_settings_file_exits_52(self, cli_runner, tmp_path):
        result = cli_runner.invoke(cli, ["--settings", str(tmp_path / "missing.json"), "check"])

        assert result.exit_code == 52
        assert "Settings file not found" in result.output

    def test_invalid_auth_type_option(self, cli_runner, empty_settings):
        result = cli_runner.invoke(cli, ["--settings", empty_settings, "check", "--auth-type", "carrier-pigeon"])

        assert result.exit_code == 2


# =============================================================================
# login
# =============================================================================


class TestLoginCommand:
    def test_login_success(self, cli_runner, empty_settings):
        result = cli_runner.invoke(cli, ["--settings", empty_settings, "login", "--auth-type", "oauth-personal"])

        assert result.exit_code == 0
        assert "Authenticated with oauth-personal" in result.output

    def test_login_failure(self, cli_runner, empty_settings):
        result = cli_runner.invoke(cli, ["--settings", empty_settings, "login", "--auth-type", "gemini-api-key"])

        assert result.exit_code == 1
        assert "Failed to login. Message: When using Gemini API" in result.output

    def test_login_without_selection(self, cli_runner, empty_settings):
        result = cli_runner.invoke(cli, ["--settings", empty_settings, "login"])

        assert result.exit_code == 0
        assert "No auth type selected" in result.output

    def test_login_fake_responses(self, cli_runner, empty_settings):
        result = cli_runner.invoke(cli, ["--settings", empty_settings, "--fake-responses", "/tmp/fake.json", "login"])

        assert result.exit_code == 0
        assert "Authenticated with gemini-api-key" in result.output


# =============================================================================
# sources
# =============================================================================


@pytest.fixture
def probe_results():
    return [
        ProbeResult.hit(
            "environment",
            CredentialSource(
                source="environment:GEMINI_API_KEY",
                value="AIzaSyExampleKey1234",
                auth_type=AuthType.USE_GEMINI,
            ),
        ),
        ProbeResult.miss("stored-credentials", "No stored API key"),
        ProbeResult.miss("gcloud-cli", "gcloud is not installed"),
        ProbeResult.miss("application-default-credentials", "No ADC file at /home/user/adc.json"),
    ]


@pytest.fixture
def mock_retriever(probe_results):
    with patch("gemini_auth.cli.credentials.AutomaticCredentialRetriever") as mock_class:
        retriever = MagicMock()
        retriever.probe_all = AsyncMock(return_value=probe_results)
        mock_class.return_value = retriever
        yield retriever


class TestSourcesCommand:
    def test_lists_found_credentials_masked(self, cli_runner, mock_retriever):
        result = cli_runner.invoke(cli, ["sources"])

        assert result.exit_code == 0
        assert "environment:GEMINI_API_KEY (gemini-api-key)" in result.output
        assert "AIza************1234" in result.output
        assert "AIzaSyExampleKey1234" not in result.output
        assert "gcloud is not installed" not in result.output

    def test_verbose_shows_misses(self, cli_runner, mock_retriever):
        result = cli_runner.invoke(cli, ["sources", "--verbose"])

        assert result.exit_code == 0
        assert "gcloud is not installed" in result.output

    def test_json_output(self, cli_runner, mock_retriever):
        result = cli_runner.invoke(cli, ["--output-format", "json", "sources"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload == [
            {
                "probe": "environment",
                "source": "environment:GEMINI_API_KEY",
                "auth_type": "gemini-api-key",
                "value": "AIza************1234",
                "reason": None,
            }
        ]

    def test_nothing_found(self, cli_runner, mock_retriever):
        mock_retriever.probe_all.return_value = [ProbeResult.miss("environment", "unset")]

        result = cli_runner.invoke(cli, ["sources"])

        assert result.exit_code == 0
        assert "No credentials found" in result.output

    def test_does_not_read_settings(self, cli_runner, mock_retriever, tmp_path):
        result = cli_runner.invoke(cli, ["--settings", str(tmp_path / "missing.json"), "sources"])

        assert result.exit_code == 0


# =============================================================================
# key
# =============================================================================


class TestKeyCommands:
    def test_set_key(self, cli_runner):
        with patch("gemini_auth.cli.credentials.save_api_key", AsyncMock()) as mock_save:
            result = cli_runner.invoke(cli, ["key", "set", "--value", "AIzaNewKey"])

        assert result.exit_code == 0
        assert "stored successfully" in result.output
        mock_save.assert_awaited_once_with("AIzaNewKey")

    def test_set_key_prompts(self, cli_runner):
        with patch("gemini_auth.cli.credentials.save_api_key", AsyncMock()) as mock_save:
            result = cli_runner.invoke(cli, ["key", "set"], input="AIzaTyped\nAIzaTyped\n")

        assert result.exit_code == 0
        mock_save.assert_awaited_once_with("AIzaTyped")
        assert "AIzaTyped" not in result.output

    def test_set_key_storage_error(self, cli_runner):
        error = CredentialError("Keyring operation failed", suggestion="Unlock your keychain")

        with patch("gemini_auth.cli.credentials.save_api_key", AsyncMock(side_effect=error)):
            result = cli_runner.invoke(cli, ["key", "set", "--value", "AIzaNewKey"])

        assert result.exit_code == 1
        assert "Keyring operation failed" in result.output
        assert "Unlock your keychain" in result.output

    def test_clear_key(self, cli_runner):
        with patch("gemini_auth.cli.credentials.clear_api_key", AsyncMock(return_value=True)):
            result = cli_runner.invoke(cli, ["key", "clear", "--yes"])

        assert result.exit_code == 0
        assert "API key removed" in result.output

    def test_clear_key_nothing_stored(self, cli_runner):
        with patch("gemini_auth.cli.credentials.clear_api_key", AsyncMock(return_value=False)):
            result = cli_runner.invoke(cli, ["key", "clear", "--yes"])

        assert result.exit_code == 0
        assert "No stored API key" in result.output

    def test_clear_key_aborted(self, cli_runner):
        with patch("gemini_auth.cli.credentials.clear_api_key", AsyncMock()) as mock_clear:
            result = cli_runner.invoke(cli, ["key", "clear"], input="n\n")

        assert result.exit_code == 1
        mock_clear.assert_not_awaited()

    def test_status(self, cli_runner):
        storage = MagicMock()
        storage.backend.name = "encrypted_file"
        storage.load.return_value = "AIzaStored"

        with patch("gemini_auth.cli.credentials.get_storage", return_value=storage):
            result = cli_runner.invoke(cli, ["key", "status"])

        assert result.exit_code == 0
        assert "Storage backend: encrypted_file" in result.output
        assert "API key: stored" in result.output

    def test_status_not_stored(self, cli_runner):
        storage = MagicMock()
        storage.backend.name = "keyring"
        storage.load.return_value = None

        with patch("gemini_auth.cli.credentials.get_storage", return_value=storage):
            result = cli_runner.invoke(cli, ["key", "status"])

        assert "API key: not stored" in result.output
