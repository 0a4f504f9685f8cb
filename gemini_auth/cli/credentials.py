"""CLI commands for credential discovery and the stored API key.

Commands:
    - sources: List credentials found by every probe (values masked)
    - key set: Store an API key in the keyring (or encrypted file)
    - key clear: Remove the stored API key
    - key status: Show which storage backend is in use and whether a key is stored

Example:

    $ gemini-auth sources --verbose
    $ gemini-auth key set
    $ gemini-auth key clear --yes
"""

import asyncio
import json
import sys

import click

from gemini_auth.credentials import (
    AutomaticCredentialRetriever,
    CredentialError,
    HybridApiKeyStorage,
    clear_api_key,
    save_api_key,
)
from gemini_auth.credentials.api_key_storage import get_storage
from gemini_auth.enums import ExitCode, OutputFormat


def _output_format(ctx: click.Context) -> OutputFormat:
    obj = ctx.find_object(dict) or {}
    config = obj.get("config")
    return config.get_output_format() if config is not None else OutputFormat.TEXT


def _report_credential_error(e: CredentialError) -> None:
    click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
    if e.suggestion:
        click.echo(click.style(f"Suggestion: {e.suggestion}", fg="yellow"), err=True)


@click.command(name="sources")
@click.option("--verbose", "-v", is_flag=True, help="Also show sources that were checked but empty")
@click.pass_context
def sources_command(ctx: click.Context, verbose: bool) -> None:
    """List credentials discovered from every source.

    All sources are checked in priority order: environment variables,
    stored credentials, gcloud CLI, Application Default Credentials.
    The first one listed is the one automatic resolution would pick.
    """
    retriever = AutomaticCredentialRetriever()
    results = asyncio.run(retriever.probe_all())

    if _output_format(ctx) == OutputFormat.JSON:
        payload = [
            {
                "probe": r.probe,
                "source": r.credential.source if r.credential else None,
                "auth_type": r.credential.auth_type.value if r.credential else None,
                "value": r.credential.masked_value() if r.credential else None,
                "reason": r.reason,
            }
            for r in results
            if r.found or verbose
        ]
        click.echo(json.dumps(payload, indent=2))
        return

    found = [r for r in results if r.credential is not None]
    if not found:
        click.echo(click.style("No credentials found", fg="yellow"))

    for result in results:
        credential = result.credential
        if credential is not None:
            click.echo(f"  {click.style('[FOUND]', fg='green')} {credential.source} ({credential.auth_type})")
            click.echo(f"          {credential.masked_value()}")
        elif verbose:
            click.echo(f"  {click.style('[NONE]', fg='yellow')} {result.probe}")
            click.echo(f"          {result.reason}")


@click.group(name="key")
def key_group() -> None:
    """Manage the stored API key.

    The key is kept in the OS keyring (macOS Keychain, GNOME Keyring,
    Windows Credential Manager). Systems without a keyring fall back to
    an encrypted file in the settings directory.
    """
    pass


@key_group.command(name="set")
@click.option(
    "--value",
    prompt="API key",
    hide_input=True,
    confirmation_prompt=True,
    help="API key (will prompt if not provided)",
)
def set_key(value: str) -> None:
    """Store an API key for automatic discovery."""
    try:
        asyncio.run(save_api_key(value))
    except CredentialError as e:
        _report_credential_error(e)
        sys.exit(ExitCode.GENERAL_ERROR)
    except ValueError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(ExitCode.GENERAL_ERROR)

    click.echo(click.style("API key stored successfully", fg="green"))


@key_group.command(name="clear")
@click.confirmation_option(prompt="Are you sure you want to remove the stored API key?")
def clear_key() -> None:
    """Remove the stored API key."""
    try:
        deleted = asyncio.run(clear_api_key())
    except CredentialError as e:
        _report_credential_error(e)
        sys.exit(ExitCode.GENERAL_ERROR)

    if deleted:
        click.echo(click.style("API key removed", fg="green"))
    else:
        click.echo(click.style("No stored API key", fg="yellow"))


@key_group.command(name="status")
def key_status() -> None:
    """Show the storage backend and whether a key is stored."""
    storage: HybridApiKeyStorage = get_storage()
    click.echo(f"Storage backend: {storage.backend.name}")

    try:
        stored = storage.load()
    except CredentialError as e:
        _report_credential_error(e)
        sys.exit(ExitCode.GENERAL_ERROR)

    if stored:
        click.echo(click.style("API key: stored", fg="green"))
    else:
        click.echo(click.style("API key: not stored", fg="yellow"))
