"""CLI entry point for gemini-auth."""

import asyncio
import json
import sys

import click
import structlog

from gemini_auth.auth.interactive import perform_initial_auth
from gemini_auth.auth.non_interactive import validate_non_interactive_auth
from gemini_auth.cli.credentials import key_group, sources_command
from gemini_auth.config.runtime import RuntimeConfig
from gemini_auth.config.settings import Settings
from gemini_auth.enums import AuthType, ExitCode, OutputFormat
from gemini_auth.exceptions import ConfigurationError
from gemini_auth.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)

AUTH_TYPE_CHOICES = [auth_type.value for auth_type in AuthType]


@click.group()
@click.option(
    "--settings",
    "settings_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to settings file (default: ~/.gemini/settings.json)",
)
@click.option("--log-level", default="WARNING", help="Logging level")
@click.option(
    "--output-format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format",
)
@click.option("--fake-responses", default=None, type=click.Path(), help="Replay model responses from a file")
@click.option("--record-responses", default=None, type=click.Path(), help="Record model responses to a file")
@click.pass_context
def cli(
    ctx: click.Context,
    settings_path: str | None,
    log_level: str,
    output_format: str,
    fake_responses: str | None,
    record_responses: str | None,
) -> None:
    """gemini-auth: credential discovery and auth policy checks."""
    output = OutputFormat(output_format)
    configure_logging(log_level, json_output=output == OutputFormat.JSON)

    config = RuntimeConfig(
        output_format=output,
        fake_responses=fake_responses,
        record_responses=record_responses,
    )

    # Credential listing and key storage do not depend on settings
    commands_without_settings = ["sources", "key"]
    if ctx.invoked_subcommand in commands_without_settings:
        ctx.obj = {"settings": None, "config": config}
        return

    try:
        settings = Settings.load(settings_path)
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        log.debug("settings_error", exc_info=True)
        sys.exit(ExitCode.FATAL_CONFIG_ERROR)

    ctx.obj = {"settings": settings, "config": config}


@cli.command()
@click.option(
    "--auth-type",
    type=click.Choice(AUTH_TYPE_CHOICES),
    default=None,
    help="Auth type to validate (default: selected type from settings, then auto-detection)",
)
@click.option("--use-external-auth", is_flag=True, help="Authentication is handled by an external provider")
@click.pass_context
def check(ctx: click.Context, auth_type: str | None, use_external_auth: bool) -> None:
    """Validate authentication for a non-interactive run.

    \b
    Exit codes:
      0  - Authentication is valid (the auth type is printed)
      41 - Fatal authentication error
      52 - Settings file error
    """
    settings: Settings = ctx.obj["settings"]
    config: RuntimeConfig = ctx.obj["config"]

    if config.skip_auth:
        click.echo("Authentication skipped (test mode)", err=True)
        return

    configured = AuthType(auth_type) if auth_type else settings.security.auth.selected_type
    use_external = use_external_auth or settings.security.auth.use_external

    validated = asyncio.run(validate_non_interactive_auth(configured, use_external, config, settings))

    if config.get_output_format() == OutputFormat.JSON:
        click.echo(json.dumps({"auth_type": validated.value}))
    else:
        click.echo(validated.value)


@cli.command()
@click.option(
    "--auth-type",
    type=click.Choice(AUTH_TYPE_CHOICES),
    default=None,
    help="Auth type to log in with (default: selected type from settings)",
)
@click.pass_context
def login(ctx: click.Context, auth_type: str | None) -> None:
    """Perform the initial authentication of an interactive session."""
    settings: Settings = ctx.obj["settings"]
    config: RuntimeConfig = ctx.obj["config"]

    selected = AuthType(auth_type) if auth_type else settings.security.auth.selected_type
    error = asyncio.run(perform_initial_auth(config, selected))

    if error:
        click.echo(click.style(error, fg="red"), err=True)
        sys.exit(ExitCode.GENERAL_ERROR)

    if config.auth_type is not None:
        click.echo(click.style(f"Authenticated with {config.auth_type}", fg="green"))
    else:
        click.echo("No auth type selected")


cli.add_command(sources_command)
cli.add_command(key_group)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
