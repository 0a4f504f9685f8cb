"""Fatal error handling for non-interactive runs.

Fatal failures go through a single failure handler of shape
``(error, exit_code) -> NoReturn``. The default handler reproduces the two
output modes of the CLI: in JSON mode the error is printed to stderr as a
JSON payload, in text mode it is logged; both terminate the process with
the same exit code. Tests inject a recording handler instead.
"""

from __future__ import annotations

import json
import re
import sys
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, NoReturn

import structlog

from gemini_auth.enums import OutputFormat
from gemini_auth.utils.cleanup import run_exit_cleanup

if TYPE_CHECKING:
    from gemini_auth.config.runtime import AuthConfig

log = structlog.get_logger(__name__)

FailureHandler = Callable[[BaseException, int], Awaitable[NoReturn]]

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def get_error_message(error: object) -> str:
    """Extract a human-readable message from any raised value."""
    if isinstance(error, BaseException):
        message = getattr(error, "message", None)
        if isinstance(message, str) and message:
            return message
        return str(error) or type(error).__name__
    return str(error)


def format_error_json(error: BaseException, exit_code: int) -> str:
    """Render an error as the JSON payload emitted in JSON output mode."""
    payload = {
        "error": {
            "type": type(error).__name__,
            "message": _ANSI_PATTERN.sub("", get_error_message(error)),
            "code": exit_code,
        }
    }
    return json.dumps(payload, indent=2)


async def handle_error(error: BaseException, config: AuthConfig, exit_code: int) -> NoReturn:
    """Report a fatal error according to the output format and exit.

    Args:
        error: The failure to report
        config: Runtime config providing the output format
        exit_code: Process exit code
    """
    if config.get_output_format() == OutputFormat.JSON:
        print(format_error_json(error, exit_code), file=sys.stderr)
    else:
        log.error("fatal_error", error=get_error_message(error), exit_code=exit_code)
        print(get_error_message(error), file=sys.stderr)

    await run_exit_cleanup()
    sys.exit(exit_code)


def default_failure_handler(config: AuthConfig) -> FailureHandler:
    """Build the production failure handler bound to a runtime config."""

    async def _handler(error: BaseException, exit_code: int) -> NoReturn:
        await handle_error(error, config, exit_code)

    return _handler
