"""Initial authentication for interactive sessions."""

from __future__ import annotations

import structlog

from gemini_auth.config.runtime import AuthConfig
from gemini_auth.enums import AuthType
from gemini_auth.utils.errors import get_error_message

log = structlog.get_logger(__name__)


async def perform_initial_auth(config: AuthConfig, auth_type: AuthType | None) -> str | None:
    """Handle the initial authentication flow.

    Failures are returned rather than raised, so the interactive shell can
    display them and keep running.

    Args:
        config: The runtime config
        auth_type: The selected auth type, if any

    Returns:
        An error message if authentication fails, otherwise None
    """
    if config.fake_responses:
        # The fake content backend is created by refresh_auth; the auth type
        # itself is never used
        try:
            await config.refresh_auth(AuthType.USE_GEMINI)
        except Exception as e:
            return f"Failed to initialize fake responses. Message: {get_error_message(e)}"
        return None

    if not auth_type:
        return None

    try:
        await config.refresh_auth(auth_type)
    except Exception as e:
        log.debug("initial_auth_failed", auth_type=str(auth_type), error=get_error_message(e))
        return f"Failed to login. Message: {get_error_message(e)}"

    return None
