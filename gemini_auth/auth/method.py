"""Structural prerequisites check for each auth type."""

import os

from gemini_auth.enums import AuthType

GEMINI_API_KEY_MISSING = (
    "When using Gemini API, you must specify the GEMINI_API_KEY environment variable.\n"
    "Update your environment and try again (no reload needed if using .env)!"
)

VERTEX_AI_CONFIG_MISSING = (
    "When using Vertex AI, you must specify either:\n"
    "• GOOGLE_CLOUD_PROJECT and GOOGLE_CLOUD_LOCATION environment variables.\n"
    "• GOOGLE_API_KEY environment variable (if using express mode).\n"
    "Update your environment and try again (no reload needed if using .env)!"
)

INVALID_AUTH_METHOD = "Invalid auth method selected."


def validate_auth_method(auth_method: str) -> str | None:
    """Check that the configuration required by an auth type is present.

    Args:
        auth_method: Auth type value (e.g., "vertex-ai")

    Returns:
        None if the auth type can be used, otherwise a message describing
        what is missing
    """
    if auth_method in (AuthType.LOGIN_WITH_GOOGLE.value, AuthType.OAUTH_PERSONAL.value):
        return None

    if auth_method == AuthType.USE_GEMINI.value:
        if not os.environ.get("GEMINI_API_KEY"):
            return GEMINI_API_KEY_MISSING
        return None

    if auth_method == AuthType.USE_VERTEX_AI.value:
        has_project_location = bool(os.environ.get("GOOGLE_CLOUD_PROJECT")) and bool(
            os.environ.get("GOOGLE_CLOUD_LOCATION")
        )
        has_google_api_key = bool(os.environ.get("GOOGLE_API_KEY"))
        if not has_project_location and not has_google_api_key:
            return VERTEX_AI_CONFIG_MISSING
        return None

    return INVALID_AUTH_METHOD
