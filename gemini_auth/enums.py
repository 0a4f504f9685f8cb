"""Enumerations for auth types, output formats and process exit codes."""

from enum import Enum, IntEnum


class AuthType(str, Enum):
    """Authentication mechanisms a CLI process can be configured with.

    - gemini-api-key: Gemini API key (``GEMINI_API_KEY``)
    - vertex-ai: Vertex AI (project/location or ``GOOGLE_API_KEY`` express mode)
    - oauth-personal: Google user credentials discovered from gcloud or ADC
    - login-with-google: Explicit "use Google Cloud Account" selection
    """

    USE_GEMINI = "gemini-api-key"
    USE_VERTEX_AI = "vertex-ai"
    OAUTH_PERSONAL = "oauth-personal"
    LOGIN_WITH_GOOGLE = "login-with-google"

    def __str__(self) -> str:
        return self.value


class OutputFormat(str, Enum):
    """CLI output modes."""

    TEXT = "text"
    JSON = "json"

    def __str__(self) -> str:
        return self.value


class ExitCode(IntEnum):
    """Process exit codes with reserved meanings."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    FATAL_AUTHENTICATION_ERROR = 41
    FATAL_CONFIG_ERROR = 52
