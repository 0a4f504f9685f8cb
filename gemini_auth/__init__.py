"""gemini-auth: automatic credential discovery and auth-policy enforcement."""

__version__ = "0.1.0"
