"""CLI command groups for gemini-auth.

Key Commands:
    sources (gemini_auth.cli.credentials):
        Lists credentials found by every discovery probe.

    key (gemini_auth.cli.credentials):
        Manages the API key kept in the keyring or encrypted file.

The ``check`` and ``login`` commands live in ``gemini_auth.main``.
"""

from gemini_auth.cli.credentials import key_group, sources_command

__all__ = ["key_group", "sources_command"]
