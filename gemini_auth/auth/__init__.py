"""Auth type resolution and validation.

Modules:
    - resolver: explicit flags and discovered credentials -> auth type
    - method: structural prerequisites check per auth type
    - non_interactive: validation state machine for non-interactive runs
    - interactive: initial authentication for interactive sessions
"""
