"""Exit cleanup registry.

Callbacks registered here run before a fatal auth error terminates the
process. The package itself holds nothing that needs releasing; this is a
hook for applications that embed the validator and open their own
resources (clients, telemetry exporters) before calling it.
"""

import inspect
from collections.abc import Awaitable, Callable

import structlog

log = structlog.get_logger(__name__)

CleanupFn = Callable[[], Awaitable[None] | None]

_cleanup_functions: list[CleanupFn] = []


def register_cleanup(fn: CleanupFn) -> None:
    """Register a sync or async callback to run on exit."""
    _cleanup_functions.append(fn)


async def run_exit_cleanup() -> None:
    """Run and clear all registered cleanup callbacks.

    A failing callback is logged and does not prevent the others from running.
    """
    functions = list(_cleanup_functions)
    _cleanup_functions.clear()

    for fn in functions:
        try:
            result = fn()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            log.warning("exit_cleanup_failed", callback=getattr(fn, "__name__", repr(fn)), error=str(e))
