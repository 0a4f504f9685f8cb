"""Detection of test and fake-response run modes."""

import os

INTEGRATION_TEST_ENV_VAR = "INTEGRATION_TEST_FILE_DIR"


def is_integration_test_mode() -> bool:
    """Check whether the CLI runs under the integration test harness."""
    return bool(os.environ.get(INTEGRATION_TEST_ENV_VAR))


def should_skip_auth(
    fake_responses: str | None = None,
    record_responses: str | None = None,
) -> bool:
    """Decide whether real authentication should be bypassed.

    Authentication is skipped when model responses are replayed from a file
    (``--fake-responses``), recorded to a file (``--record-responses``), or
    when running in integration test mode.

    Args:
        fake_responses: Path to a fake responses file, if any
        record_responses: Path to a record responses file, if any

    Returns:
        True if authentication should be skipped
    """
    return bool(fake_responses or record_responses or is_integration_test_mode())
