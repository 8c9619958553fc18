"""
Bounded retry for page operations that race the application's own rendering
(opening the add-book form, submitting it).
"""
from __future__ import annotations

import logging
from typing import Callable, TypeVar

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from tenacity import Retrying, before_sleep_log, retry_if_exception, stop_after_attempt, wait_fixed

from library_e2e.errors import ActionNotFound, TransientBrowserFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Messages Playwright raises when the page or its context is torn down mid-call.
TRANSIENT_SIGNATURES = (
    "Target page, context or browser has been closed",
    "Target closed",
    "Execution context was destroyed",
    "Frame was detached",
    "Navigation interrupted",
)


def is_transient(error: BaseException) -> bool:
    return isinstance(error, PlaywrightError) and any(
        signature.lower() in str(error).lower() for signature in TRANSIENT_SIGNATURES
    )


def is_retry_eligible(error: BaseException) -> bool:
    """
    Retry only what can plausibly succeed on a second try: a torn-down
    context, a timeout, or a control that had not rendered yet. Assertion
    failures and programming errors surface immediately.
    """
    if isinstance(error, (TransientBrowserFailure, ActionNotFound, PlaywrightTimeoutError)):
        return True
    return is_transient(error)


def with_retry(
    operation: Callable[..., T],
    *args,
    max_attempts: int = 3,
    delay_ms: int = 1000,
    retry_on: Callable[[BaseException], bool] = is_retry_eligible,
    **kwargs,
) -> T:
    """
    Runs operation, re-running it on retry-eligible failures.

    Args:
        operation: The callable to run.
        *args: Positional arguments for operation.
        max_attempts: Total number of attempts, including the first.
        delay_ms: Fixed pause between attempts.
        retry_on: Predicate deciding whether a failure is worth another attempt.
        **kwargs: Keyword arguments for operation.

    Returns:
        Whatever operation returns.

    Raises:
        The last failure once attempts are exhausted, or the first
        failure that is not retry-eligible.
    """
    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_fixed(delay_ms / 1000),
        retry=retry_if_exception(retry_on),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return retrying(operation, *args, **kwargs)
