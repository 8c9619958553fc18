import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from library_e2e.errors import ActionNotFound, TransientBrowserFailure
from library_e2e.retry import is_retry_eligible, with_retry


class Flaky:
    """Fails with the given errors in turn, then returns 'done'."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    def __call__(self, *args, **kwargs):
        self.calls += 1
        self.args = (args, kwargs)
        if self.errors:
            raise self.errors.pop(0)
        return "done"


def test_recovers_from_transient_failures():
    operation = Flaky(
        TransientBrowserFailure("context lost"),
        PlaywrightError("Target page, context or browser has been closed"),
    )

    assert with_retry(operation, max_attempts=3, delay_ms=0) == "done"
    assert operation.calls == 3


def test_passes_arguments_through():
    operation = Flaky()

    with_retry(operation, "submit", max_attempts=2, delay_ms=0, scope="row")

    assert operation.args == (("submit",), {"scope": "row"})


def test_reraises_last_failure_when_exhausted():
    operation = Flaky(
        PlaywrightTimeoutError("Timeout 100ms exceeded"),
        ActionNotFound("submit_button", ['button[type="submit"]']),
        ActionNotFound("submit_button", ['button[type="submit"]']),
        TransientBrowserFailure("never reached"),
    )

    with pytest.raises(ActionNotFound):
        with_retry(operation, max_attempts=3, delay_ms=0)
    assert operation.calls == 3


def test_does_not_retry_permanent_failures():
    operation = Flaky(AssertionError("wrong book count"))

    with pytest.raises(AssertionError):
        with_retry(operation, max_attempts=3, delay_ms=0)
    assert operation.calls == 1


def test_custom_predicate():
    operation = Flaky(ValueError("flaky parse"), ValueError("flaky parse"))

    result = with_retry(operation, max_attempts=3, delay_ms=0,
                        retry_on=lambda e: isinstance(e, ValueError))

    assert result == "done"


@pytest.mark.parametrize("error, eligible", [
    (TransientBrowserFailure("gone"), True),
    (ActionNotFound("add_book_button", []), True),
    (PlaywrightTimeoutError("Timeout 10000ms exceeded"), True),
    (PlaywrightError("Target closed"), True),
    (PlaywrightError("Execution context was destroyed, most likely because of a navigation"), True),
    (PlaywrightError("Element is not an <input>, <textarea> or <select> element"), False),
    (AssertionError("mismatch"), False),
    (KeyError("title"), False),
])
def test_retry_eligibility(error, eligible):
    assert is_retry_eligible(error) is eligible
