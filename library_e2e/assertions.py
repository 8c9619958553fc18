"""
Assertion helpers for the library application.

The book list is rendered client-side and refreshed after a server round trip,
so presence checks try many query strategies across several attempts, reloading
between attempts, before declaring a record missing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, expect
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from library_e2e.catalog import quote
from library_e2e.config import LibraryConfig
from library_e2e.errors import NotFound, ValidationMessageNotFound
from library_e2e.utils import capture_screenshot, settle, slugify

logger = logging.getLogger(__name__)

DUPLICATE_MARKERS = ("already exists", "duplicate")


@dataclass
class VerificationAttempt:
    attempt: int
    selector: str
    found: bool


class Assertions:
    def __init__(self, page: Page, config: LibraryConfig):
        self.page = page
        self.config = config
        self.timeouts = config.timeouts
        self.selectors = config.selectors

    def verify_dashboard_loaded(self) -> None:
        """Verifies the login redirect landed on the books page."""
        logger.info("Verifying dashboard loaded... %s", self.page.url)
        expect(self.page).to_have_url(self.config.books_url_pattern)
        self.page.wait_for_load_state("domcontentloaded")

    def verify_on_login_page(self) -> None:
        url = self.page.url.rstrip("/")
        assert "login" in url or url == self.config.base_url.rstrip("/"), (
            f"Expected to remain on the login page, got {url}"
        )

    def verify_present(self, text: str) -> list[VerificationAttempt]:
        """
        Verifies text (usually a book title) is shown on the page.

        Each attempt waits briefly for the network to go quiet, tries the
        presence strategies in catalog order, then falls back to the full
        page text. Between attempts the page is reloaded, since the record
        may have been added by a round trip the current DOM predates.

        Args:
            text: The literal text to look for.

        Returns:
            The attempts made, ending with the successful one.

        Raises:
            NotFound: All attempts failed and no duplicate-record error is shown.
        """
        settle(self.page, self.timeouts.verify_settle)
        max_attempts = self.config.retry.verify_attempts
        strategies = self.selectors.presence_selectors(text)
        attempts: list[VerificationAttempt] = []

        for attempt in range(1, max_attempts + 1):
            logger.info("Verification attempt %d/%d for: %s", attempt, max_attempts, text)
            try:
                self.page.wait_for_load_state("networkidle", timeout=self.timeouts.network_idle)
            except PlaywrightTimeoutError:
                pass  # Background polling keeps the network busy.

            for matcher in strategies:
                found = self._visible(matcher)
                attempts.append(VerificationAttempt(attempt, str(matcher), found))
                if found:
                    logger.info('"%s" found using selector: %s', text, matcher)
                    return attempts

            found = self._in_page_text(text)
            attempts.append(VerificationAttempt(attempt, "body text", found))
            if found:
                logger.info('"%s" found in page content (attempt %d)', text, attempt)
                return attempts

            if self._duplicate_reported():
                logger.info("Record already exists - treating as present")
                return attempts

            if attempt < max_attempts:
                logger.info("Not found in attempt %d, reloading before retry...", attempt)
                settle(self.page, self.timeouts.verify_retry_wait)
                try:
                    self.page.reload(wait_until="domcontentloaded")
                except PlaywrightError as e:
                    logger.warning("Could not reload page for retry: %s", e)
                settle(self.page, self.timeouts.reload_settle)

        logger.error('"%s" not found after %d attempts', text, max_attempts)

        screenshot = None
        try:
            screenshot = capture_screenshot(
                self.page,
                f"not-found-{slugify(text)}",
                directory=self.config.artifacts_dir / "screenshots",
            )
        except PlaywrightError as e:
            logger.warning("Could not take screenshot: %s", e)
        raise NotFound(
            text, max_attempts, sorted({a.selector for a in attempts}), screenshot=screenshot
        )

    verify_book_in_list = verify_present

    def verify_absent(self, text: str) -> None:
        """
        Verifies no visible element carries exactly this text. Deletion is
        confirmed synchronously by the UI, so there is no reload loop.
        """
        matches = self.page.locator(f"text={quote(text)}").locator("visible=true")
        expect(matches).to_have_count(0)

    verify_book_not_in_list = verify_absent

    def verify_validation_errors(self, expected_errors) -> None:
        """
        Verifies each expected validation message is visible.

        Args:
            expected_errors: Messages to find; matched case-insensitively as substrings.

        Raises:
            ValidationMessageNotFound: Names the first message not shown.
        """
        settle(self.page, self.timeouts.validation_settle)

        for expected in expected_errors:
            if self._validation_message_shown(expected):
                logger.info('Validation message found: "%s"', expected)
                continue
            if self.page.get_by_text(expected).locator("visible=true").count() > 0:
                logger.info('Validation message found in page text: "%s"', expected)
                continue
            raise ValidationMessageNotFound(expected)

    def _validation_message_shown(self, expected: str) -> bool:
        needle = expected.lower()
        for matcher in self.selectors.validation_error:
            elements = matcher.locate(self.page)
            for i in range(elements.count()):
                error_text = elements.nth(i).text_content() or ""
                if needle in error_text.lower() and elements.nth(i).is_visible():
                    return True
        return False

    def _visible(self, matcher) -> bool:
        try:
            element = matcher.matches(self.page)
            if element is None:
                return False
            element.wait_for(state="visible", timeout=self.timeouts.element_visible)
            return True
        except PlaywrightError as e:
            logger.debug("Strategy %s failed: %s", matcher, e)
            return False

    def _in_page_text(self, text: str) -> bool:
        try:
            content = self.page.inner_text("body", timeout=self.timeouts.element_visible)
        except PlaywrightError as e:
            logger.warning("Could not get page content for fallback check: %s", e)
            return False
        return bool(content) and text in content

    def _duplicate_reported(self) -> bool:
        try:
            messages = (
                self.page.locator(self.selectors.error_banner.union())
                .locator("visible=true")
                .all_text_contents()
            )
        except PlaywrightError as e:
            logger.warning("Could not check for error messages: %s", e)
            return False
        if messages:
            logger.info("Error messages found: %s", messages)
        return any(marker in m.lower() for m in messages for marker in DUPLICATE_MARKERS)
