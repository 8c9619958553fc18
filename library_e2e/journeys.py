"""
Multi-step user journeys composed from the auth, book and assertion helpers.

Each step is logged and timed. A failing step re-raises, so the steps after it
never run and the test fails at the step that broke.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field

from playwright.sync_api import Page, expect

from library_e2e.assertions import Assertions
from library_e2e.auth import AuthHelper
from library_e2e.book_actions import BookActions
from library_e2e.config import LibraryConfig
from library_e2e.models import BookRecord, Credentials

logger = logging.getLogger(__name__)


@dataclass
class StepRecord:
    name: str
    duration: float
    passed: bool


@dataclass
class Journey:
    name: str
    steps: list[StepRecord] = field(default_factory=list)

    @contextmanager
    def step(self, name: str):
        index = len(self.steps) + 1
        logger.info("[%s] step %d: %s", self.name, index, name)
        started = time.monotonic()
        try:
            yield
        except BaseException:
            self.steps.append(StepRecord(name, time.monotonic() - started, False))
            logger.error("[%s] step %d failed: %s", self.name, index, name)
            raise
        self.steps.append(StepRecord(name, time.monotonic() - started, True))
        logger.info("[%s] step %d passed in %.2fs", self.name, index, self.steps[-1].duration)

    @property
    def passed(self) -> bool:
        return bool(self.steps) and all(s.passed for s in self.steps)

    def summary(self) -> str:
        lines = [f"{self.name}:"]
        for i, s in enumerate(self.steps, 1):
            lines.append(f"  {i}. {s.name} [{'ok' if s.passed else 'FAILED'}] {s.duration:.2f}s")
        return "\n".join(lines)


class LibraryJourneys:
    def __init__(self, page: Page, config: LibraryConfig, credentials: Credentials):
        self.page = page
        self.config = config
        self.credentials = credentials
        self.auth = AuthHelper(page, config)
        self.books = BookActions(page, config)
        self.assertions = Assertions(page, config)

    def _login(self, journey: Journey) -> None:
        with journey.step("Login with valid credentials"):
            self.auth.login(self.credentials.username, self.credentials.password)
        with journey.step("Verify redirect to books page"):
            self.assertions.verify_dashboard_loaded()
            assert self.config.urls.login_path not in self.page.url

    def add_book_journey(self, book: BookRecord) -> Journey:
        """
        Login, add a book through the form, then find it in the list, in the
        search results and in its own row.
        """
        journey = Journey("Login to add book")
        self._login(journey)

        with journey.step("Navigate to books page"):
            self.books.navigate_to_books()
            expect(self.page).to_have_url(self.config.books_url_pattern)
            expect(self.page.locator(self.config.selectors.list_container.union()).first).to_be_visible()

        with journey.step("Record initial book count"):
            initial_count = self.books.get_book_count()
            logger.info("Initial book count: %d", initial_count)

        with journey.step("Navigate to add book page"):
            self.books.open_add_book_page()
            expect(self.page.locator(self.config.selectors.field_selectors("title").union()).first).to_be_visible()

        with journey.step("Fill in book details"):
            self.books.fill_book_form(book, strict=True)

        with journey.step("Submit the book form"):
            self.books.submit_book_form()

        with journey.step("Verify book appears in the list"):
            self.assertions.verify_present(book.title)
            new_count = self.books.get_book_count()
            assert new_count == initial_count + 1, f"Expected {initial_count + 1} books, found {new_count}"

        with journey.step("Search for the new book"):
            self.books.search_book(book.title)
            self.assertions.verify_present(book.title)

        with journey.step("Verify book row"):
            self.books.clear_search()
            row = self.books.find_book_row(book.title)
            expect(row).to_be_visible()
            assert book.title in (row.text_content() or "")

        logger.info(journey.summary())
        return journey

    def crud_journey(self, book: BookRecord, updated_price: str = "100000") -> Journey:
        """Create, read (search), update (price) and delete one book."""
        journey = Journey("Complete CRUD cycle")
        self._login(journey)

        with journey.step("Navigate to books page"):
            self.books.navigate_to_books()

        with journey.step("Create a new book"):
            self.books.open_add_book_page()
            self.books.fill_book_form(book, strict=True)
            self.books.submit_book_form()
            self.assertions.verify_present(book.title)

        with journey.step("Read: search for the book"):
            self.books.search_book(book.title)
            self.assertions.verify_present(book.title)

        with journey.step("Update the book"):
            self.books.clear_search()
            self.books.edit_book(book.title)
            expect(self.page.locator(self.config.selectors.field_selectors("price").union()).first).to_be_visible()
            self.books.fill_book_form({"price": updated_price}, strict=True)
            self.books.submit_book_form()
            self.assertions.verify_present(book.title)

        with journey.step("Delete the book"):
            self.books.delete_book(book.title, confirm=True)
            self.assertions.verify_absent(book.title)

        logger.info(journey.summary())
        return journey
