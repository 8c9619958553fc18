"""
Book-related action helpers: navigation, the add/edit form, search and
row actions. Rows are found by title since the UI exposes no record id.
"""
from __future__ import annotations

import logging

from playwright.sync_api import Locator, Page

from library_e2e.config import LibraryConfig
from library_e2e.errors import ActionNotFound
from library_e2e.models import BookRecord
from library_e2e.resolvers import ActionResolver, FieldResolver, FieldSpec, FillResult, FillSummary
from library_e2e.retry import with_retry
from library_e2e.utils import settle

logger = logging.getLogger(__name__)

BOOK_FIELDS = (
    FieldSpec("title"),
    FieldSpec("author"),
    FieldSpec("isbn"),
    FieldSpec("genre"),
    FieldSpec("publicationDate", ("publication-date", "date")),
    FieldSpec("price"),
)


class BookActions:
    def __init__(self, page: Page, config: LibraryConfig):
        self.page = page
        self.config = config
        self.catalog = config.selectors
        self.timeouts = config.timeouts
        self.fields = FieldResolver(page, config.selectors, config.timeouts.field_visible)
        self.actions = ActionResolver(page)

    def _retry(self, operation, *args):
        return with_retry(
            operation,
            *args,
            max_attempts=self.config.retry.max_attempts,
            delay_ms=self.config.retry.delay_ms,
        )

    def navigate_to_books(self) -> None:
        self.actions.perform(self.catalog.books_link)

    def open_add_book_page(self) -> None:
        self.page.goto(self.config.url(self.config.urls.add_book_path), wait_until="domcontentloaded")

    def open_add_book_dialog(self) -> None:
        """Clicks 'Add Book', retrying while the list is still rendering."""
        self._retry(self.actions.perform, self.catalog.add_book_button)
        settle(self.page, self.timeouts.dialog_settle)

    def fill_book_form(self, book, strict: bool = False) -> FillSummary:
        """
        Fills the add/edit form. Empty values are skipped, so a partial
        mapping (e.g. {"price": "10"}) only touches those fields.

        Args:
            book: A BookRecord or a mapping of form field names to values.
            strict: Raise FieldNotFillable if any provided field could not be filled.

        Returns:
            Per-field outcomes.
        """
        values = book.as_form_fields() if isinstance(book, BookRecord) else dict(book)
        summary = FillSummary()

        for spec in BOOK_FIELDS:
            value = values.get(spec.name)
            if not value:
                continue
            selector = self.fields.resolve_field(spec, value)
            summary.add(FillResult(spec.name, selector is not None, selector))

        logger.info("Form filling summary: %s", summary)
        if summary.failed:
            logger.warning("Failed to fill fields: %s", ", ".join(summary.failed))
        if strict:
            summary.raise_for_failures()
        return summary

    def submit_book_form(self) -> None:
        self._retry(self.actions.perform, self.catalog.submit_button)

    def search_book(self, query: str) -> None:
        search = self.actions.find(self.catalog.search_input)
        if search is None:
            raise ActionNotFound(self.catalog.search_input.name, self.catalog.search_input.selectors)
        search.fill(query)
        settle(self.page, self.timeouts.search_settle)

    def clear_search(self) -> None:
        self.search_book("")

    def find_book_row(self, title: str) -> Locator:
        """
        Returns the first row-like element containing the title.
        If nothing matches yet, the most specific locator is returned so
        callers can still wait on it with expect().
        """
        rows = self.catalog.book_row_selectors(title)
        match = rows.first_match(self.page)
        if match:
            return match[1]
        return next(iter(rows)).locate(self.page).first

    def edit_book(self, title: str) -> None:
        row = self.find_book_row(title)
        self.actions.perform(self.catalog.edit_button, scope=row)
        settle(self.page, self.timeouts.dialog_settle)

    def delete_book(self, title: str, confirm: bool = True) -> None:
        """
        Clicks the row's delete control. When confirm is set and the
        application asks for confirmation, the dialog is accepted.
        """
        row = self.find_book_row(title)
        self.actions.perform(self.catalog.delete_button, scope=row)
        settle(self.page, self.timeouts.delete_settle)
        if confirm and self.has_confirm_dialog():
            self.confirm_delete()

    def has_confirm_dialog(self) -> bool:
        return self.actions.is_available(self.catalog.confirm_delete_button)

    def confirm_delete(self) -> None:
        self.actions.perform(self.catalog.confirm_delete_button)

    def get_book_count(self) -> int:
        settle(self.page, self.timeouts.search_settle)
        return self.page.locator(self.catalog.table_rows.union()).count()
