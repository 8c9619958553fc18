"""
Selector catalog for the library application.

Every logical target (a form field, a button, a piece of content) is described
by an ordered chain of matchers. Order encodes priority, most specific first,
and the first matcher that finds an element wins. The chains are loaded once
from data/config.json and never mutated afterwards.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Protocol, Union

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page

logger = logging.getLogger(__name__)

Scope = Union[Page, Locator]


def quote(value: str) -> str:
    """
    Quotes a value for use inside a selector string.
    Backslashes and double quotes are escaped so titles such as
    'Book with "Quotes" & Symbols' stay a single selector token.

    Args:
        value: The raw text.

    Returns:
        The value wrapped in double quotes.
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class Matcher(Protocol):
    def locate(self, scope: Scope) -> Locator: ...

    def matches(self, scope: Scope) -> Locator | None: ...


@dataclass(frozen=True)
class CssMatcher:
    """Matches with any Playwright selector string (CSS, text=, :has-text(), role=)."""

    selector: str

    def locate(self, scope: Scope) -> Locator:
        return scope.locator(self.selector)

    def matches(self, scope: Scope) -> Locator | None:
        locator = self.locate(scope).first
        return locator if locator.count() > 0 else None

    def __str__(self) -> str:
        return self.selector


@dataclass(frozen=True)
class SelectorSet:
    name: str
    matchers: tuple[Matcher, ...]

    @classmethod
    def of(cls, name: str, selectors) -> "SelectorSet":
        return cls(name, tuple(CssMatcher(s) for s in selectors))

    def __iter__(self) -> Iterator[Matcher]:
        return iter(self.matchers)

    def __len__(self) -> int:
        return len(self.matchers)

    @property
    def selectors(self) -> list[str]:
        return [str(m) for m in self.matchers]

    def first_match(self, scope: Scope) -> tuple[Matcher, Locator] | None:
        """
        Evaluates the matchers in order and stops at the first one that
        finds at least one element.

        Args:
            scope: A Page, or a Locator to search within.

        Returns:
            The winning matcher and the first element it found, or None.
        """
        for matcher in self.matchers:
            try:
                element = matcher.matches(scope)
            except PlaywrightError as e:
                # Rejected selector syntax for this value; try the next one.
                logger.debug("[%s] selector %s failed: %s", self.name, matcher, e)
                continue
            if element is not None:
                return matcher, element
        return None

    def union(self) -> str:
        """All selectors as one comma-joined selector, in document order."""
        return ", ".join(self.selectors)


@dataclass(frozen=True)
class SelectorTemplate:
    """
    Ordered selector templates for targets that depend on a value.
    '{q}' expands to the quoted value, '{raw}' to the value verbatim.
    """

    name: str
    templates: tuple[str, ...]

    def render(self, value: str) -> SelectorSet:
        return SelectorSet.of(
            f"{self.name}:{value}",
            [t.format(q=quote(value), raw=value) for t in self.templates],
        )


_SETS = {
    "usernameField": "username_field",
    "passwordField": "password_field",
    "loginButton": "login_button",
    "logoutButton": "logout_button",
    "booksLink": "books_link",
    "addBookButton": "add_book_button",
    "submitButton": "submit_button",
    "confirmDeleteButton": "confirm_delete_button",
    "searchInput": "search_input",
    "validationError": "validation_error",
    "errorBanner": "error_banner",
    "editButton": "edit_button",
    "deleteButton": "delete_button",
    "tableRows": "table_rows",
    "listContainer": "list_container",
}

_TEMPLATES = {
    "field": "field",
    "bookRow": "book_row",
    "presence": "presence",
}


@dataclass(frozen=True)
class SelectorCatalog:
    username_field: SelectorSet
    password_field: SelectorSet
    login_button: SelectorSet
    logout_button: SelectorSet
    books_link: SelectorSet
    add_book_button: SelectorSet
    submit_button: SelectorSet
    confirm_delete_button: SelectorSet
    search_input: SelectorSet
    validation_error: SelectorSet
    error_banner: SelectorSet
    edit_button: SelectorSet
    delete_button: SelectorSet
    table_rows: SelectorSet
    list_container: SelectorSet
    field: SelectorTemplate
    book_row: SelectorTemplate
    presence: SelectorTemplate

    @classmethod
    def from_dict(cls, data: dict) -> "SelectorCatalog":
        missing = [k for k in (*_SETS, *_TEMPLATES) if k not in data]
        if missing:
            raise ValueError(f"Selector catalog is missing: {', '.join(missing)}")
        kwargs = {attr: SelectorSet.of(attr, data[key]) for key, attr in _SETS.items()}
        kwargs.update(
            {attr: SelectorTemplate(attr, tuple(data[key])) for key, attr in _TEMPLATES.items()}
        )
        return cls(**kwargs)

    def field_selectors(self, field_name: str) -> SelectorSet:
        return self.field.render(field_name)

    def book_row_selectors(self, title: str) -> SelectorSet:
        return self.book_row.render(title)

    def presence_selectors(self, text: str) -> SelectorSet:
        return self.presence.render(text)
