"""
Field and action resolution against markup that varies between releases of
the application. Both resolvers walk a SelectorSet in priority order and use
the first element that can actually take the input or the click.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page

from library_e2e.catalog import Scope, SelectorCatalog, SelectorSet
from library_e2e.errors import ActionNotFound, FieldNotFillable

logger = logging.getLogger(__name__)

# Used when a select does not offer the requested value.
FALLBACK_OPTIONS = ("Fiction", "Non-Fiction", "Other")

TRUTHY = ("true", "1")


@dataclass(frozen=True)
class FieldSpec:
    name: str
    aliases: tuple[str, ...] = ()

    @property
    def candidates(self) -> tuple[str, ...]:
        return (self.name, *[a for a in self.aliases if a != self.name])


@dataclass
class FillResult:
    field: str
    success: bool
    selector: str | None = None


@dataclass
class FillSummary:
    results: list[FillResult] = field(default_factory=list)

    def add(self, result: FillResult) -> None:
        self.results.append(result)

    @property
    def filled(self) -> list[str]:
        return [r.field for r in self.results if r.success]

    @property
    def failed(self) -> list[str]:
        return [r.field for r in self.results if not r.success]

    @property
    def ok(self) -> bool:
        return not self.failed

    def raise_for_failures(self) -> None:
        if self.failed:
            raise FieldNotFillable(self.failed)

    def __str__(self) -> str:
        return f"{len(self.filled)}/{len(self.results)} fields filled successfully"


class FieldResolver:
    def __init__(self, page: Page, catalog: SelectorCatalog, visible_timeout: int = 2000):
        self.page = page
        self.catalog = catalog
        self.visible_timeout = visible_timeout

    def fill_field(self, name_or_aliases, value: str) -> bool:
        """
        Fills a form field addressed by its logical name.
        Returns True on the first successful fill, False if nothing took the
        value. Never raises for a missing field.
        """
        return self.resolve_field(name_or_aliases, value) is not None

    def resolve_field(self, name_or_aliases, value: str) -> str | None:
        """
        Fills a form field and reports which selector took the value.

        Args:
            name_or_aliases: A field name, a list of aliases, or a FieldSpec.
                Aliases are tried in order.
            value: The text to enter or the option to select.

        Returns:
            The winning selector, or None if no alias or selector produced
            a usable element.
        """
        if isinstance(name_or_aliases, FieldSpec):
            names = name_or_aliases.candidates
        elif isinstance(name_or_aliases, str):
            names = (name_or_aliases,)
        else:
            names = tuple(name_or_aliases)

        logger.debug("Attempting to fill field(s) %s with %r", "|".join(names), value)
        for name in names:
            selectors = self.catalog.field_selectors(name)
            logger.debug("Trying %d selectors for field: %s", len(selectors), name)
            selector = self.fill_with(selectors, value)
            if selector is not None:
                return selector

        logger.warning('Field "%s" not found or could not be filled with %r', "|".join(names), value)
        return None

    def fill_with(self, selectors: SelectorSet, value: str) -> str | None:
        """
        Fills the first usable element of a selector chain.

        Returns:
            The selector that took the value, or None.
        """
        for matcher in selectors:
            try:
                element = matcher.locate(self.page).first
                if element.count() == 0:
                    logger.debug("[%s] no element for %s", selectors.name, matcher)
                    continue
                element.wait_for(state="visible", timeout=self.visible_timeout)
                if not element.is_enabled():
                    logger.debug("[%s] field found but disabled: %s", selectors.name, matcher)
                    continue
                if not self._fill_element(element, value):
                    logger.debug("[%s] no usable option in %s", selectors.name, matcher)
                    continue
            except PlaywrightError as e:
                logger.debug("[%s] error filling %s: %s", selectors.name, matcher, e)
                continue
            logger.info("[%s] filled using %s", selectors.name, matcher)
            return str(matcher)
        return None

    def _fill_element(self, element: Locator, value: str) -> bool:
        tag_name = element.evaluate("el => el.tagName.toLowerCase()")
        input_type = (element.get_attribute("type") or "").lower()
        logger.debug("Element kind: %s%s", tag_name, f":{input_type}" if input_type else "")

        if tag_name == "select":
            return self._select(element, value) is not None
        if input_type in ("checkbox", "radio"):
            if value.lower() in TRUTHY:
                element.check()
            else:
                element.uncheck()
            return True
        element.clear()
        element.fill(value)
        return True

    def _select(self, element: Locator, value: str) -> str | None:
        """
        Selects by label, then by value, then by a case-insensitive match on
        either. A value the list does not offer falls back to a known option
        so the field is never left unset.
        """
        options = element.evaluate(
            "el => Array.from(el.options).map(o => ({value: o.value, label: o.label.trim()}))"
        )
        for option in options:
            if option["label"] == value:
                element.select_option(label=option["label"])
                return option["label"]
        for option in options:
            if option["value"] == value:
                element.select_option(value=option["value"])
                return option["label"]
        needle = value.strip().lower()
        for option in options:
            if needle and needle in (option["label"].lower(), option["value"].lower()):
                element.select_option(value=option["value"])
                return option["label"]

        fallback = next(
            (o for name in FALLBACK_OPTIONS for o in options if o["label"] == name),
            next((o for o in options if o["value"]), None),
        )
        if fallback is None:
            return None
        logger.warning("Option %r not offered; selecting %r instead", value, fallback["label"])
        element.select_option(value=fallback["value"])
        return fallback["label"]


class ActionResolver:
    def __init__(self, page: Page):
        self.page = page

    def find(self, selectors: SelectorSet, scope: Scope | None = None) -> Locator | None:
        match = selectors.first_match(scope or self.page)
        return match[1] if match else None

    def is_available(self, selectors: SelectorSet, scope: Scope | None = None) -> bool:
        return self.find(selectors, scope) is not None

    def perform(self, selectors: SelectorSet, scope: Scope | None = None) -> str:
        """
        Clicks the first element matched by the chain, then waits for the
        DOM to settle. Waiting for network idle is avoided since the
        application polls in the background.

        Args:
            selectors: The chain describing the control.
            scope: Optional Locator to search within (e.g. a table row).

        Returns:
            The selector that was clicked.

        Raises:
            ActionNotFound: No selector matched any element.
        """
        match = selectors.first_match(scope or self.page)
        if match is None:
            raise ActionNotFound(selectors.name, selectors.selectors)
        matcher, element = match
        logger.info("[%s] clicking %s", selectors.name, matcher)
        element.click()
        self.page.wait_for_load_state("domcontentloaded")
        return str(matcher)
