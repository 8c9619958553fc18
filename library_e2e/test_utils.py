import os

import pytest
from playwright.sync_api import Page

from library_e2e.journeys import Journey
from library_e2e.utils import capture_screenshot, slugify


def test_capture_screenshot_creates_directory(page: Page, tmp_path):
    page.set_content("<h1>Books</h1>")
    target = tmp_path / "shots" / "nested"

    path = capture_screenshot(page, "books", directory=target)

    assert os.path.exists(path)
    assert os.path.basename(path).startswith("books_desktop_")


def test_capture_screenshot_marks_mobile_viewports(page: Page, tmp_path, library_config):
    page.set_viewport_size(library_config.viewport["mobile"])
    page.set_content("<h1>Books</h1>")

    path = capture_screenshot(page, "books", directory=tmp_path)

    assert "_mobile_" in os.path.basename(path)


@pytest.mark.parametrize("text, expected", [
    ("The Great Gatsby", "the-great-gatsby"),
    ('Book with "Quotes" & Symbols', "book-with-quotes-symbols"),
    ("???", "untitled"),
])
def test_slugify(text, expected):
    assert slugify(text) == expected


def test_journey_records_steps_and_stops_at_failure():
    journey = Journey("demo")

    with journey.step("first"):
        pass
    with pytest.raises(AssertionError):
        with journey.step("second"):
            assert False, "broken"

    assert [(s.name, s.passed) for s in journey.steps] == [("first", True), ("second", False)]
    assert not journey.passed
    assert "2. second [FAILED]" in journey.summary()


def test_empty_journey_has_not_passed():
    assert not Journey("nothing").passed
