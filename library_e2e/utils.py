import os
import time
from pathlib import Path

from playwright.sync_api import Page


def capture_screenshot(page: Page, name: str, directory="artifacts/screenshots", full_page: bool = True) -> str:
    """
    Captures a screenshot of the current page state.
    Appends '_mobile' or '_desktop' based on viewport width, plus a
    millisecond timestamp so retries never overwrite each other.

    Args:
        page: The Playwright Page object.
        name: The filename prefix (without extension).
        directory: Where to write the file; created if missing.
        full_page: Capture the whole scrollable page.

    Returns:
        The path of the written file.
    """
    os.makedirs(directory, exist_ok=True)

    viewport = page.viewport_size
    width = viewport['width'] if viewport else 1280
    suffix = "mobile" if width < 600 else "desktop"
    path = str(Path(directory) / f"{name}_{suffix}_{int(time.time() * 1000)}.png")
    page.screenshot(path=path, full_page=full_page, timeout=10000)
    return path


def slugify(text: str, limit: int = 40) -> str:
    """Reduces arbitrary text (e.g. a book title) to a filename-safe token."""
    slug = "".join(c if c.isalnum() else "-" for c in text.lower())
    slug = "-".join(part for part in slug.split("-") if part)
    return slug[:limit] or "untitled"


def settle(page: Page, ms: int) -> None:
    """Gives the application a moment to react (animations, debounced search)."""
    if ms > 0:
        page.wait_for_timeout(ms)
