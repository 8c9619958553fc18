import pytest
from playwright.sync_api import Page, expect

from library_e2e.assertions import Assertions
from library_e2e.auth import AuthHelper
from library_e2e.book_actions import BookActions
from library_e2e.config import LibraryConfig, load_config
from library_e2e.data import LibraryData
from library_e2e.fake_app import install_fake_library
from library_e2e.journeys import LibraryJourneys


@pytest.fixture(scope="session")
def library_config() -> LibraryConfig:
    """
    The session configuration, built once.
    Points at the routed replica unless LIBRARY_E2E_LIVE is set.
    """
    return load_config()


@pytest.fixture(scope="session")
def library_data(library_config) -> LibraryData:
    return LibraryData(library_config)


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args, library_config):
    """
    Configures the browser context arguments for the session.
    Sets the base URL and the desktop viewport.

    Args:
        browser_context_args: Default arguments from pytest-playwright.

    Returns:
        Updated dictionary of context arguments.
    """
    return {
        **browser_context_args,
        "base_url": library_config.base_url,
        "viewport": library_config.viewport["desktop"],
    }


@pytest.fixture(scope="session")
def browser_type_launch_args(browser_type_launch_args):
    """
    Configures the browser launch arguments.
    Keeps Chromium stable in containers and CI runners.
    """
    return {
        **browser_type_launch_args,
        "args": [
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
            "--disable-web-security",
        ],
    }


@pytest.fixture(autouse=True)
def configure_page(request, library_config):
    """
    Configures default timeouts for the Page object and assertions.
    Tests that never ask for a page do not start a browser.
    """
    if "page" not in request.fixturenames:
        yield
        return
    page = request.getfixturevalue("page")
    timeouts = library_config.timeouts
    page.set_default_timeout(timeouts.action)
    page.set_default_navigation_timeout(timeouts.navigation)
    expect.set_options(timeout=timeouts.expect)
    yield


@pytest.fixture(autouse=True)
def attach_console_listeners(request):
    """
    Attaches console listeners to print browser logs to the Python console.
    Useful for debugging frontend errors during tests.
    """
    if "page" not in request.fixturenames:
        yield
        return
    page = request.getfixturevalue("page")
    page.on("console", lambda msg: print(f"PAGE LOG: {msg.text}"))
    page.on("pageerror", lambda err: print(f"PAGE ERROR: {err}"))
    yield


@pytest.fixture
def library_app(page: Page, library_config) -> LibraryConfig:
    """
    The application under test for this page: the hosted one in live mode,
    otherwise the routed replica served at the configured base URL.
    """
    if not library_config.live:
        install_fake_library(page, library_config.base_url)
    return library_config


@pytest.fixture
def auth_helper(page: Page, library_app) -> AuthHelper:
    return AuthHelper(page, library_app)


@pytest.fixture
def book_actions(page: Page, library_app) -> BookActions:
    return BookActions(page, library_app)


@pytest.fixture
def assertions(page: Page, library_app) -> Assertions:
    return Assertions(page, library_app)


@pytest.fixture
def journeys(page: Page, library_app, library_data) -> LibraryJourneys:
    return LibraryJourneys(page, library_app, library_data.get_valid_credentials())


@pytest.fixture
def logged_in(auth_helper, assertions, library_data):
    """Logs in with the valid credentials and lands on the books page."""
    credentials = library_data.get_valid_credentials()
    auth_helper.login(credentials.username, credentials.password)
    assertions.verify_dashboard_loaded()
    yield
