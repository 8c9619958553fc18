import logging

from playwright.sync_api import Page

from library_e2e.config import LibraryConfig
from library_e2e.resolvers import ActionResolver, FieldResolver

logger = logging.getLogger(__name__)


class AuthHelper:
    """Login and logout against the application's /login form."""

    def __init__(self, page: Page, config: LibraryConfig):
        self.page = page
        self.config = config
        self.fields = FieldResolver(page, config.selectors, config.timeouts.field_visible)
        self.actions = ActionResolver(page)

    def open_login_page(self) -> None:
        self.page.set_viewport_size(self.config.viewport["desktop"])
        self.page.goto(self.config.url(self.config.urls.login_path), wait_until="domcontentloaded")

    def login(self, username: str, password: str) -> None:
        """
        Performs login with the given credentials.
        Empty values are still entered so validation can be exercised.

        Args:
            username: The username to enter.
            password: The password to enter.
        """
        self.open_login_page()
        catalog = self.config.selectors

        if self.fields.fill_with(catalog.username_field, username) is None:
            logger.warning("No username field matched")
        if self.fields.fill_with(catalog.password_field, password) is None:
            logger.warning("No password field matched")

        self.actions.perform(catalog.login_button)
        logger.info("Submitted login for user %r", username)

    def logout(self) -> None:
        self.actions.perform(self.config.selectors.logout_button)
