import pytest
from playwright.sync_api import Page, expect

from library_e2e.catalog import SelectorSet
from library_e2e.errors import ActionNotFound
from library_e2e.resolvers import ActionResolver
from library_e2e.retry import with_retry

TOOLBAR = """
<div id="log"></div>
<button type="submit" onclick="document.getElementById('log').textContent='submit'">Save</button>
<button onclick="document.getElementById('log').textContent='create'">Create</button>
<table>
  <tr><td>Dune</td><td><button class="delete-btn" onclick="document.getElementById('log').textContent='delete Dune'">Delete</button></td></tr>
  <tr><td>Emma</td><td><button class="delete-btn" onclick="document.getElementById('log').textContent='delete Emma'">Delete</button></td></tr>
</table>
"""


@pytest.fixture
def actions(page: Page) -> ActionResolver:
    page.set_content(TOOLBAR)
    return ActionResolver(page)


def test_first_matching_selector_wins(actions, page: Page):
    chain = SelectorSet.of("submit", ['button[type="submit"]', 'button:has-text("Create")'])

    assert actions.perform(chain) == 'button[type="submit"]'
    expect(page.locator("#log")).to_have_text("submit")


def test_falls_back_down_the_chain(actions, page: Page):
    chain = SelectorSet.of("submit", ['input[type="submit"]', 'button:has-text("Create")'])

    assert actions.perform(chain) == 'button:has-text("Create")'
    expect(page.locator("#log")).to_have_text("create")


def test_missing_action_raises_with_selectors(actions):
    chain = SelectorSet.of("logout", ['button:has-text("Logout")', "[class*=logout]"])

    assert not actions.is_available(chain)
    with pytest.raises(ActionNotFound) as excinfo:
        actions.perform(chain)
    assert excinfo.value.action == "logout"
    assert excinfo.value.selectors == ['button:has-text("Logout")', "[class*=logout]"]


def test_scope_limits_the_search_to_a_row(actions, page: Page, library_config):
    row = page.locator('tr:has-text("Emma")')

    actions.perform(library_config.selectors.delete_button, scope=row)

    expect(page.locator("#log")).to_have_text("delete Emma")


def test_retry_waits_for_late_controls(page: Page):
    page.set_content("<div id='log'></div>")
    page.evaluate("""() => setTimeout(() => {
        const button = document.createElement('button');
        button.textContent = 'Add Book';
        button.onclick = () => { document.getElementById('log').textContent = 'opened'; };
        document.body.append(button);
    }, 300)""")
    chain = SelectorSet.of("add_book", ['button:has-text("Add Book")'])

    with_retry(ActionResolver(page).perform, chain, max_attempts=5, delay_ms=200)

    expect(page.locator("#log")).to_have_text("opened")
