import re

import pytest

from library_e2e.config import FAKE_BASE_URL, load_config
from library_e2e.data import LibraryData
from library_e2e.models import BookRecord, Credentials


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ("LIBRARY_E2E_LIVE", "LIBRARY_E2E_BASE_URL", "LIBRARY_E2E_WORKERS",
                 "LIBRARY_E2E_ARTIFACTS_DIR", "CI"):
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the picture.
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_offline_config_points_at_replica(clean_env):
    config = load_config()

    assert config.base_url == FAKE_BASE_URL
    assert not config.live
    assert config.url("/books") == f"{FAKE_BASE_URL}/books"
    assert config.url("add-book") == f"{FAKE_BASE_URL}/add-book"


def test_live_config_uses_hosted_application(clean_env):
    clean_env.setenv("LIBRARY_E2E_LIVE", "1")

    config = load_config()

    assert config.live
    assert config.base_url == "https://frontendui-librarysystem.onrender.com"
    assert config.books_url_pattern.search("https://frontendui-librarysystem.onrender.com/books")
    assert config.login_url_pattern.search("/login")


def test_base_url_override(clean_env):
    clean_env.setenv("LIBRARY_E2E_BASE_URL", "http://localhost:3000/")

    config = load_config()

    assert config.url("/login") == "http://localhost:3000/login"


def test_ci_reduces_workers_and_adds_reruns(clean_env):
    local = load_config()
    clean_env.setenv("CI", "true")
    ci = load_config()

    assert (local.workers, local.reruns) == (3, 1)
    assert (ci.workers, ci.reruns) == (1, 2)


def test_timeouts_and_messages_loaded(clean_env):
    config = load_config()

    assert config.timeouts.field_visible == 2000
    assert config.retry.verify_attempts == 3
    assert config.viewport["desktop"] == {"width": 1920, "height": 1080}
    assert config.required_field_messages == [
        "Title is required.",
        "Author is required.",
        "Genre is required.",
        "ISBN is required.",
        "Publication Date is required.",
        "Price is required.",
    ]
    assert config.with_timeouts(verify_settle=0).timeouts.verify_settle == 0
    assert config.timeouts.verify_settle == 2000


def test_missing_data_file_is_reported(tmp_path):
    with pytest.raises(RuntimeError, match="Failed to load test data"):
        load_config(data_dir=tmp_path)


def test_static_books(library_data):
    books = library_data.get_valid_books()

    assert books[0] == BookRecord(
        title="The Great Gatsby",
        author="F. Scott Fitzgerald",
        isbn="9780743273565",
        genre="Fiction",
        publication_date="1925-04-10",
        price="15.99",
    )
    assert library_data.get_random_valid_book() in books
    assert library_data.get_static_book("to_delete").title == "The Book to Delete"
    assert library_data.get_static_book("unicode").title == "Unicode Test: 测试员"
    assert library_data.get_static_book("empty_validation").genre == ""
    with pytest.raises(ValueError):
        library_data.get_static_book("nope")


def test_credentials(library_data):
    assert library_data.get_valid_credentials() == Credentials("admin", "admin")
    assert library_data.get_case_sensitive_credentials() == Credentials("ADMIN", "ADMIN")


def test_scenarios(library_data):
    assert library_data.get_book_for_scenario("empty").title == ""
    assert library_data.get_book_for_scenario("invalid").price == "not-a-number"
    assert len(library_data.get_book_for_scenario("long_value").title.split()) == 50
    assert library_data.get_book_for_scenario("unicode").title
    assert library_data.get_book_for_scenario("special_char").author.startswith("Author with ")
    with pytest.raises(ValueError, match="Unknown scenario"):
        library_data.get_book_for_scenario("haunted")


def test_data_source_is_explicit_not_global(library_config):
    first = LibraryData(library_config)
    second = LibraryData(library_config)

    first.set_seed(7)
    second.set_seed(7)

    assert first is not second
    assert first.generate_book() == second.generate_book()


def test_book_record_mapping():
    book = BookRecord.from_dict({"title": "Dune", "publicationDate": "1965-08-01", "price": 9.5})

    assert book.publication_date == "1965-08-01"
    assert book.price == "9.5"
    assert book.as_form_fields()["publicationDate"] == "1965-08-01"
    assert book.with_overrides({"title": ""}).title == ""
    assert book.with_overrides({"publication_date": "2000-01-01"}).publication_date == "2000-01-01"
    with pytest.raises(ValueError):
        BookRecord.from_dict({"subtitle": "x"})
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", book.publication_date)
