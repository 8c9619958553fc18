"""
Test data source combining the static JSON fixtures with Faker generation.
"""
from __future__ import annotations

import random

from library_e2e.book_generator import BookGenerator
from library_e2e.config import LibraryConfig, read_json
from library_e2e.models import BookRecord, Credentials

STATIC_BOOK_KEYS = {
    "to_delete": "toDelete",
    "journey1": "journey1",
    "journey2": "journey2",
    "empty_validation": "emptyValidation",
    "unicode": "unicode",
    "confirm_delete": "confirmDelete",
}


class LibraryData:
    """
    Loads the JSON fixtures once and exposes books and credentials.
    Built once per session by the library_data fixture; there is no
    module-level instance.
    """

    def __init__(self, config: LibraryConfig, generator: BookGenerator | None = None):
        self.config = config
        self.generator = generator or BookGenerator()
        self.reload()

    def reload(self) -> None:
        """Re-reads books.json and credentials.json."""
        self._books = read_json(self.config.data_dir / "books.json")
        self._credentials = read_json(self.config.data_dir / "credentials.json")

    # Books

    def get_static_book(self, key: str) -> BookRecord:
        if key == "valid":
            return self.get_valid_books()[0]
        try:
            return BookRecord.from_dict(self._books["testBooks"][STATIC_BOOK_KEYS[key]])
        except KeyError:
            raise ValueError(f"Unknown static book: {key}") from None

    def get_valid_books(self) -> list[BookRecord]:
        return [BookRecord.from_dict(b) for b in self._books["validBooks"]]

    def get_random_valid_book(self) -> BookRecord:
        return random.choice(self.get_valid_books())

    def generate_book(self, overrides=None) -> BookRecord:
        return self.generator.generate_book(overrides)

    def generate_books(self, count: int, overrides=None) -> list[BookRecord]:
        return self.generator.generate_books(count, overrides)

    def generate_book_with_pattern(self, pattern: str) -> BookRecord:
        return self.generator.generate_book_with_pattern(pattern)

    def get_book_for_scenario(self, scenario: str) -> BookRecord:
        builders = {
            "empty": self.generator.generate_empty_book,
            "unicode": self.generator.generate_unicode_book,
            "invalid": self.generator.generate_invalid_book,
            "long_value": self.generator.generate_long_value_book,
            "special_char": self.generator.generate_special_character_book,
        }
        if scenario not in builders:
            raise ValueError(f"Unknown scenario: {scenario}")
        return builders[scenario]()

    # Credentials

    def get_valid_credentials(self) -> Credentials:
        return Credentials(**self._credentials["valid"])

    def get_case_sensitive_credentials(self) -> Credentials:
        return Credentials(**self._credentials["caseSensitiveTest"])

    # Reproducibility

    def set_seed(self, seed: int) -> None:
        self.generator.seed(seed)

    def reset_seed(self) -> None:
        self.generator.reset_seed()
