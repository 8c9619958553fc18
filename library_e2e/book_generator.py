"""
Book data generation with Faker.
Provides realistic, dynamic BookRecords for create, search and validation tests.
"""
from __future__ import annotations

from faker import Faker

from library_e2e.models import BookRecord

GENRES = [
    "Fiction",
    "Non-Fiction",
    "Mystery",
    "Romance",
    "Thriller",
    "Fantasy",
    "Biography",
    "History",
]

UNICODE_TITLES = [
    "Unicode Test: 测试员",
    "Тестовая книга",
    "كتاب الاختبار",
    "テストブック",
    "Libro de Prueba",
    "Livre de Test",
]

UNICODE_AUTHORS = [
    "José María García",
    "Михаил Булгаков",
    "محمد أحمد",
    "田中太郎",
    "François Müller",
    "Olav Bjørn",
]

SPECIAL_CHAR_TITLES = [
    'Book with "Quotes" & Symbols',
    "Title with 'Single Quotes'",
    "Title with <HTML> Tags",
    "Title with SQL'; DROP TABLE books;--",
    "Title with {JSON} brackets",
]

SPECIAL_CHARS = ["&", "<", ">", '"', "'", "\\", "/"]


class BookGenerator:
    def __init__(self, faker: Faker | None = None):
        self.faker = faker or Faker()

    def _title(self) -> str:
        words = self.faker.words(nb=self.faker.random_int(1, 4))
        # Numeric suffix keeps titles unique enough to act as the lookup key.
        return f"{' '.join(words).title()} {self.faker.random_int(10000, 99999)}"

    def generate_book(self, overrides=None) -> BookRecord:
        """
        Generates a complete book with realistic data.

        Args:
            overrides: Mapping of field values to force (camelCase or snake_case keys).

        Returns:
            The generated BookRecord.
        """
        book = BookRecord(
            title=self._title(),
            author=self.faker.name(),
            isbn=self.faker.isbn13(separator=""),
            genre=self.faker.random_element(GENRES),
            publication_date=self.faker.date_between(start_date="-50y", end_date="today").isoformat(),
            price=f"{self.faker.random_int(500, 10000) / 100:.2f}",
        )
        return book.with_overrides(overrides)

    def generate_books(self, count: int, overrides=None) -> list[BookRecord]:
        return [self.generate_book(overrides) for _ in range(count)]

    def generate_empty_book(self) -> BookRecord:
        """Required fields left empty, for validation tests."""
        return BookRecord(isbn=self.faker.isbn13(separator=""))

    def generate_unicode_book(self) -> BookRecord:
        return self.generate_book(
            {
                "title": self.faker.random_element(UNICODE_TITLES),
                "author": self.faker.random_element(UNICODE_AUTHORS),
            }
        )

    def generate_long_value_book(self) -> BookRecord:
        return self.generate_book(
            {
                "title": " ".join(self.faker.words(nb=50)),
                "author": " ".join(self.faker.words(nb=20)),
                "genre": " ".join(self.faker.words(nb=10)),
            }
        )

    def generate_special_character_book(self) -> BookRecord:
        return self.generate_book(
            {
                "title": self.faker.random_element(SPECIAL_CHAR_TITLES),
                "author": f"Author with {self.faker.random_element(SPECIAL_CHARS)}",
            }
        )

    def generate_invalid_book(self) -> BookRecord:
        return BookRecord(
            title=self._title(),
            author=self.faker.name(),
            isbn="invalid-isbn",
            genre=self.faker.random_element(GENRES),
            publication_date="2025-13-45",
            price="not-a-number",
        )

    def generate_book_with_pattern(self, pattern: str) -> BookRecord:
        """Title and author both contain the pattern; useful for search tests."""
        return self.generate_book(
            {
                "title": f"{pattern} {' '.join(self.faker.words(nb=self.faker.random_int(1, 3)))}",
                "author": f"{self.faker.first_name()} {pattern}",
            }
        )

    def seed(self, value: int) -> None:
        self.faker.seed_instance(value)

    def reset_seed(self) -> None:
        self.faker.seed_instance(None)
