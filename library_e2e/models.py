from dataclasses import asdict, dataclass, replace

# UI form names differ from attribute names only for the publication date.
_FORM_NAMES = {"publication_date": "publicationDate"}
_ATTRIBUTE_NAMES = {v: k for k, v in _FORM_NAMES.items()}


@dataclass(frozen=True)
class BookRecord:
    """
    A book as the UI sees it: every value is text.

    The application exposes no stable identifier, so the title is the key
    for search, row lookup, edit and delete. Generated titles therefore
    carry extra entropy to avoid collisions between parallel runs.
    """

    title: str = ""
    author: str = ""
    isbn: str = ""
    genre: str = ""
    publication_date: str = ""
    price: str = ""

    @classmethod
    def from_dict(cls, data) -> "BookRecord":
        """Builds a record from JSON-style (camelCase) or attribute-style keys."""
        values = {}
        for key, value in data.items():
            name = _ATTRIBUTE_NAMES.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise ValueError(f"Unknown book field: {key}")
            values[name] = "" if value is None else str(value)
        return cls(**values)

    def with_overrides(self, overrides=None) -> "BookRecord":
        if not overrides:
            return self
        values = {
            _ATTRIBUTE_NAMES.get(key, key): "" if value is None else str(value)
            for key, value in overrides.items()
        }
        return replace(self, **values)

    def as_form_fields(self) -> dict:
        """Maps to the form field names used by the application."""
        return {_FORM_NAMES.get(k, k): v for k, v in asdict(self).items()}


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str
