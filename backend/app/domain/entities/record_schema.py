"""Record schemas: the configuration that turns the generic store into a contacts or users store."""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

Normalizer = Callable[[Any], Any]

_NON_DIGITS = re.compile(r"\D")


def strip_text(value: Any) -> Any:
    """Trim surrounding whitespace from strings; leave other values alone."""
    return value.strip() if isinstance(value, str) else value


def digits_only(value: Any) -> Any:
    """Phone-number normalizer: drop every non-digit character."""
    if value is None:
        return None
    return _NON_DIGITS.sub("", str(value))


def lower_email(value: Any) -> Any:
    """Email normalizer: trimmed and lower-cased."""
    if value is None:
        return None
    return str(value).strip().lower()


def is_empty(value: Any) -> bool:
    """True for None and blank strings."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


@dataclass(frozen=True)
class RecordSchema:
    """Describes one record kind.

    Attributes:
        name: Store name, also the scope key in the records table.
        database_name: Name reported in export documents.
        required_fields: Must be present and non-empty at commit time.
        unique_fields: Normalized values may appear in at most one live record.
        optional_fields: Known optional fields (informational; extra fields are kept).
        private_fields: Stored and exported, but never searched or shown over HTTP.
        normalizers: Per-field transform applied before validation and storage.
        version: Schema version reported in export documents.
    """

    name: str
    database_name: str
    required_fields: tuple[str, ...]
    unique_fields: tuple[str, ...] = ()
    optional_fields: tuple[str, ...] = ()
    private_fields: frozenset[str] = frozenset()
    normalizers: Mapping[str, Normalizer] = field(default_factory=dict)
    version: int = 1

    @property
    def entity_type(self) -> str:
        """Singular, human-readable label used in error messages."""
        return self.name[:-1].capitalize() if self.name.endswith("s") else self.name.capitalize()

    def normalize_value(self, field_name: str, value: Any) -> Any:
        normalizer = self.normalizers.get(field_name)
        return normalizer(value) if normalizer else value

    def normalize(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Return a normalized copy of *data*."""
        return {k: self.normalize_value(k, v) for k, v in data.items()}

    @property
    def declared_fields(self) -> tuple[str, ...]:
        return tuple(
            dict.fromkeys(self.required_fields + self.unique_fields + self.optional_fields)
        )

    def non_text_fields(self, data: Mapping[str, Any]) -> list[str]:
        """Declared fields of *data* holding something other than a string or None."""
        return [
            f for f in self.declared_fields
            if f in data and data[f] is not None and not isinstance(data[f], str)
        ]

    def missing_required(self, data: Mapping[str, Any]) -> list[str]:
        return [f for f in self.required_fields if is_empty(data.get(f))]

    def unique_keys(self, data: Mapping[str, Any]) -> dict[str, str]:
        """Map each unique field present (and non-empty) in *data* to its key value."""
        return {
            f: str(data[f])
            for f in self.unique_fields
            if not is_empty(data.get(f))
        }


CONTACT_SCHEMA = RecordSchema(
    name="contacts",
    database_name="ContactsDB",
    required_fields=("name", "mobile", "email"),
    unique_fields=("mobile", "email"),
    optional_fields=("address",),
    normalizers={
        "name": strip_text,
        "mobile": digits_only,
        "email": lower_email,
        "address": strip_text,
    },
)

USER_SCHEMA = RecordSchema(
    name="users",
    database_name="UsersDB",
    required_fields=("username", "password_hash"),
    unique_fields=("username", "email"),
    optional_fields=("email",),
    private_fields=frozenset({"password_hash"}),
    normalizers={
        "username": strip_text,
        "email": lower_email,
    },
)
