from .record import ExportDocument, ImportResult, Record, StorageUsage, RESERVED_FIELDS
from .record_schema import (
    CONTACT_SCHEMA,
    USER_SCHEMA,
    RecordSchema,
    digits_only,
    lower_email,
    strip_text,
)

__all__ = [
    "Record",
    "ImportResult",
    "ExportDocument",
    "StorageUsage",
    "RESERVED_FIELDS",
    "RecordSchema",
    "CONTACT_SCHEMA",
    "USER_SCHEMA",
    "digits_only",
    "lower_email",
    "strip_text",
]
