"""SQLAlchemy ORM base shared by the record tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for the ``records`` and ``record_keys`` models."""

    pass
