"""Logging setup for the records API.

Levels come from Settings, one per category: the root logger, SQLAlchemy,
uvicorn, and the record store (services plus the password hasher). SQL
statement logging can therefore be turned off without muting store events
such as conflicts and skipped imports.

Call ``setup_logging()`` once, from the application lifespan.
"""

import logging
import sys

from app.config import get_settings

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Settings field -> logger names it controls
_CATEGORY_MAP: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_store": ("app.application.services", "app.infrastructure.security"),
}


def setup_logging() -> None:
    """Apply the configured log levels, adding a stderr handler if none exists."""
    settings = get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    # uvicorn installs its own handlers; tests and scripts do not
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)

    for field, names in _CATEGORY_MAP.items():
        level = _parse_level(getattr(settings, field))
        for name in names:
            logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Log levels: root=%s sql=%s uvicorn=%s store=%s",
        settings.log_level,
        settings.log_level_sql,
        settings.log_level_uvicorn,
        settings.log_level_store,
    )


def _parse_level(raw: str) -> int:
    """Level name to logging constant; unknown names fall back to INFO."""
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO
