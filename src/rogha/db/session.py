"""Engine and session factory.

Every request gets its own :class:`~sqlalchemy.orm.Session` from
:func:`get_db`. Services commit or roll back themselves; anything left open
when the request ends is rolled back on close.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from rogha.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base for the Rogha tables."""


# Registers every table on Base.metadata for Alembic and the test suite.
import rogha.models  # noqa: E402,F401


def engine_options(url: str) -> dict[str, Any]:
    """Return ``create_engine`` keyword arguments suited to ``url``."""
    options: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.sql_debug}
    if url.startswith("sqlite"):
        # The API hands sessions across the threadpool.
        options["connect_args"] = {"check_same_thread": False}
    return options


engine = create_engine(
    settings.effective_database_url,
    **engine_options(settings.effective_database_url),
)

SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session and close it afterwards."""
    with SessionLocal() as db:
        yield db
