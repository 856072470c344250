"""
db/session.py – Engine factory + Session helper.

One Engine per database URL, cached for the process lifetime.
db_session() is a contextmanager that commits/rolls back/closes per operation.
"""
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base


# ── Engine cache (1 engine / URL) ─────────────────────────────────────────────

_engines: dict[str, Engine] = {}
_session_factories: dict[str, sessionmaker] = {}


def _get_engine(url: str) -> Engine:
    if url not in _engines:
        is_sqlite = url.startswith("sqlite")
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False} if is_sqlite else {},
            echo=False,
        )
        if is_sqlite:
            # WAL lets search reads proceed while the popularity counter writes
            @event.listens_for(engine, "connect")
            def set_wal(conn, _):
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA synchronous=NORMAL")

        _engines[url] = engine
        _session_factories[url] = sessionmaker(bind=engine, expire_on_commit=False)
    return _engines[url]


def get_session_factory(url: str) -> sessionmaker:
    _get_engine(url)
    return _session_factories[url]


def init_db(url: str) -> None:
    """Create missing tables. Existing tables are left as they are."""
    Base.metadata.create_all(_get_engine(url))


@contextmanager
def db_session(url: str) -> Generator[Session, None, None]:
    """Context manager yielding a Session, committing on success, rolling back on error."""
    factory = get_session_factory(url)
    session: Session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
