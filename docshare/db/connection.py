import logging
import os
from contextlib import contextmanager
from typing import Iterator

import psycopg

logger = logging.getLogger(__name__)

APPLICATION_NAME = "docshare"
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10
# Both spellings are accepted by libpq; SQLAlchemy needs the driver named.
POSTGRES_SCHEMES = ("postgresql://", "postgres://")


def get_database_url() -> str:
    """Get the database URL from environment variables."""
    return os.environ["DATABASE_URL"]


def get_connect_timeout() -> int:
    return int(os.getenv("DATABASE_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT_SECONDS))


def get_sqlalchemy_database_url() -> str:
    """The database URL with the psycopg 3 driver named, for Alembic's engine."""
    url = get_database_url()
    for scheme in POSTGRES_SCHEMES:
        if url.startswith(scheme):
            return "postgresql+psycopg://" + url[len(scheme):]
    return url


def _connect() -> psycopg.Connection:
    try:
        return psycopg.connect(
            get_database_url(),
            connect_timeout=get_connect_timeout(),
            application_name=APPLICATION_NAME,
        )
    except psycopg.OperationalError:
        logger.exception("Could not connect to the document database")
        raise


@contextmanager
def get_db_cursor() -> Iterator[psycopg.Cursor]:
    """Cursor on a fresh connection, wrapped in a single transaction.

    The transaction commits when the block exits cleanly and rolls back when it
    raises. The connection is closed either way.
    """
    conn = _connect()
    try:
        with conn.cursor() as cursor:
            yield cursor
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
