from __future__ import annotations

import asyncpg
import pytest
from sqlalchemy.exc import DBAPIError

from db.seed import _error_message, normalize_database_url


@pytest.mark.parametrize(
    "raw",
    [
        "postgres://u:p@db.example.com:5432/app",
        "postgresql://u:p@db.example.com:5432/app",
        "postgresql+psycopg://u:p@db.example.com:5432/app",
        "postgresql+asyncpg://u:p@db.example.com:5432/app",
    ],
)
def test_normalize_database_url_uses_asyncpg(raw: str) -> None:
    url, ssl = normalize_database_url(raw, "require")
    assert url.drivername == "postgresql+asyncpg"
    assert url.host == "db.example.com"
    assert url.database == "app"
    assert ssl == "require"


def test_normalize_database_url_moves_sslmode_to_connect_arg() -> None:
    url, ssl = normalize_database_url("postgres://u:p@h/app?sslmode=verify-full", "require")
    assert "sslmode" not in url.query
    assert ssl == "verify-full"


def test_error_message_unwraps_driver_errors() -> None:
    wrapped = DBAPIError("INSERT INTO users ...", {}, Exception('relation "users" does not exist'))
    assert _error_message(wrapped) == 'relation "users" does not exist'
    assert _error_message(RuntimeError()) == "RuntimeError"


def _adapted(driver_error: Exception) -> Exception:
    # Mirrors SQLAlchemy 2.0's asyncpg adapter: class-prefixed text, driver error chained.
    try:
        try:
            raise driver_error
        except Exception as e:
            raise Exception(f"{type(e)}: {e}") from e
    except Exception as adapted:
        return adapted


def test_error_message_prefers_chained_asyncpg_error() -> None:
    driver_error = asyncpg.exceptions.StringDataRightTruncationError("value too long for type character varying(4)")
    wrapped = DBAPIError("INSERT INTO revenue ...", {}, _adapted(driver_error))

    assert _error_message(wrapped) == "value too long for type character varying(4)"
