import sqlite3
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from kioskvote_app.utils import db_session
from kioskvote_app.utils.db_session import safe_commit


def sqlite_error(message):
    return OperationalError('INSERT INTO votes ...', {}, sqlite3.OperationalError(message))


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(db_session.time, 'sleep', lambda seconds: None)


def test_busy_database_is_retried_and_rows_restaged():
    session = MagicMock()
    session.commit.side_effect = [sqlite_error('database is locked'), None]
    stage = MagicMock()

    safe_commit(session, stage=stage)

    assert session.commit.call_count == 2
    assert stage.call_count == 2
    session.rollback.assert_called_once()


def test_other_errors_are_raised_immediately():
    session = MagicMock()
    session.commit.side_effect = sqlite_error('no such table: votes')

    with pytest.raises(OperationalError):
        safe_commit(session)

    assert session.commit.call_count == 1


def test_gives_up_after_retries():
    session = MagicMock()
    session.commit.side_effect = sqlite_error('database is locked')

    with pytest.raises(OperationalError):
        safe_commit(session, retries=3)

    assert session.commit.call_count == 3
