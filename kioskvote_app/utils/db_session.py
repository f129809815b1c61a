"""Commit helper for the SQLite-backed vote store.

Several kiosks may post votes to one server at the same moment and SQLite
allows one writer at a time, so an insert can fail with ``database is
locked``. :func:`safe_commit` waits and tries again; any other database
error goes straight back to the caller.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.session import Session

logger = logging.getLogger(__name__)

BUSY_MARKERS = ("database is locked", "database is busy")


def is_sqlite_busy(error: OperationalError) -> bool:
    text = str(getattr(error, "orig", None) or error).lower()
    return any(marker in text for marker in BUSY_MARKERS)


def safe_commit(
    session: Session,
    stage: Optional[Callable[[], None]] = None,
    retries: int = 5,
    initial_delay: float = 0.1,
) -> None:
    """Commit ``session``; back off and retry while SQLite is busy.

    Rolling back a failed attempt drops pending objects, so callers that add
    rows pass ``stage``, which puts them back into the session before each
    attempt.
    """
    attempt = 0
    while True:
        attempt += 1
        if stage is not None:
            stage()
        try:
            session.commit()
            return
        except OperationalError as exc:
            session.rollback()
            if attempt >= retries or not is_sqlite_busy(exc):
                raise
            wait = initial_delay * 2 ** (attempt - 1)
            logger.warning("SQLite busy, retrying commit in %.2fs (attempt %d/%d)",
                           wait, attempt, retries)
            time.sleep(wait)
