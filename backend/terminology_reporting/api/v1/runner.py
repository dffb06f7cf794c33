"""Runs blocking report queries off the event loop with a timeout."""

import asyncio
import logging
from typing import Any, Callable, TypeVar

from anyio import to_thread
from sqlalchemy.orm import Session, sessionmaker

from terminology_reporting.config import settings
from terminology_reporting.services.errors import StoreUnavailableError

log = logging.getLogger(__name__)

T = TypeVar("T")


async def run_query(
    session_factory: sessionmaker,
    func: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """
    Run ``func(db, *args, **kwargs)`` in a worker thread, bounded by ``query_timeout_seconds``.

    The session is opened and closed inside the worker, so it never outlives
    the thread using it. On timeout or client cancellation the worker is
    abandoned rather than awaited and releases its session when the query
    returns. A timeout is reported as StoreUnavailableError.
    """
    def _run_in_session() -> T:
        db: Session = session_factory()
        try:
            return func(db, *args, **kwargs)
        finally:
            db.close()

    try:
        return await asyncio.wait_for(
            to_thread.run_sync(_run_in_session, abandon_on_cancel=True),
            timeout=settings.query_timeout_seconds,
        )
    except asyncio.TimeoutError:
        log.error(f"Query {func.__name__} exceeded {settings.query_timeout_seconds}s")
        raise StoreUnavailableError(f"Reporting query {func.__name__} timed out")
