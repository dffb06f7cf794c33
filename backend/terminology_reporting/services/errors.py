"""Error taxonomy for reporting queries.

"Not found" is not an exception here: query functions return ``None`` and the
HTTP layer turns that into a 404.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

log = logging.getLogger(__name__)


class ReportingError(Exception):
    """Base class for reporting errors."""


class InvalidRequestError(ReportingError, ValueError):
    """Caller-supplied parameters are outside the accepted domain."""


class StoreUnavailableError(ReportingError):
    """The reporting database cannot be reached or did not answer in time."""


@contextmanager
def store_access(operation: str):
    """Convert connectivity failures raised inside the block into StoreUnavailableError."""
    try:
        yield
    except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
        log.error(f"Reporting store unavailable during {operation}: {exc}")
        raise StoreUnavailableError(f"Reporting database unavailable ({operation})") from exc
