"""Database models."""

from terminology_reporting.models.update_run import UpdateRun
from terminology_reporting.models.update_step import UpdateStep
from terminology_reporting.models.update_error import UpdateError
from terminology_reporting.models.trud_release import TrudRelease

__all__ = [
    "UpdateRun",
    "UpdateStep",
    "UpdateError",
    "TrudRelease",
]
