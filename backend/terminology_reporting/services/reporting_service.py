"""Reporting queries over the update history - all reads, no writes."""

import logging
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import Field, TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from terminology_reporting.models import TrudRelease, UpdateError, UpdateRun, UpdateStep
from terminology_reporting.schemas.reporting import (
    DashboardOut,
    RunDetailOut,
    RunListOut,
    StatsOut,
    TrudReleaseOut,
    UpdateErrorOut,
    UpdateRunOut,
    UpdateStepOut,
    UpdateSummaryOut,
)
from terminology_reporting.services.errors import InvalidRequestError, store_access
from terminology_reporting.services.summary_projection import (
    build_summaries,
    collect_snomed_validation_rates,
)

log = logging.getLogger(__name__)

RECENT_RUNS_LIMIT = 10
RELEASE_HISTORY_LIMIT = 50
DEFAULT_PAGE_SIZE = 20
DEFAULT_ERROR_COUNT = 20

# Largest signed 32-bit value; any page * page_size offset then fits in a 64-bit column
MAX_PARAM_VALUE = 2**31 - 1

_paging_int = TypeAdapter(Annotated[int, Field(gt=0, le=MAX_PARAM_VALUE)])


def require_positive(name: str, value) -> int:
    """Validate a paging/count parameter as a strict integer in 1..MAX_PARAM_VALUE."""
    try:
        return _paging_int.validate_python(value, strict=True)
    except ValidationError:
        raise InvalidRequestError(
            f"{name} must be a positive integer no greater than {MAX_PARAM_VALUE}, got {value!r}"
        )


def _newest_runs_first(query):
    # start_time ties fall back to creation order, then the run id
    return query.order_by(
        UpdateRun.start_time.desc(),
        UpdateRun.created_at.desc(),
        UpdateRun.run_id.desc(),
    )


def _count_runs(db: Session) -> tuple[int, int]:
    total = db.query(UpdateRun).count()
    successful = db.query(UpdateRun).filter(UpdateRun.success.is_(True)).count()
    return total, successful


def get_dashboard(db: Session) -> DashboardOut:
    """
    Dashboard payload:
    - latest run summary and the 10 most recent summaries
    - total / successful / failed run counts
    - start time of the most recent successful run
    """
    with store_access("dashboard"):
        recent = _newest_runs_first(db.query(UpdateRun)).limit(RECENT_RUNS_LIMIT).all()
        summaries = build_summaries(db, recent)
        total, successful = _count_runs(db)
        last_success = (
            _newest_runs_first(db.query(UpdateRun.start_time))
            .filter(UpdateRun.success.is_(True))
            .first()
        )

    return DashboardOut(
        latest_run=summaries[0] if summaries else None,
        recent_runs=summaries,
        total_runs=total,
        successful_runs=successful,
        failed_runs=total - successful,
        last_successful_update=last_success.start_time if last_success else None,
    )


def list_runs(db: Session, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> RunListOut:
    """One page of run summaries, newest first, plus the overall run count."""
    page = require_positive("page", page)
    page_size = require_positive("pageSize", page_size)

    with store_access("list runs"):
        runs = (
            _newest_runs_first(db.query(UpdateRun))
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        summaries = build_summaries(db, runs)
        total = db.query(UpdateRun).count()

    return RunListOut(runs=summaries, total=total, page=page, page_size=page_size)


def get_run_detail(db: Session, run_id: UUID) -> Optional[RunDetailOut]:
    """Run with its ordered steps and errors; None when the run does not exist."""
    with store_access("run detail"):
        run = db.get(UpdateRun, run_id)
        if run is None:
            return None

        steps = (
            db.query(UpdateStep)
            .filter(UpdateStep.run_id == run_id)
            .order_by(UpdateStep.terminology_type, UpdateStep.step_order)
            .all()
        )
        errors = (
            db.query(UpdateError)
            .filter(UpdateError.run_id == run_id)
            .order_by(UpdateError.error_timestamp, UpdateError.error_id)
            .all()
        )

    return RunDetailOut(
        run=UpdateRunOut.model_validate(run),
        steps=[UpdateStepOut.model_validate(s) for s in steps],
        errors=[UpdateErrorOut.model_validate(e) for e in errors],
    )


def get_latest_run(db: Session) -> Optional[UpdateSummaryOut]:
    """Summary of the most recent run, or None when no run has been recorded."""
    with store_access("latest run"):
        latest = _newest_runs_first(db.query(UpdateRun)).first()
        if latest is None:
            return None
        return build_summaries(db, [latest])[0]


def list_releases(db: Session, item_name: Optional[str] = None) -> List[TrudReleaseOut]:
    """Up to 50 TRUD releases, most recently detected first."""
    with store_access("releases"):
        query = db.query(TrudRelease)
        if item_name:
            query = query.filter(TrudRelease.item_name == item_name)
        releases = (
            query.order_by(TrudRelease.detected_date.desc(), TrudRelease.release_tracking_id.desc())
            .limit(RELEASE_HISTORY_LIMIT)
            .all()
        )
    return [TrudReleaseOut.model_validate(r) for r in releases]


def list_recent_errors(db: Session, count: int = DEFAULT_ERROR_COUNT) -> List[UpdateErrorOut]:
    """Most recent errors across all runs, newest first."""
    count = require_positive("count", count)
    with store_access("recent errors"):
        errors = (
            db.query(UpdateError)
            .order_by(UpdateError.error_timestamp.desc(), UpdateError.error_id.desc())
            .limit(count)
            .all()
        )
    return [UpdateErrorOut.model_validate(e) for e in errors]


def get_stats(db: Session) -> StatsOut:
    """Overall run/error counts, average SNOMED validation rate and last run time."""
    with store_access("stats"):
        total, successful = _count_runs(db)
        total_errors = db.query(UpdateError).count()
        rates = collect_snomed_validation_rates(db)
        last_run = _newest_runs_first(db.query(UpdateRun.start_time)).first()

    average = float(sum(rates) / len(rates)) if rates else 0.0
    log.debug(f"Stats: runs={total}, successful={successful}, errors={total_errors}, rates={len(rates)}")

    return StatsOut(
        total_runs=total,
        successful_runs=successful,
        failed_runs=total - successful,
        total_errors=total_errors,
        average_validation_rate=average,
        last_run=last_run.start_time if last_run else None,
    )
