import uuid
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from terminology_reporting.services import reporting_service
from terminology_reporting.services.errors import InvalidRequestError, StoreUnavailableError

from conftest import BASE_TIME, make_error, make_release, make_run, make_step, seed, seed_runs


# ── Dashboard ────────────────────────────────────────────────────────

def test_dashboard_single_successful_run(db):
    """One successful run with two good SNOMED steps and no errors."""
    run = make_run(success=True)
    seed(db, run, make_step(run, "SNOMED", 1), make_step(run, "SNOMED", 2))

    dashboard = reporting_service.get_dashboard(db)

    assert dashboard.latest_run.run_id == run.run_id
    assert dashboard.latest_run.overall_success is True
    assert dashboard.latest_run.error_count == 0
    assert dashboard.total_runs == 1
    assert dashboard.successful_runs == 1
    assert dashboard.failed_runs == 0
    assert dashboard.last_successful_update == BASE_TIME


def test_dashboard_keeps_last_ten_and_last_success(db):
    runs = [
        make_run(start_time=BASE_TIME + timedelta(hours=i), success=(i < 5))
        for i in range(12)
    ]
    seed(db, *runs)

    dashboard = reporting_service.get_dashboard(db)

    assert len(dashboard.recent_runs) == 10
    assert dashboard.recent_runs[0].run_id == runs[11].run_id
    assert dashboard.latest_run == dashboard.recent_runs[0]
    starts = [s.start_time for s in dashboard.recent_runs]
    assert starts == sorted(starts, reverse=True)
    assert dashboard.total_runs == 12
    assert dashboard.successful_runs == 5
    assert dashboard.failed_runs == 7
    assert dashboard.last_successful_update == BASE_TIME + timedelta(hours=4)


def test_dashboard_empty_store(db):
    dashboard = reporting_service.get_dashboard(db)

    assert dashboard.latest_run is None
    assert dashboard.recent_runs == []
    assert dashboard.total_runs == 0
    assert dashboard.successful_runs == 0
    assert dashboard.failed_runs == 0
    assert dashboard.last_successful_update is None


# ── Run listing ──────────────────────────────────────────────────────

def test_list_runs_second_page(db):
    runs = seed_runs(db, 25)

    result = reporting_service.list_runs(db, page=2, page_size=10)

    assert result.total == 25
    assert result.page == 2
    assert result.page_size == 10
    assert [s.run_id for s in result.runs] == [r.run_id for r in runs[10:20]]


def test_list_runs_pages_concatenate_without_gaps_on_ties(db):
    # Every run shares a start time so ordering relies on the tiebreak
    runs = [make_run(start_time=BASE_TIME) for _ in range(7)]
    seed(db, *runs)

    paged = []
    for page in range(1, 4):
        paged.extend(s.run_id for s in reporting_service.list_runs(db, page=page, page_size=3).runs)
    direct = [s.run_id for s in reporting_service.list_runs(db, page=1, page_size=9).runs]

    assert paged == direct
    assert len(set(paged)) == 7


def test_list_runs_past_the_end_is_empty(db):
    seed_runs(db, 3)
    result = reporting_service.list_runs(db, page=5, page_size=10)
    assert result.runs == []
    assert result.total == 3


@pytest.mark.parametrize("page,page_size", [(0, 10), (-1, 10), (1, 0), (1, -5), ("2", 10)])
def test_list_runs_rejects_non_positive_before_store_access(page, page_size):
    db = MagicMock()
    with pytest.raises(InvalidRequestError):
        reporting_service.list_runs(db, page=page, page_size=page_size)
    db.query.assert_not_called()


@pytest.mark.parametrize("page,page_size", [(10**19, 10), (2**31, 1), (1, 2**31)])
def test_list_runs_rejects_values_whose_offset_would_overflow(page, page_size):
    db = MagicMock()
    with pytest.raises(InvalidRequestError, match="no greater than"):
        reporting_service.list_runs(db, page=page, page_size=page_size)
    db.query.assert_not_called()


def test_list_runs_accepts_the_largest_page(db):
    seed_runs(db, 2)

    result = reporting_service.list_runs(db, page=reporting_service.MAX_PARAM_VALUE, page_size=reporting_service.MAX_PARAM_VALUE)

    assert result.runs == []
    assert result.total == 2


# ── Run detail ───────────────────────────────────────────────────────

def test_run_detail_orders_steps_and_errors(db):
    run = make_run()
    seed(
        db, run,
        make_step(run, "SNOMED", 2, step_name="Import"),
        make_step(run, "DMD", 2, step_name="Validate"),
        make_step(run, "SNOMED", 1, step_name="Download"),
        make_step(run, "DMD", 1, step_name="Import"),
        make_error(run, minutes=5, error_message="late"),
        make_error(run, minutes=1, error_message="early"),
    )

    detail = reporting_service.get_run_detail(db, run.run_id)

    assert detail.run.run_id == run.run_id
    assert [(s.terminology_type, s.step_order) for s in detail.steps] == [
        ("DMD", 1), ("DMD", 2), ("SNOMED", 1), ("SNOMED", 2),
    ]
    assert [e.error_message for e in detail.errors] == ["early", "late"]


def test_run_detail_not_found_skips_step_and_error_queries(db):
    seed_runs(db, 1)
    with patch.object(db, "query", side_effect=AssertionError("steps/errors must not be queried")):
        assert reporting_service.get_run_detail(db, uuid.uuid4()) is None


# ── Latest run ───────────────────────────────────────────────────────

def test_latest_run(db):
    runs = seed_runs(db, 3)
    latest = reporting_service.get_latest_run(db)
    assert latest.run_id == runs[0].run_id


def test_latest_run_empty_store(db):
    assert reporting_service.get_latest_run(db) is None


# ── Releases ─────────────────────────────────────────────────────────

def test_releases_filtered_by_item_name(db):
    seed(
        db,
        make_release("SNOMED", days=1),
        make_release("SNOMED", days=3),
        make_release("SNOMED", days=2),
        make_release("dm+d", days=4),
        make_release("dm+d", days=5),
    )

    releases = reporting_service.list_releases(db, item_name="SNOMED")

    assert [r.release_id for r in releases] == ["SNOMED-3", "SNOMED-2", "SNOMED-1"]
    assert len(reporting_service.list_releases(db)) == 5
    assert len(reporting_service.list_releases(db, item_name="")) == 5
    assert reporting_service.list_releases(db, item_name="Read codes") == []


def test_releases_capped_at_fifty(db):
    seed(db, *[make_release("SNOMED", days=i) for i in range(60)])

    releases = reporting_service.list_releases(db)

    assert len(releases) == 50
    assert releases[0].release_id == "SNOMED-59"


def test_release_stage(db):
    seed(
        db,
        make_release("SNOMED", days=1),
        make_release("SNOMED", days=2, downloaded_date=BASE_TIME),
        make_release("SNOMED", days=3, downloaded_date=BASE_TIME, imported_date=BASE_TIME, import_success=True),
        make_release("SNOMED", days=4, downloaded_date=BASE_TIME, import_success=False),
    )
    stages = [r.stage for r in reporting_service.list_releases(db)]
    assert stages == ["import_failed", "imported", "downloaded", "detected"]


# ── Errors ───────────────────────────────────────────────────────────

def test_recent_errors_newest_first_and_limited(db):
    run = make_run()
    seed(db, run, *[make_error(run, minutes=i, error_message=f"e{i}") for i in range(5)])

    errors = reporting_service.list_recent_errors(db, count=3)

    assert [e.error_message for e in errors] == ["e4", "e3", "e2"]


def test_recent_errors_rejects_zero():
    with pytest.raises(InvalidRequestError):
        reporting_service.list_recent_errors(MagicMock(), count=0)


def test_recent_errors_rejects_count_above_limit():
    db = MagicMock()
    with pytest.raises(InvalidRequestError):
        reporting_service.list_recent_errors(db, count=10**19)
    db.query.assert_not_called()


# ── Statistics ───────────────────────────────────────────────────────

def test_stats(db):
    good = make_run(start_time=BASE_TIME, success=True)
    bad = make_run(start_time=BASE_TIME + timedelta(days=1), success=False)
    no_dmd = make_run(start_time=BASE_TIME + timedelta(days=2), success=True)
    seed(
        db, good, bad, no_dmd,
        make_step(good, "DMD", 1, details="SNOMED validation: 98"),
        make_step(bad, "DMD", 1, success=False, details="SNOMED validation: 99.5"),
        make_step(no_dmd, "SNOMED", 1),
        make_error(bad), make_error(bad, minutes=2),
    )

    stats = reporting_service.get_stats(db)

    assert stats.total_runs == 3
    assert stats.successful_runs == 2
    assert stats.failed_runs == 1
    assert stats.successful_runs + stats.failed_runs == stats.total_runs
    assert stats.total_errors == 2
    assert stats.average_validation_rate == pytest.approx(98.75)
    assert stats.last_run == BASE_TIME + timedelta(days=2)


def test_stats_without_validation_rates_averages_to_zero(db):
    run = make_run()
    seed(db, run, make_step(run, "DMD", 1, details="VMPs: 10"))

    stats = reporting_service.get_stats(db)

    assert stats.average_validation_rate == 0
    assert stats.total_runs == 1


def test_stats_empty_store(db):
    stats = reporting_service.get_stats(db)

    assert stats.total_runs == 0
    assert stats.successful_runs == 0
    assert stats.failed_runs == 0
    assert stats.total_errors == 0
    assert stats.average_validation_rate == 0
    assert stats.last_run is None


# ── Store failures ───────────────────────────────────────────────────

@pytest.mark.parametrize("call", [
    lambda db: reporting_service.get_dashboard(db),
    lambda db: reporting_service.list_runs(db, 1, 20),
    lambda db: reporting_service.get_latest_run(db),
    lambda db: reporting_service.list_releases(db),
    lambda db: reporting_service.list_recent_errors(db),
    lambda db: reporting_service.get_stats(db),
])
def test_connectivity_failure_is_store_unavailable(call):
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT 1", {}, Exception("server closed the connection"))
    with pytest.raises(StoreUnavailableError):
        call(db)


def test_run_detail_connectivity_failure_is_not_not_found():
    db = MagicMock()
    db.get.side_effect = OperationalError("SELECT 1", {}, Exception("login timeout"))
    with pytest.raises(StoreUnavailableError):
        reporting_service.get_run_detail(db, uuid.uuid4())
