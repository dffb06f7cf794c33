from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import sessionmaker

from terminology_reporting.api.v1.runner import run_query
from terminology_reporting.database import get_session_factory
from terminology_reporting.schemas.reporting import DashboardOut, StatsOut, UpdateSummaryOut
from terminology_reporting.services import reporting_service

router = APIRouter()


@router.get("/dashboard", response_model=DashboardOut)
async def get_dashboard(session_factory: sessionmaker = Depends(get_session_factory)):
    """Main dashboard data: latest run, last 10 runs and success counts."""
    return await run_query(session_factory, reporting_service.get_dashboard)


@router.get("/latest", response_model=UpdateSummaryOut)
async def get_latest_run(session_factory: sessionmaker = Depends(get_session_factory)):
    """Summary of the latest run only."""
    latest = await run_query(session_factory, reporting_service.get_latest_run)
    if latest is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No runs recorded")
    return latest


@router.get("/stats", response_model=StatsOut)
async def get_stats(session_factory: sessionmaker = Depends(get_session_factory)):
    """Overall statistics."""
    return await run_query(session_factory, reporting_service.get_stats)
