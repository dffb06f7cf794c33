from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import sessionmaker

from terminology_reporting.api.v1.runner import run_query
from terminology_reporting.database import get_session_factory
from terminology_reporting.schemas.reporting import RunDetailOut, RunListOut
from terminology_reporting.services import reporting_service

router = APIRouter()


@router.get("", response_model=RunListOut)
async def list_runs(
    page: int = Query(1, description="1-based page number"),
    page_size: int = Query(reporting_service.DEFAULT_PAGE_SIZE, alias="pageSize", description="Runs per page"),
    session_factory: sessionmaker = Depends(get_session_factory)
):
    """List run summaries, newest first, with pagination."""
    return await run_query(session_factory, reporting_service.list_runs, page, page_size)


@router.get("/{run_id}", response_model=RunDetailOut)
async def get_run(run_id: UUID, session_factory: sessionmaker = Depends(get_session_factory)):
    """Run details with its steps and errors."""
    detail = await run_query(session_factory, reporting_service.get_run_detail, run_id)
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Run not found")
    return detail
