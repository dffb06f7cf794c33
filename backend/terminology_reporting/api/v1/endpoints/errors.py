from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import sessionmaker

from terminology_reporting.api.v1.runner import run_query
from terminology_reporting.database import get_session_factory
from terminology_reporting.schemas.reporting import UpdateErrorOut
from terminology_reporting.services import reporting_service

router = APIRouter()


@router.get("", response_model=List[UpdateErrorOut])
async def list_recent_errors(
    count: int = Query(reporting_service.DEFAULT_ERROR_COUNT, description="Number of errors to return"),
    session_factory: sessionmaker = Depends(get_session_factory)
):
    """Most recent errors across all runs."""
    return await run_query(session_factory, reporting_service.list_recent_errors, count)
