from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import sessionmaker

from terminology_reporting.api.v1.runner import run_query
from terminology_reporting.database import get_session_factory
from terminology_reporting.schemas.reporting import TrudReleaseOut
from terminology_reporting.services import reporting_service

router = APIRouter()


@router.get("", response_model=List[TrudReleaseOut])
async def list_releases(
    item_name: Optional[str] = Query(None, alias="itemName", description="Exact TRUD item name"),
    session_factory: sessionmaker = Depends(get_session_factory)
):
    """TRUD release history, most recently detected first."""
    return await run_query(session_factory, reporting_service.list_releases, item_name)
