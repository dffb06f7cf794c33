from fastapi import APIRouter

from terminology_reporting.api.v1.endpoints import dashboard, runs, releases, errors

api_router = APIRouter()
api_router.include_router(dashboard.router, tags=["dashboard"])
api_router.include_router(runs.router, prefix="/runs", tags=["runs"])
api_router.include_router(releases.router, prefix="/releases", tags=["releases"])
api_router.include_router(errors.router, prefix="/errors", tags=["errors"])
