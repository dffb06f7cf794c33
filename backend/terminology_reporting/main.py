"""Main FastAPI application."""

import logging

from anyio import to_thread
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from terminology_reporting import __version__
from terminology_reporting import database
from terminology_reporting.api.v1.api import api_router
from terminology_reporting.config import settings
from terminology_reporting.services.errors import InvalidRequestError, StoreUnavailableError

# Custom TRACE level
logging.TRACE = 5
logging.addLevelName(logging.TRACE, "TRACE")

# Add trace method to standard Logger class for all instances
def trace_method(self, msg, *args, **kwargs):
    if self.isEnabledFor(logging.TRACE):
        self._log(logging.TRACE, msg, args, **kwargs)

logging.Logger.trace = trace_method

# Configure root logger early
log_level_str = settings.log_level.upper()
log_level = logging.TRACE if log_level_str == "TRACE" else getattr(logging, log_level_str, logging.INFO)
if not logging.getLogger().hasHandlers():
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)-8s - %(message)s'
    )

    root = logging.getLogger()

    # VERBOSE shows SQL statements, TRACE also shows result rows
    if log_level_str == "VERBOSE":
        root_level = logging.DEBUG
        sql_level = logging.INFO
        services_level = logging.DEBUG
        root.info("VERBOSE mode enabled: SQL statements are logged for debugging.")
    elif log_level_str == "TRACE":
        root_level = logging.TRACE
        sql_level = logging.DEBUG
        services_level = logging.TRACE
    else:
        root_level = log_level
        sql_level = logging.WARNING
        services_level = root_level

    root.setLevel(root_level)
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)
    logging.getLogger("terminology_reporting.services").setLevel(services_level)

    root.trace("Trace logging enabled at startup (verbose details).") if log_level_str == "TRACE" else root.debug("Debug logging enabled at startup.")

log = logging.getLogger(__name__)

app = FastAPI(
    title="Terminology Update Reporting",
    description="Reporting API over SNOMED CT and dm+d update pipeline runs",
    version=__version__
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
async def health_check():
    """Health check endpoint, including database reachability."""
    if not await to_thread.run_sync(database.check_db_connection):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "degraded", "database": "unreachable", "version": __version__},
        )
    return {
        "status": "healthy",
        "database": "ok",
        "version": __version__
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Terminology Update Reporting API",
        "version": __version__,
        "docs": "/docs"
    }

app.include_router(api_router, prefix=settings.api_prefix)


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    log.info(f"Rejected request {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)}
    )


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    log.error(f"Store unavailable for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Reporting database unavailable"}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    log.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="debug" if log_level_str in ("VERBOSE", "TRACE") else log_level_str.lower())
