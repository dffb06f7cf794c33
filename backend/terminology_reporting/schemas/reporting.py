"""Response schemas for the reporting API.

Field names are snake_case in Python and camelCase on the wire, which is the
shape the dashboard client consumes.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Rates are kept as Decimal internally but sent to clients as JSON numbers
Rate = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ReportingModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class UpdateSummaryOut(ReportingModel):
    """One row per run, merging the run with its SNOMED and dm+d step outcomes."""

    run_id: UUID
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_formatted: Optional[str] = None
    overall_success: bool
    updates_found: int = 0
    server_name: str = ""
    whatif_mode: bool = False

    # SNOMED
    snomed_success: Optional[bool] = None
    snomed_new_release: Optional[bool] = None
    snomed_version: Optional[str] = None
    concept_count: Optional[int] = None
    description_count: Optional[int] = None

    # DMD
    dmd_success: Optional[bool] = None
    dmd_new_release: Optional[bool] = None
    dmd_version: Optional[str] = None
    vmp_count: Optional[int] = None
    amp_count: Optional[int] = None
    xml_validation_rate: Optional[Rate] = None
    snomed_validation_rate: Optional[Rate] = None

    error_count: int = 0


class UpdateRunOut(ReportingModel):
    run_id: UUID
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    duration_formatted: Optional[str] = None
    success: bool
    updates_found: int
    server_name: str
    log_file_path: Optional[str] = None
    whatif_mode: bool
    forced_run: bool
    created_at: datetime


class UpdateStepOut(ReportingModel):
    step_id: int
    run_id: UUID
    terminology_type: str
    step_name: str
    step_order: int
    success: bool
    details: Optional[str] = None
    start_time: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    duration_formatted: Optional[str] = None


class UpdateErrorOut(ReportingModel):
    error_id: int
    run_id: UUID
    error_source: Optional[str] = None
    error_message: str
    error_timestamp: datetime


class TrudReleaseOut(ReportingModel):
    release_tracking_id: int
    item_name: str
    trud_item_number: int
    release_id: str
    release_date: Optional[date] = None
    detected_date: datetime
    downloaded_date: Optional[datetime] = None
    imported_date: Optional[datetime] = None
    import_success: Optional[bool] = None
    stage: str = Field(..., description="detected, downloaded, imported or import_failed")


class DashboardOut(ReportingModel):
    latest_run: Optional[UpdateSummaryOut] = None
    recent_runs: List[UpdateSummaryOut] = Field(default_factory=list)
    total_runs: int = 0
    successful_runs: int = 0
    failed_runs: int = 0
    last_successful_update: Optional[datetime] = None


class RunListOut(ReportingModel):
    runs: List[UpdateSummaryOut] = Field(default_factory=list)
    total: int = 0
    page: int
    page_size: int


class RunDetailOut(ReportingModel):
    run: UpdateRunOut
    steps: List[UpdateStepOut] = Field(default_factory=list)
    errors: List[UpdateErrorOut] = Field(default_factory=list)


class StatsOut(ReportingModel):
    total_runs: int = 0
    successful_runs: int = 0
    failed_runs: int = 0
    total_errors: int = 0
    average_validation_rate: float = 0.0
    last_run: Optional[datetime] = None
