"""Update run model for pipeline execution history."""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Uuid, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from terminology_reporting.database import Base


class UpdateRun(Base):
    """One execution of the terminology update pipeline."""

    __tablename__ = "update_runs"

    run_id = Column(Uuid, primary_key=True)

    # Execution details
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)  # null while running
    duration_seconds = Column(Integer, nullable=True)
    duration_formatted = Column(String(20), nullable=True)
    success = Column(Boolean, default=False, nullable=False)

    # Outcome
    updates_found = Column(Integer, default=0, nullable=False)
    server_name = Column(String(255), nullable=False, default='')
    log_file_path = Column(String(1024), nullable=True)

    # Flags
    whatif_mode = Column(Boolean, default=False, nullable=False)  # dry run
    forced_run = Column(Boolean, default=False, nullable=False)

    # Timestamp
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    steps = relationship("UpdateStep", back_populates="run")
    errors = relationship("UpdateError", back_populates="run")

    __table_args__ = (
        Index('idx_update_runs_start_time', 'start_time'),
    )

    def __repr__(self):
        return f"<UpdateRun(run_id={self.run_id}, start='{self.start_time}', success={self.success})>"
