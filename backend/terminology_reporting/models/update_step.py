"""Update step model for per-terminology pipeline steps."""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, Uuid, ForeignKey, Index
from sqlalchemy.orm import relationship
from terminology_reporting.database import Base


class UpdateStep(Base):
    """A single unit of work within a run, scoped to one terminology type."""

    __tablename__ = "update_steps"

    step_id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(Uuid, ForeignKey("update_runs.run_id"), nullable=False)

    terminology_type = Column(String(20), nullable=False)  # 'SNOMED', 'DMD'
    step_name = Column(String(100), nullable=False)
    step_order = Column(Integer, nullable=False, default=0)
    success = Column(Boolean, default=False, nullable=False)
    details = Column(Text, nullable=True)  # 'Version: 39.1.0, Concepts: 350123'

    start_time = Column(DateTime(timezone=True), nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    duration_formatted = Column(String(20), nullable=True)

    run = relationship("UpdateRun", back_populates="steps")

    __table_args__ = (
        Index('idx_update_steps_run_id', 'run_id'),
    )

    def __repr__(self):
        return f"<UpdateStep(step_id={self.step_id}, type='{self.terminology_type}', name='{self.step_name}')>"
