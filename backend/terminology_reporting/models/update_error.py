"""Update error model, append-only per run."""

from sqlalchemy import Column, Integer, String, DateTime, Text, Uuid, ForeignKey, Index
from sqlalchemy.orm import relationship
from terminology_reporting.database import Base


class UpdateError(Base):
    """Error raised during a pipeline run."""

    __tablename__ = "update_errors"

    error_id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(Uuid, ForeignKey("update_runs.run_id"), nullable=False)

    error_source = Column(String(255), nullable=True)
    error_message = Column(Text, nullable=False)
    error_timestamp = Column(DateTime(timezone=True), nullable=False)

    run = relationship("UpdateRun", back_populates="errors")

    __table_args__ = (
        Index('idx_update_errors_run_id', 'run_id'),
        Index('idx_update_errors_timestamp', 'error_timestamp'),
    )

    def __repr__(self):
        return f"<UpdateError(error_id={self.error_id}, source='{self.error_source}')>"
