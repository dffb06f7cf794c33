"""TRUD release tracking model."""

from sqlalchemy import Column, Integer, String, Date, DateTime, Boolean, Index
from terminology_reporting.database import Base


class TrudRelease(Base):
    """Upstream release detected on TRUD, tracked through download and import."""

    __tablename__ = "trud_releases"

    release_tracking_id = Column(Integer, primary_key=True, autoincrement=True)

    item_name = Column(String(100), nullable=False)  # 'SNOMED', 'dm+d'
    trud_item_number = Column(Integer, nullable=False)
    release_id = Column(String(255), nullable=False)
    release_date = Column(Date, nullable=True)

    # Lifecycle
    detected_date = Column(DateTime(timezone=True), nullable=False)
    downloaded_date = Column(DateTime(timezone=True), nullable=True)
    imported_date = Column(DateTime(timezone=True), nullable=True)
    import_success = Column(Boolean, nullable=True)

    __table_args__ = (
        Index('idx_trud_releases_item_name', 'item_name'),
        Index('idx_trud_releases_detected_date', 'detected_date'),
    )

    @property
    def stage(self) -> str:
        """Furthest lifecycle stage reached: detected, downloaded, imported or import_failed."""
        if self.imported_date is not None or self.import_success is not None:
            return "imported" if self.import_success is not False else "import_failed"
        if self.downloaded_date is not None:
            return "downloaded"
        return "detected"

    def __repr__(self):
        return f"<TrudRelease(id={self.release_tracking_id}, item='{self.item_name}', release='{self.release_id}')>"
