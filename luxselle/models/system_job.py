from sqlalchemy import Column, DateTime, Integer, String, Text, JSON

from luxselle.database import Base
from luxselle.core.enums import JobStatus
from luxselle.models.base import DocumentMixin


class SystemJob(DocumentMixin, Base):
    """
    Outcome record of a batch operation (e.g. supplier_import).
    """
    __tablename__ = "system_jobs"

    job_type = Column(String(64), nullable=False, index=True)
    status = Column(String(16), nullable=False, default=JobStatus.QUEUED.value, index=True)

    # Timing
    queued_at = Column(DateTime(timezone=True), nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    last_run_at = Column(DateTime(timezone=True), nullable=True)
    last_success_at = Column(DateTime(timezone=True), nullable=True)
    last_error = Column(Text, nullable=False, default="")

    progress = Column(JSON, nullable=True)
    error_count = Column(Integer, nullable=False, default=0)
    retry_count = Column(Integer, nullable=False, default=0)
    max_retries = Column(Integer, nullable=False, default=3)

    input = Column(JSON, nullable=True)
    output = Column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<SystemJob(id={self.id}, type={self.job_type}, status={self.status})>"
