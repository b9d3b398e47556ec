from datetime import datetime
from typing import Any, Dict, Optional

from luxselle.core.enums import JobStatus
from luxselle.schemas.base import DocumentRead


class SystemJobRead(DocumentRead):
    job_type: str
    status: JobStatus
    queued_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    last_run_at: Optional[datetime] = None
    last_success_at: Optional[datetime] = None
    last_error: str = ""
    progress: Optional[Dict[str, Any]] = None
    error_count: int = 0
    retry_count: int = 0
    max_retries: int = 3
    input: Optional[Dict[str, Any]] = None
    output: Optional[Dict[str, Any]] = None
