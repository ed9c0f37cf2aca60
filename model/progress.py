# model/progress.py
from typing import Optional
from pydantic import BaseModel
from model.api import SummaryResult


class SubmissionState(BaseModel):
    """Client-side view of the current submission, published to observers."""

    loading: bool = False
    job_id: Optional[str] = None
    percentage: int = 0
    label: str = ""
    upload_progress: float = 0.0
    upload_finished: bool = False
    result: Optional[SummaryResult] = None
    error: Optional[str] = None
    upgrade_required: bool = False

    def reset_progress(self) -> None:
        # Idle baseline; `result` and `error` are left to the caller.
        self.loading = False
        self.job_id = None
        self.percentage = 0
        self.label = ""
        self.upload_progress = 0.0
        self.upload_finished = False
