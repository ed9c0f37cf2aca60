# model/outcome.py
from typing import Optional
from pydantic import BaseModel
from model.api import SummaryResult
from util.enums import ErrorMessage, OutcomeKind
from util.errors import AppError


class Outcome(BaseModel):
    """
    Terminal result of one submission. Callers branch on `kind`:
      - COMPLETED carries `result`
      - every other kind carries a user-facing `message`
    """

    kind: OutcomeKind
    message: Optional[str] = None
    job_id: Optional[str] = None
    result: Optional[SummaryResult] = None

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.COMPLETED

    @classmethod
    def completed(cls, result: SummaryResult) -> "Outcome":
        return cls(kind=OutcomeKind.COMPLETED, job_id=result.job_id, result=result)

    @classmethod
    def fault(
        cls, error: ErrorMessage, *, job_id: Optional[str] = None, detail: Optional[str] = None
    ) -> "Outcome":
        return cls(
            kind=error.value.kind,
            message=detail or error.value.message,
            job_id=job_id,
        )

    @classmethod
    def from_error(cls, err: AppError, *, job_id: Optional[str] = None) -> "Outcome":
        return cls(kind=err.kind, message=err.message, job_id=job_id)
