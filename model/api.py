# model/api.py
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict


class SubmitJobResponse(BaseModel):
    # Some deployments hand out numeric ids.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    job_id: str


class JobStatusResponse(BaseModel):
    # Unknown fields from the service are kept so callers get the full payload.
    model_config = ConfigDict(extra="allow")

    status: Optional[str] = None
    summary: Optional[str] = None
    filename: Optional[str] = None
    text_length: Optional[Union[int, float]] = None
    error: Optional[str] = None


class SummaryResult(BaseModel):
    job_id: str
    summary: Optional[str] = None
    filename: Optional[str] = None
    text_length: Optional[Union[int, float]] = None
    raw: dict = {}

    @classmethod
    def from_status(cls, job_id: str, body: JobStatusResponse) -> "SummaryResult":
        return cls(
            job_id=job_id,
            summary=body.summary,
            filename=body.filename,
            text_length=body.text_length,
            raw=body.model_dump(),
        )
