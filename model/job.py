# model/job.py
from pydantic import BaseModel


class Job(BaseModel):
    id: str
    status: str = "queued"
    percentage: int = 0
    label: str = ""
    terminal: bool = False
