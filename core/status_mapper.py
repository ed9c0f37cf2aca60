# core/status_mapper.py
from typing import Dict, Final, Optional, Tuple

Milestone = Tuple[int, str]

JOB_CREATED: Final[Milestone] = (17, "Job Created")
COMPLETE: Final[Milestone] = (100, "Complete!")
FALLBACK: Final[Milestone] = (50, "Processing...")

STATUS_MILESTONES: Final[Dict[str, Milestone]] = {
    "queued": JOB_CREATED,
    "extracting": (33, "PDF Text Extraction"),
    "processing": (50, "Processing Started"),
    "summarizing": (67, "Processing..."),
    "finalizing": (83, "Almost Done"),
    "completed": COMPLETE,
}

MILESTONE_PERCENTAGES: Final[frozenset] = frozenset(
    p for p, _ in (*STATUS_MILESTONES.values(), JOB_CREATED, FALLBACK)
)


def map_status(token: Optional[str], is_first_poll: bool = False) -> Milestone:
    """
    Translate a server status token into (percentage, label).
    The first poll after submission always reads as "Job Created",
    whatever the service already reports.
    """
    if is_first_poll:
        return JOB_CREATED
    return STATUS_MILESTONES.get((token or "").strip().lower(), FALLBACK)
