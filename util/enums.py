# util/enums.py
from enum import Enum
from typing import NamedTuple


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class UsageBackend(str, Enum):
    FILE = "file"
    REDIS = "redis"
    MEMORY = "memory"


class OutcomeKind(str, Enum):
    COMPLETED = "completed"
    VALIDATION = "validation"
    QUOTA_EXCEEDED = "quota_exceeded"
    TRANSPORT = "transport"
    SUBMISSION = "submission"
    POLL = "poll"
    TIMEOUT = "timeout"
    NETWORK = "network"
    ABANDONED = "abandoned"


class PollerState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    COMPLETED = "completed"
    ERRORED = "errored"
    TIMED_OUT = "timed_out"
    ABANDONED = "abandoned"


class ErrorInfo(NamedTuple):
    message: str
    kind: OutcomeKind


class ErrorMessage(Enum):
    NO_FILE = ErrorInfo("Please select a PDF file", OutcomeKind.VALIDATION)
    NOT_PDF = ErrorInfo("Please select a valid PDF file", OutcomeKind.VALIDATION)
    FILE_TOO_LARGE = ErrorInfo("File exceeds the size limit", OutcomeKind.VALIDATION)
    QUOTA_EXCEEDED = ErrorInfo(
        "Free usage limit reached. Upgrade your plan to keep summarizing.",
        OutcomeKind.QUOTA_EXCEEDED,
    )
    SUBMIT_NON_JSON = ErrorInfo(
        "Server error: The server returned an error page. Please try again.",
        OutcomeKind.TRANSPORT,
    )
    SUBMIT_FAILED = ErrorInfo("Failed to upload PDF", OutcomeKind.SUBMISSION)
    POLL_NON_JSON = ErrorInfo(
        "Server error: received non-JSON response", OutcomeKind.TRANSPORT
    )
    POLL_FAILED = ErrorInfo("Failed to get status", OutcomeKind.POLL)
    JOB_FAILED = ErrorInfo("An error occurred during processing", OutcomeKind.POLL)
    TIMED_OUT = ErrorInfo(
        "Processing took too long. Please try again with a smaller file.",
        OutcomeKind.TIMEOUT,
    )
    NETWORK = ErrorInfo("Unknown error", OutcomeKind.NETWORK)
    ABANDONED = ErrorInfo(
        "Superseded by a newer submission", OutcomeKind.ABANDONED
    )
