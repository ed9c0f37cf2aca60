# util/errors.py
from util.enums import ErrorMessage, OutcomeKind


class AppError(Exception):
    # Flow: raise AppError to short-circuit with a typed fault kind & message.
    def __init__(
        self, message: str, kind: OutcomeKind = OutcomeKind.VALIDATION
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind

    @classmethod
    def of(cls, error: ErrorMessage, detail: str | None = None) -> "AppError":
        """Build from a fixed message, preferring server-supplied detail when present."""
        return cls(detail or error.value.message, error.value.kind)
