# controller/summarize_controller.py
import sys
from typing import Optional, TextIO
from model.document import DocumentPayload
from model.outcome import Outcome
from model.progress import SubmissionState
from service.quota_service import QuotaService
from service.summary_service import SummaryService
from util.enums import Color, OutcomeKind
from util.functions import render_progress_bar

UPGRADE_NOTICE = (
    "You have used all free summaries. Upgrade to a paid plan to keep summarizing."
)


class ProgressPrinter:
    """Renders state snapshots as one rewritten terminal line."""

    def __init__(self, out: TextIO = sys.stdout) -> None:
        self._out = out
        self._last: Optional[str] = None

    def __call__(self, state: SubmissionState) -> None:
        line = self.format(state)
        if line is None or line == self._last:
            return
        self._last = line
        self._out.write("\r\033[K" + line)
        self._out.flush()

    @staticmethod
    def format(state: SubmissionState) -> Optional[str]:
        if state.percentage > 0:
            return f"{render_progress_bar(state.percentage)} {state.percentage}% {state.label}"
        if state.loading:
            tag = "FINISHED" if state.upload_finished else "UPLOADING"
            return f"{tag} {int(state.upload_progress)}% {state.label}"
        return None

    def close(self) -> None:
        if self._last is not None:
            self._out.write("\n")
            self._out.flush()
            self._last = None


def render_outcome(outcome: Outcome, out: TextIO = sys.stdout) -> int:
    """Print the terminal outcome; returns the process exit code."""
    if outcome.ok and outcome.result is not None:
        result = outcome.result
        out.write(f"{Color.GREEN}Summary{Color.RESET}")
        if result.filename:
            out.write(f" of {result.filename}")
        if result.text_length is not None:
            out.write(f" ({result.text_length} characters)")
        out.write("\n\n")
        out.write((result.summary or "").strip() + "\n")
        return 0

    if outcome.kind == OutcomeKind.QUOTA_EXCEEDED:
        out.write(f"{Color.YELLOW}{UPGRADE_NOTICE}{Color.RESET}\n")
        return 3
    if outcome.kind == OutcomeKind.VALIDATION:
        out.write(f"{Color.RED}{outcome.message}{Color.RESET}\n")
        return 2
    out.write(f"{Color.RED}Error: {outcome.message}{Color.RESET}\n")
    return 1


async def summarize_file(
    service: SummaryService, path: str, out: TextIO = sys.stdout
) -> int:
    try:
        document = DocumentPayload.from_path(path)
    except OSError as e:
        out.write(f"{Color.RED}Cannot read {path}: {e.strerror or e}{Color.RESET}\n")
        return 2

    printer = ProgressPrinter(out)
    service.subscribe(printer)
    try:
        outcome = await service.submit(document)
    finally:
        printer.close()
    return render_outcome(outcome, out)


async def show_usage(quota: QuotaService, out: TextIO = sys.stdout) -> int:
    used = await quota.usage()
    remaining = await quota.remaining()
    out.write(f"Used {used} of {quota.limit} free summaries ({remaining} remaining)\n")
    if remaining == 0:
        out.write(f"{Color.YELLOW}{UPGRADE_NOTICE}{Color.RESET}\n")
    return 0
