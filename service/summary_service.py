# service/summary_service.py
import logging
from typing import Callable, List, Optional
import httpx
from config.settings import settings
from core.job_poller import JobPoller
from core.scheduling import CancellationToken, Scheduler
from core.summarize_client import SummarizeClient
from core.upload_progress import UploadProgressSimulator
from model.document import DocumentPayload
from model.outcome import Outcome
from model.progress import SubmissionState
from service.quota_service import QuotaService
from util.constants import PDF_MEDIA_TYPE, UPLOADED_LABEL, UPLOADING_LABEL
from util.enums import ErrorMessage, OutcomeKind
from util.errors import AppError
from util.functions import notify
from util.timing import timed
from util.types import StateObserver

logger = logging.getLogger(__name__)


class SummaryService:
    """
    Drives one submission end to end and reports a single Outcome.

    Flow:
      quota gate -> local validation -> upload (with simulated progress)
      -> record usage -> poll until terminal -> settle client state
    A new submission that clears the local checks abandons the previous one:
    its poll loop and upload ticker stop at their next suspension point and it
    never touches `state` again.
    """

    def __init__(
        self,
        client: SummarizeClient,
        quota: QuotaService,
        *,
        scheduler: Optional[Scheduler] = None,
        poll_interval_seconds: float = settings.POLL_INTERVAL_SECONDS,
        poll_max_attempts: int = settings.POLL_MAX_ATTEMPTS,
        max_file_bytes: int = settings.max_file_bytes,
        simulator_factory: Optional[Callable[[], UploadProgressSimulator]] = None,
    ) -> None:
        self._client = client
        self._quota = quota
        self._scheduler = scheduler
        self._poll_interval = poll_interval_seconds
        self._poll_max_attempts = poll_max_attempts
        self._max_file_bytes = max_file_bytes
        self._simulator_factory = simulator_factory or (
            lambda: UploadProgressSimulator(scheduler=scheduler)
        )
        self._observers: List[StateObserver] = []
        self._token: Optional[CancellationToken] = None
        self._simulator: Optional[UploadProgressSimulator] = None
        self.state = SubmissionState()

    def subscribe(self, callback: StateObserver) -> None:
        self._observers.append(callback)

    @property
    def busy(self) -> bool:
        return self._token is not None and not self._token.cancelled

    def validate(self, document: Optional[DocumentPayload]) -> None:
        if document is None:
            raise AppError.of(ErrorMessage.NO_FILE)
        media_type = (document.content_type or "").split(";")[0].strip().lower()
        if media_type != PDF_MEDIA_TYPE:
            raise AppError.of(ErrorMessage.NOT_PDF)
        if document.size > self._max_file_bytes:
            limit_mb = self._max_file_bytes // (1024 * 1024)
            raise AppError.of(
                ErrorMessage.FILE_TOO_LARGE, f"File exceeds the {limit_mb} MB limit"
            )

    async def cancel(self) -> None:
        """Abandon the in-flight submission, if any, and return to idle."""
        await self._abandon_current()
        self.state = SubmissionState()
        await self._publish()

    async def submit(self, document: Optional[DocumentPayload]) -> Outcome:
        # Local rejections leave any job in flight running.
        if not await self._quota.check_and_maybe_block():
            return await self._reject(Outcome.fault(ErrorMessage.QUOTA_EXCEEDED))
        try:
            self.validate(document)
        except AppError as err:
            logger.info("submit.invalid kind=%s", err.kind.value)
            return await self._reject(Outcome.from_error(err))

        await self._abandon_current()
        token = CancellationToken()
        self._token = token
        self.state = SubmissionState()
        self.state.loading = True
        self.state.label = UPLOADING_LABEL
        await self._publish()

        simulator = self._simulator_factory()
        simulator.subscribe(lambda value, done: self._on_upload(token, value, done))
        self._simulator = simulator
        simulator.start()

        try:
            with timed(logger, "submit.request", bytes=document.size):
                job_id = await self._client.submit(document)
        except AppError as err:
            await simulator.finish()
            return await self._settle(token, Outcome.from_error(err))
        except (httpx.HTTPError, OSError) as exc:
            await simulator.stop()
            logger.error("submit.network.error err=%s", type(exc).__name__)
            return await self._settle(
                token, Outcome.fault(ErrorMessage.NETWORK, detail=str(exc))
            )
        await simulator.finish()

        # Accepted server-side, so it counts even if superseded meanwhile.
        await self._quota.record_usage()
        if token.cancelled:
            return await self._settle(token, Outcome.fault(ErrorMessage.ABANDONED, job_id=job_id))

        self.state.job_id = job_id
        self.state.label = UPLOADED_LABEL
        await self._publish()

        poller = JobPoller(
            self._client,
            scheduler=self._scheduler,
            interval_seconds=self._poll_interval,
            max_attempts=self._poll_max_attempts,
        )
        poller.subscribe(lambda pct, label: self._on_progress(token, pct, label))
        outcome = await poller.run(job_id, token)
        return await self._settle(token, outcome)

    async def _abandon_current(self) -> None:
        token, self._token = self._token, None
        simulator, self._simulator = self._simulator, None
        if token is not None and not token.cancelled:
            logger.info("submit.abandon job=%s", self.state.job_id)
            token.cancel()
        if simulator is not None:
            await simulator.stop()

    async def _on_upload(self, token: CancellationToken, value: float, done: bool) -> None:
        if token.cancelled:
            return
        self.state.upload_progress = value
        self.state.upload_finished = done
        await self._publish()

    async def _on_progress(self, token: CancellationToken, percentage: int, label: str) -> None:
        if token.cancelled:
            return
        self.state.percentage = percentage
        self.state.label = label
        await self._publish()

    async def _settle(self, token: CancellationToken, outcome: Outcome) -> Outcome:
        if token.cancelled or token is not self._token:
            # Superseded: the newer submission owns `state` now.
            if outcome.kind != OutcomeKind.ABANDONED:
                outcome = Outcome.fault(ErrorMessage.ABANDONED, job_id=outcome.job_id)
            return outcome

        self._token = None
        self._simulator = None
        if outcome.ok:
            self.state.loading = False
            self.state.job_id = None
            self.state.percentage = 100
            self.state.result = outcome.result
            self.state.error = None
            logger.info("submit.completed job=%s", outcome.job_id)
        else:
            self._apply_fault(outcome)
            logger.info("submit.failed kind=%s job=%s", outcome.kind.value, outcome.job_id)
        await self._publish()
        return outcome

    async def _reject(self, outcome: Outcome) -> Outcome:
        if self.busy:
            # `state` belongs to the job still in flight.
            logger.info("submit.rejected kind=%s in_flight=%s", outcome.kind.value, self.state.job_id)
            return outcome
        self.state = SubmissionState()
        self._apply_fault(outcome)
        logger.info("submit.rejected kind=%s", outcome.kind.value)
        await self._publish()
        return outcome

    def _apply_fault(self, outcome: Outcome) -> None:
        self.state.reset_progress()
        self.state.result = None
        if outcome.kind == OutcomeKind.QUOTA_EXCEEDED:
            self.state.upgrade_required = True
            self.state.error = None
        else:
            self.state.error = outcome.message

    async def _publish(self) -> None:
        snapshot = self.state.model_copy(deep=True)
        for cb in list(self._observers):
            await notify(cb, snapshot)
