# core/job_poller.py
import logging
from typing import List, Optional
import httpx
from config.settings import settings
from core.scheduling import AsyncioScheduler, CancellationToken, Scheduler
from core.status_mapper import COMPLETE, map_status
from core.summarize_client import SummarizeClient
from model.api import SummaryResult
from model.job import Job
from model.outcome import Outcome
from util.enums import ErrorMessage, PollerState
from util.errors import AppError
from util.functions import notify
from util.timing import timed
from util.types import ProgressCallback

logger = logging.getLogger(__name__)


class JobPoller:
    """
    State machine for one job: IDLE -> POLLING -> {COMPLETED, ERRORED, TIMED_OUT}.

    Flow per tick:
      - one status request (never concurrent with another)
      - terminal status -> outcome; anything else -> publish milestone, wait, repeat
      - every fault is terminal; nothing is retried
    A cancelled token moves the poller to ABANDONED at the next suspension point.
    A poller instance drives exactly one job.
    """

    def __init__(
        self,
        client: SummarizeClient,
        *,
        scheduler: Optional[Scheduler] = None,
        interval_seconds: float = settings.POLL_INTERVAL_SECONDS,
        max_attempts: int = settings.POLL_MAX_ATTEMPTS,
    ) -> None:
        self._client = client
        self._scheduler = scheduler or AsyncioScheduler()
        self._interval = interval_seconds
        self._max_attempts = max(1, int(max_attempts))
        self._observers: List[ProgressCallback] = []
        self.state: PollerState = PollerState.IDLE
        self.job: Optional[Job] = None
        self.attempts: int = 0

    def subscribe(self, callback: ProgressCallback) -> None:
        self._observers.append(callback)

    @property
    def percentage(self) -> int:
        return self.job.percentage if self.job else 0

    @property
    def label(self) -> str:
        return self.job.label if self.job else ""

    async def run(self, job_id: str, token: Optional[CancellationToken] = None) -> Outcome:
        if self.state != PollerState.IDLE:
            raise RuntimeError(f"poller already {self.state.value}")
        token = token or CancellationToken()
        self.job = Job(id=job_id)
        self.state = PollerState.POLLING
        logger.info("poll.start job=%s max=%d", job_id, self._max_attempts)

        await self._advance(*map_status(None, is_first_poll=True))
        with timed(logger, "poll.loop", job=job_id):
            outcome = await self._loop(job_id, token)
        logger.info(
            "poll.end job=%s state=%s attempts=%d",
            job_id,
            self.state.value,
            self.attempts,
        )
        return outcome

    async def _loop(self, job_id: str, token: CancellationToken) -> Outcome:
        while self.attempts < self._max_attempts:
            if token.cancelled:
                return self._abandon(job_id)

            try:
                body = await self._client.get_status(job_id)
            except AppError as err:
                if token.cancelled:
                    return self._abandon(job_id)
                return self._terminate(
                    PollerState.ERRORED, Outcome.from_error(err, job_id=job_id)
                )
            except (httpx.HTTPError, OSError) as exc:
                if token.cancelled:
                    return self._abandon(job_id)
                logger.error("poll.network.error job=%s err=%s", job_id, type(exc).__name__)
                return self._terminate(
                    PollerState.ERRORED,
                    Outcome.fault(ErrorMessage.NETWORK, job_id=job_id, detail=str(exc)),
                )

            if token.cancelled:
                return self._abandon(job_id)

            status = (body.status or "").strip().lower()
            logger.debug("poll.tick job=%s attempt=%d status=%s", job_id, self.attempts + 1, status)

            if status == "completed":
                await self._advance(*COMPLETE)
                self.state = PollerState.COMPLETED
                self.job.status = status
                self.job.terminal = True
                return Outcome.completed(SummaryResult.from_status(job_id, body))

            if status == "error":
                logger.warning("poll.job.error job=%s", job_id)
                return self._terminate(
                    PollerState.ERRORED,
                    Outcome.fault(ErrorMessage.JOB_FAILED, job_id=job_id, detail=body.error),
                )

            self.job.status = status
            await self._advance(*map_status(status))
            self.attempts += 1
            if self.attempts < self._max_attempts:
                await self._scheduler.sleep(self._interval, token)

        logger.warning("poll.timeout job=%s attempts=%d", job_id, self.attempts)
        return self._terminate(
            PollerState.TIMED_OUT, Outcome.fault(ErrorMessage.TIMED_OUT, job_id=job_id)
        )

    async def _advance(self, percentage: int, label: str) -> None:
        # Milestones never move backwards while the job is active.
        if percentage >= self.job.percentage:
            self.job.percentage = percentage
            self.job.label = label
        for cb in list(self._observers):
            await notify(cb, self.job.percentage, self.job.label)

    def _terminate(self, state: PollerState, outcome: Outcome) -> Outcome:
        self.state = state
        self.job.terminal = True
        self.job.percentage = 0
        self.job.label = ""
        return outcome

    def _abandon(self, job_id: str) -> Outcome:
        logger.info("poll.abandoned job=%s attempts=%d", job_id, self.attempts)
        return self._terminate(
            PollerState.ABANDONED, Outcome.fault(ErrorMessage.ABANDONED, job_id=job_id)
        )
