# tests/conftest.py
import asyncio
import random
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest

from core.summarize_client import SummarizeClient
from core.upload_progress import UploadProgressSimulator
from model.document import DocumentPayload
from repository.usage_repository import MemoryUsageRepository
from service.quota_service import QuotaService
from service.summary_service import SummaryService

BASE_URL = "http://summarizer.test"

# Callables may be async; MockTransport awaits whatever they return.
Reply = Union[httpx.Response, Exception, Callable[[httpx.Request], Any]]


def json_reply(status_code: int, body) -> httpx.Response:
    return httpx.Response(status_code, json=body)


def html_reply(status_code: int = 502) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=b"<html><body>Bad Gateway</body></html>",
        headers={"content-type": "text/html"},
    )


class RecordingScheduler:
    """Returns immediately but yields to the loop, remembering each requested delay."""

    def __init__(self) -> None:
        self.sleeps: List[float] = []

    async def sleep(self, seconds: float, token=None) -> None:
        self.sleeps.append(seconds)
        await asyncio.sleep(0)


class ParkedScheduler:
    """Never wakes on its own; a sleeper only returns once its token is cancelled."""

    async def sleep(self, seconds: float, token=None) -> None:
        if token is None:
            await asyncio.Event().wait()
        await token.wait()


class FakeSummarizer:
    """
    Scripted stand-in for the remote service behind httpx.MockTransport.

    `submits` are consumed in order (the last one repeats); `statuses` maps a
    job id to its scripted poll replies (the last one repeats).
    """

    def __init__(
        self,
        submits: Optional[List[Reply]] = None,
        statuses: Optional[Dict[str, List[Reply]]] = None,
    ) -> None:
        self.submits = list(submits or [json_reply(200, {"job_id": "job-1"})])
        self.statuses = {k: list(v) for k, v in (statuses or {}).items()}
        self.requests: List[httpx.Request] = []

    @staticmethod
    def _next(queue: List[Reply]) -> Reply:
        return queue.pop(0) if len(queue) > 1 else queue[0]

    @staticmethod
    def _resolve(reply: Reply, request: httpx.Request) -> httpx.Response:
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        return reply

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            return self._resolve(self._next(self.submits), request)
        job_id = request.url.path.rsplit("/", 1)[-1]
        queue = self.statuses.get(job_id) or [json_reply(200, {"status": "processing"})]
        return self._resolve(self._next(queue), request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def submit_count(self) -> int:
        return sum(1 for r in self.requests if r.method == "POST")

    def polls_for(self, job_id: Optional[str] = None) -> int:
        return sum(
            1
            for r in self.requests
            if r.method == "GET" and (job_id is None or r.url.path.endswith("/" + job_id))
        )


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def pdf() -> DocumentPayload:
    return DocumentPayload(
        filename="paper.pdf",
        content=b"%PDF-1.7\n1 0 obj\n<<>>\nendobj\n%%EOF\n",
        content_type="application/pdf",
    )


@pytest.fixture
def simulators() -> List[UploadProgressSimulator]:
    """Every upload simulator built by `make_service`, in creation order."""
    return []


@pytest.fixture
def make_service(scheduler, simulators):
    def _make(
        fake: FakeSummarizer,
        usage: int = 0,
        *,
        max_attempts: int = 600,
        max_file_bytes: int = 10 * 1024 * 1024,
        upload_scheduler=None,
    ):
        def _simulator() -> UploadProgressSimulator:
            simulator = UploadProgressSimulator(
                scheduler=upload_scheduler or scheduler, rng=random.Random(11)
            )
            simulators.append(simulator)
            return simulator

        repo = MemoryUsageRepository(usage)
        client = SummarizeClient(BASE_URL, transport=fake.transport)
        service = SummaryService(
            client,
            QuotaService(repo, limit=3),
            scheduler=scheduler,
            poll_interval_seconds=1.0,
            poll_max_attempts=max_attempts,
            max_file_bytes=max_file_bytes,
            simulator_factory=_simulator,
        )
        return service, repo

    return _make
