import asyncio

import httpx
import pytest

from conftest import BASE_URL, FakeSummarizer, html_reply, json_reply
from core.job_poller import JobPoller
from core.scheduling import CancellationToken
from core.summarize_client import SummarizeClient
from model.api import JobStatusResponse
from util.enums import OutcomeKind, PollerState


def _poller(fake: FakeSummarizer, scheduler, **kwargs):
    client = SummarizeClient(BASE_URL, transport=fake.transport)
    poller = JobPoller(client, scheduler=scheduler, interval_seconds=1.0, **kwargs)
    published = []
    poller.subscribe(lambda pct, label: published.append((pct, label)))
    return poller, published


class CountingClient:
    """Bypasses HTTP for long runs; always reports the same in-progress status."""

    def __init__(self, status: str = "processing") -> None:
        self.status = status
        self.calls = 0

    async def get_status(self, job_id: str) -> JobStatusResponse:
        self.calls += 1
        return JobStatusResponse(status=self.status)


def test_progress_sequence_through_completion(scheduler):
    fake = FakeSummarizer(
        statuses={
            "job-1": [
                json_reply(200, {"status": "extracting"}),
                json_reply(200, {"status": "summarizing"}),
                json_reply(
                    200,
                    {
                        "status": "completed",
                        "summary": "Short version.",
                        "filename": "paper.pdf",
                        "text_length": 5120,
                    },
                ),
            ]
        }
    )
    poller, published = _poller(fake, scheduler)
    outcome = asyncio.run(poller.run("job-1"))

    assert [pct for pct, _ in published] == [17, 33, 67, 100]
    assert published[0] == (17, "Job Created")
    assert published[-1] == (100, "Complete!")
    assert outcome.kind == OutcomeKind.COMPLETED
    assert outcome.result.summary == "Short version."
    assert outcome.result.filename == "paper.pdf"
    assert outcome.result.text_length == 5120
    assert poller.state == PollerState.COMPLETED
    assert poller.percentage == 100
    assert fake.polls_for("job-1") == 3
    assert scheduler.sleeps == [1.0, 1.0]


def test_null_status_counts_as_processing(scheduler):
    fake = FakeSummarizer(
        statuses={
            "job-1": [
                json_reply(200, {"status": None}),
                json_reply(200, {"status": "completed", "summary": "Done."}),
            ]
        }
    )
    poller, published = _poller(fake, scheduler)
    outcome = asyncio.run(poller.run("job-1"))

    assert outcome.kind == OutcomeKind.COMPLETED
    assert published == [(17, "Job Created"), (50, "Processing..."), (100, "Complete!")]


def test_fractional_text_length_is_accepted(scheduler):
    fake = FakeSummarizer(
        statuses={"job-1": [json_reply(200, {"status": "completed", "text_length": 12.5})]}
    )
    poller, _ = _poller(fake, scheduler)
    outcome = asyncio.run(poller.run("job-1"))

    assert outcome.kind == OutcomeKind.COMPLETED
    assert outcome.result.text_length == 12.5
    assert outcome.result.raw["text_length"] == 12.5


def test_first_milestone_published_before_any_request(scheduler):
    fake = FakeSummarizer(statuses={"job-1": [json_reply(200, {"status": "completed"})]})
    client = SummarizeClient(BASE_URL, transport=fake.transport)
    poller = JobPoller(client, scheduler=scheduler)
    seen = []
    poller.subscribe(lambda pct, label: seen.append((pct, len(fake.requests))))

    asyncio.run(poller.run("job-1"))
    assert seen[0] == (17, 0)


def test_percentage_never_moves_backwards(scheduler):
    fake = FakeSummarizer(
        statuses={
            "job-1": [
                json_reply(200, {"status": "finalizing"}),
                json_reply(200, {"status": "processing"}),
                json_reply(200, {"status": "mystery"}),
                json_reply(200, {"status": "completed"}),
            ]
        }
    )
    poller, published = _poller(fake, scheduler)
    asyncio.run(poller.run("job-1"))
    assert published == [
        (17, "Job Created"),
        (83, "Almost Done"),
        (83, "Almost Done"),
        (83, "Almost Done"),
        (100, "Complete!"),
    ]


def test_times_out_after_attempt_budget(scheduler):
    fake = FakeSummarizer()
    poller, _ = _poller(fake, scheduler, max_attempts=5)
    outcome = asyncio.run(poller.run("job-1"))

    assert outcome.kind == OutcomeKind.TIMEOUT
    assert outcome.message == (
        "Processing took too long. Please try again with a smaller file."
    )
    assert fake.polls_for() == 5
    assert poller.state == PollerState.TIMED_OUT
    assert (poller.percentage, poller.label) == (0, "")


def test_default_budget_is_six_hundred_polls(scheduler):
    client = CountingClient()
    poller = JobPoller(client, scheduler=scheduler)
    outcome = asyncio.run(poller.run("job-1"))

    assert outcome.kind == OutcomeKind.TIMEOUT
    assert client.calls == 600
    assert poller.attempts == 600
    assert len(scheduler.sleeps) == 599


def test_html_reply_stops_polling_immediately(scheduler):
    fake = FakeSummarizer(
        statuses={"job-1": [json_reply(200, {"status": "extracting"}), html_reply(200)]}
    )
    poller, _ = _poller(fake, scheduler)
    outcome = asyncio.run(poller.run("job-1"))

    assert outcome.kind == OutcomeKind.TRANSPORT
    assert outcome.message == "Server error: received non-JSON response"
    assert fake.polls_for() == 2
    assert poller.state == PollerState.ERRORED


@pytest.mark.parametrize(
    "body, message",
    [
        ({"detail": "bad file"}, "bad file"),
        ({"detail": ""}, "Failed to get status"),
        ({}, "Failed to get status"),
    ],
)
def test_failed_status_uses_detail_or_fallback(scheduler, body, message):
    fake = FakeSummarizer(statuses={"job-1": [json_reply(404, body)]})
    poller, _ = _poller(fake, scheduler)
    outcome = asyncio.run(poller.run("job-1"))

    assert outcome.kind == OutcomeKind.POLL
    assert outcome.message == message
    assert fake.polls_for() == 1


@pytest.mark.parametrize(
    "body, message",
    [
        ({"status": "error", "error": "Could not read PDF"}, "Could not read PDF"),
        ({"status": "error"}, "An error occurred during processing"),
    ],
)
def test_server_reported_error(scheduler, body, message):
    fake = FakeSummarizer(statuses={"job-1": [json_reply(200, body)]})
    poller, _ = _poller(fake, scheduler)
    outcome = asyncio.run(poller.run("job-1"))

    assert outcome.kind == OutcomeKind.POLL
    assert outcome.message == message
    assert outcome.job_id == "job-1"
    assert (poller.percentage, poller.label) == (0, "")


def test_network_failure_is_fatal_without_retry(scheduler):
    fake = FakeSummarizer(
        statuses={
            "job-1": [
                json_reply(200, {"status": "processing"}),
                httpx.ReadTimeout("read timed out"),
                json_reply(200, {"status": "completed"}),
            ]
        }
    )
    poller, _ = _poller(fake, scheduler)
    outcome = asyncio.run(poller.run("job-1"))

    assert outcome.kind == OutcomeKind.NETWORK
    assert outcome.message == "read timed out"
    assert fake.polls_for() == 2
    assert poller.state == PollerState.ERRORED


def test_cancelled_token_abandons_at_next_suspension(scheduler):
    token = CancellationToken()
    fake = FakeSummarizer()
    client = SummarizeClient(BASE_URL, transport=fake.transport)
    poller = JobPoller(client, scheduler=scheduler)

    def observer(pct, label):
        if pct == 50:
            token.cancel()

    poller.subscribe(observer)
    outcome = asyncio.run(poller.run("job-1", token))

    assert outcome.kind == OutcomeKind.ABANDONED
    assert poller.state == PollerState.ABANDONED
    assert fake.polls_for() == 1


def test_poller_runs_a_single_job(scheduler):
    fake = FakeSummarizer(statuses={"job-1": [json_reply(200, {"status": "completed"})]})
    poller, _ = _poller(fake, scheduler)
    asyncio.run(poller.run("job-1"))
    with pytest.raises(RuntimeError):
        asyncio.run(poller.run("job-2"))
