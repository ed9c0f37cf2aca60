# core/summarize_client.py
from typing import Any, Optional
import httpx
from pydantic import ValidationError
from config.settings import settings
from model.api import JobStatusResponse, SubmitJobResponse
from model.document import DocumentPayload
from util.constants import PDF_MEDIA_TYPE, UPLOAD_FIELD
from util.enums import ErrorMessage
from util.errors import AppError
from util.functions import is_json_content_type, server_message
import logging

logger = logging.getLogger(__name__)


class SummarizeClient:
    """
    Thin async client for the summarization service.

    Raises AppError for non-JSON or non-2xx replies. Network failures
    surface as httpx.RequestError; retries are never attempted here.
    """

    def __init__(
        self,
        base_url: str = settings.API_BASE_URL,
        *,
        submit_path: str = settings.SUBMIT_PATH,
        timeout: float = settings.REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._submit_path = "/" + submit_path.strip("/")
        self._timeout = httpx.Timeout(timeout, connect=10.0)
        self._transport = transport

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={"accept": "application/json"},
        )

    @staticmethod
    def _decode(res: httpx.Response, non_json: ErrorMessage) -> Any:
        content_type = res.headers.get("content-type")
        if not is_json_content_type(content_type):
            logger.error(
                "api.non_json status=%d content_type=%s", res.status_code, content_type
            )
            raise AppError.of(non_json)
        try:
            return res.json()
        except ValueError:
            logger.error("api.bad_json status=%d", res.status_code)
            raise AppError.of(non_json)

    async def submit(self, document: DocumentPayload) -> str:
        files = {
            UPLOAD_FIELD: (
                document.filename,
                document.content,
                document.content_type or PDF_MEDIA_TYPE,
            )
        }
        async with self._http() as client:
            res = await client.post(self._submit_path, files=files)

        body = self._decode(res, ErrorMessage.SUBMIT_NON_JSON)
        if res.status_code // 100 != 2:
            logger.warning("api.submit.bad_status status=%d", res.status_code)
            raise AppError.of(ErrorMessage.SUBMIT_FAILED, server_message(body, "detail"))

        try:
            job_id = SubmitJobResponse.model_validate(body).job_id
        except ValidationError:
            logger.error("api.submit.missing_job_id")
            raise AppError.of(ErrorMessage.SUBMIT_FAILED)
        logger.info("api.submit.ok job=%s", job_id)
        return job_id

    async def get_status(self, job_id: str) -> JobStatusResponse:
        async with self._http() as client:
            res = await client.get(f"{self._submit_path}/{job_id}")

        body = self._decode(res, ErrorMessage.POLL_NON_JSON)
        if res.status_code // 100 != 2:
            logger.warning("api.status.bad_status job=%s status=%d", job_id, res.status_code)
            raise AppError.of(ErrorMessage.POLL_FAILED, server_message(body, "detail"))

        try:
            return JobStatusResponse.model_validate(body)
        except ValidationError:
            logger.error("api.status.malformed job=%s", job_id)
            raise AppError.of(ErrorMessage.POLL_FAILED)
