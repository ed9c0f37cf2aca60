# controller/controller_dependencies.py
from typing import Optional
from config.settings import settings
from core.summarize_client import SummarizeClient
from repository.usage_repository import UsageRepository, build_usage_repository
from service.quota_service import QuotaService
from service.summary_service import SummaryService


def get_quota_service(usage: Optional[UsageRepository] = None) -> QuotaService:
    return QuotaService(usage or build_usage_repository(), limit=settings.QUOTA_LIMIT)


def get_summary_service(
    api_url: Optional[str] = None, usage: Optional[UsageRepository] = None
) -> SummaryService:
    _client = SummarizeClient(api_url or settings.API_BASE_URL)
    _quota = get_quota_service(usage)
    _service = SummaryService(_client, _quota)
    return _service
