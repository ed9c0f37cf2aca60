# service/quota_service.py
import logging
from config.settings import settings
from repository.usage_repository import UsageRepository

logger = logging.getLogger(__name__)


class QuotaService:
    """
    Gates submissions on the persisted usage counter.

    The counter only moves up, by one per successful submission.
    """

    def __init__(self, usage: UsageRepository, limit: int = settings.QUOTA_LIMIT) -> None:
        self._usage = usage
        self._limit = int(limit)

    @property
    def limit(self) -> int:
        return self._limit

    async def usage(self) -> int:
        try:
            return max(0, int(await self._usage.read()))
        except Exception:
            # fail-open: an unreadable counter counts as zero usage
            logger.warning("quota.read.error")
            return 0

    async def remaining(self) -> int:
        return max(0, self._limit - await self.usage())

    async def check_and_maybe_block(self) -> bool:
        used = await self.usage()
        if used >= self._limit:
            logger.info("quota.blocked used=%d limit=%d", used, self._limit)
            return False
        return True

    async def record_usage(self) -> int:
        used = await self.usage() + 1
        try:
            await self._usage.write(used)
        except Exception:
            # The job is already accepted server-side; keep it going.
            logger.error("quota.persist.error used=%d", used, exc_info=True)
            return used
        logger.info("quota.recorded used=%d limit=%d", used, self._limit)
        return used
