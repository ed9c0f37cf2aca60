# repository/usage_repository.py
import json
import logging
from pathlib import Path
from typing import Optional, Protocol
from redis.asyncio import Redis
from config.cache import get_redis
from config.settings import settings
from repository.namespaces import USAGE
from util.constants import USAGE_COUNT_KEY
from util.enums import UsageBackend

logger = logging.getLogger(__name__)


class UsageRepository(Protocol):
    """Storage capability for the usage counter: read() -> int, write(int)."""

    async def read(self) -> int: ...

    async def write(self, count: int) -> None: ...


def _as_count(raw) -> int:
    if raw is None:
        return 0
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    count = int(raw)
    return count if count > 0 else 0


class MemoryUsageRepository:
    def __init__(self, initial: int = 0) -> None:
        self._count = initial

    async def read(self) -> int:
        return self._count

    async def write(self, count: int) -> None:
        self._count = count


class FileUsageRepository:
    """
    JSON file holding {"pdf_upload_count": <int>}.
    Missing or corrupted files read as zero so a bad counter never locks a user out.
    """

    def __init__(self, path: str | Path = settings.USAGE_FILE) -> None:
        self._path = Path(path)

    async def read(self) -> int:
        if not self._path.exists():
            return 0
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return _as_count(data.get(USAGE_COUNT_KEY))
        except Exception:
            logger.warning("usage.file.read.error path=%s", self._path)
            return 0

    async def write(self, count: int) -> None:
        data = {}
        if self._path.exists():
            try:
                data = json.loads(self._path.read_text(encoding="utf-8"))
                if not isinstance(data, dict):
                    data = {}
            except Exception:
                data = {}
        data[USAGE_COUNT_KEY] = int(count)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data), encoding="utf-8")


class RedisUsageRepository:
    """
    Redis string under pdfsummarizer:usage:pdf_upload_count, no TTL.
    Reset is an administrative concern and never happens here.
    """

    def __init__(self, client: Optional[Redis] = None) -> None:
        self._injected = client

    async def _client(self) -> Redis:
        if self._injected is not None:
            return self._injected
        return await get_redis()

    @staticmethod
    def _key() -> str:
        return f"{USAGE}:{USAGE_COUNT_KEY}"

    async def read(self) -> int:
        try:
            r = await self._client()
            return _as_count(await r.get(self._key()))
        except Exception:
            logger.warning("usage.redis.read.error key=%s", self._key())
            return 0

    async def write(self, count: int) -> None:
        r = await self._client()
        await r.set(self._key(), str(int(count)))


def build_usage_repository(backend: UsageBackend = settings.USAGE_BACKEND) -> UsageRepository:
    if backend == UsageBackend.REDIS:
        return RedisUsageRepository()
    if backend == UsageBackend.MEMORY:
        return MemoryUsageRepository()
    return FileUsageRepository()
