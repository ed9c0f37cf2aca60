# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment, UsageBackend
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")

    # Remote summarization service
    API_BASE_URL: str = Field(
        default="https://egnoocminsoc.site", validation_alias="API_BASE_URL"
    )
    SUBMIT_PATH: str = Field(default="/api/summarize", validation_alias="SUBMIT_PATH")
    REQUEST_TIMEOUT_SECONDS: float = Field(
        default=60.0, validation_alias="REQUEST_TIMEOUT_SECONDS"
    )

    # Polling
    POLL_INTERVAL_SECONDS: float = Field(
        default=1.0, validation_alias="POLL_INTERVAL_SECONDS"
    )
    POLL_MAX_ATTEMPTS: int = Field(default=600, validation_alias="POLL_MAX_ATTEMPTS")

    # Upload progress estimate
    UPLOAD_TICK_SECONDS: float = Field(
        default=0.3, validation_alias="UPLOAD_TICK_SECONDS"
    )
    UPLOAD_PROGRESS_CAP: float = Field(
        default=90.0, validation_alias="UPLOAD_PROGRESS_CAP"
    )
    UPLOAD_MAX_INCREMENT: float = Field(
        default=30.0, validation_alias="UPLOAD_MAX_INCREMENT"
    )

    # Quota & limits
    QUOTA_LIMIT: int = Field(default=3, validation_alias="QUOTA_LIMIT")
    MAX_FILE_MB: int = Field(default=10, validation_alias="MAX_FILE_MB")

    # Usage counter storage
    USAGE_BACKEND: UsageBackend = Field(
        default=UsageBackend.FILE, validation_alias="USAGE_BACKEND"
    )
    USAGE_FILE: str = Field(
        default=os.path.join(os.path.expanduser("~"), ".pdf-summarizer", "usage.json"),
        validation_alias="USAGE_FILE",
    )
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0", validation_alias="REDIS_URL"
    )

    # Logging knobs
    LOGGER_NAME: str = "pdf-summarizer"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="client.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=10 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    @property
    def max_file_bytes(self) -> int:
        return self.MAX_FILE_MB * 1024 * 1024


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
