from typing import Final

PDF_MEDIA_TYPE: Final[str] = "application/pdf"
JSON_MEDIA_TYPE: Final[str] = "application/json"
UPLOAD_FIELD: Final[str] = "file"

USAGE_COUNT_KEY: Final[str] = "pdf_upload_count"

UPLOADING_LABEL: Final[str] = "Uploading file..."
UPLOADED_LABEL: Final[str] = "PDF uploaded. Processing..."

PROGRESS_BAR_CELLS: Final[int] = 12
