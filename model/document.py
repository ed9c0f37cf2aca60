# model/document.py
import mimetypes
from pathlib import Path
from typing import Optional
from pydantic import BaseModel


class DocumentPayload(BaseModel):
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: str | Path) -> "DocumentPayload":
        p = Path(path)
        content_type, _ = mimetypes.guess_type(p.name)
        return cls(filename=p.name, content=p.read_bytes(), content_type=content_type)
