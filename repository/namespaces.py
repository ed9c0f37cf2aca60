# repository/namespaces.py
from typing import Final

ROOT: Final[str] = "pdfsummarizer"

USAGE: Final[str] = f"{ROOT}:usage"
