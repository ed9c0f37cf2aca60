# util/functions.py
import inspect
from typing import Any, Mapping, Optional

from util.constants import JSON_MEDIA_TYPE, PROGRESS_BAR_CELLS


def is_json_content_type(content_type: Optional[str]) -> bool:
    """
    - True when the header declares JSON (parameters such as charset are ignored).
    - Missing header counts as non-JSON.
    """
    return bool(content_type) and JSON_MEDIA_TYPE in content_type.lower()


def server_message(body: Any, key: str) -> Optional[str]:
    """Pull a non-empty string message (e.g. `detail`, `error`) out of a decoded body."""
    if not isinstance(body, Mapping):
        return None
    value = body.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def render_progress_bar(percentage: int, cells: int = PROGRESS_BAR_CELLS) -> str:
    filled = max(0, min(cells, (percentage * cells) // 100))
    return "▓" * filled + "░" * (cells - filled)


async def notify(callback, *args) -> None:
    # Observers can be sync or async.
    result = callback(*args)
    if inspect.isawaitable(result):
        await result
