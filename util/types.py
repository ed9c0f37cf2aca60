# util/types.py
from typing import TYPE_CHECKING, Awaitable, Callable, Union

if TYPE_CHECKING:
    from model.progress import SubmissionState


# Flow: observers may be plain callables or coroutine functions.
ProgressCallback = Callable[[int, str], Union[None, Awaitable[None]]]
UploadCallback = Callable[[float, bool], Union[None, Awaitable[None]]]
StateObserver = Callable[["SubmissionState"], Union[None, Awaitable[None]]]
