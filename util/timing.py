# util/timing.py
import time
from contextlib import contextmanager
from typing import Iterator, Any
import logging


@contextmanager
def timed(logger: logging.Logger, name: str, **kv: Any) -> Iterator[None]:
    """
    Usage:
      with timed(logger, "submit.request", bytes=1024):
          await ...
    Emits one INFO on exit: "<name>.done ms=<int> key=val ..."
    or "<name>.failed ms=<int> ..." when the block raised.
    """
    t0 = time.perf_counter()
    suffix_state = "done"
    try:
        yield
    except BaseException:
        suffix_state = "failed"
        raise
    finally:
        dt_ms = int((time.perf_counter() - t0) * 1000)
        suffix = "".join(f" {k}={v}" for k, v in kv.items())
        logger.info("%s.%s ms=%d%s", name, suffix_state, dt_ms, suffix)
