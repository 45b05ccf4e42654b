# util/timing.py
import time
from contextlib import contextmanager
from typing import Iterator, Any
import logging


@contextmanager
def timed(logger: logging.Logger, name: str, level: int = logging.INFO, **kv: Any) -> Iterator[None]:
    """
    Wrap an outbound call and log how long it took, even when it raises.

      with timed(logger, "captcha.assess"):
          res = await client.post(...)

    Emits "<name>.done ms=<int> key=val ..." at `level`.
    """
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        extra = "".join(f" {k}={v}" for k, v in kv.items())
        logger.log(level, "%s.done ms=%d%s", name, elapsed_ms, extra)
