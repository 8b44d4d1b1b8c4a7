# util/timing.py
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator
import logging


@dataclass
class Span:
    name: str
    ms: int = 0


@contextmanager
def timed(logger: logging.Logger, name: str, **kv: Any) -> Iterator[Span]:
    """
    Usage:
      with timed(logger, "recover", chars=1200) as span:
          ...
      span.ms  # elapsed milliseconds once the block exits
    Emits one INFO on exit: "<name>.done ms=<int> key=val ..."
    """
    span = Span(name=name)
    t0 = time.perf_counter()
    try:
        yield span
    finally:
        span.ms = int((time.perf_counter() - t0) * 1000)
        suffix = "".join(f" {k}={v}" for k, v in kv.items())
        logger.info("%s.done ms=%d%s", name, span.ms, suffix)
