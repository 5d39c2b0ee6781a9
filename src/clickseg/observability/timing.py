"""Wall-clock timing of pipeline steps."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import logging
import time
from typing import Any, Iterator

from clickseg.observability.logging import log_event


@dataclass(slots=True)
class Timer:
    """Elapsed time of one timed block, filled in when the block exits."""

    event: str
    elapsed_s: float = 0.0


@contextmanager
def timed(logger: logging.Logger, event: str, **fields: Any) -> Iterator[Timer]:
    """Log `event` with `elapsed_s` once the block finishes.

    Nothing is logged when the block raises; the caller reports the failure.
    """

    timer = Timer(event=event)
    start = time.perf_counter()
    yield timer
    timer.elapsed_s = time.perf_counter() - start
    log_event(logger, event, elapsed_s=round(timer.elapsed_s, 4), **fields)
