from __future__ import annotations

import time


def monotonic_start() -> float:
    return time.perf_counter()


def elapsed_ms(start: float) -> int:
    """Whole milliseconds since a ``monotonic_start()`` reading."""
    return int((time.perf_counter() - start) * 1000)
