"""
Lightweight structured tracing of scheduler trials.

Enabled when SCHEDULER_TRACE_PATH env var is set. Intended for diagnosing
slow or poor searches without polluting normal logs.
"""

from __future__ import annotations

import json
import os
import threading
import time
from typing import Any

_write_lock = threading.Lock()


def trace_enabled() -> bool:
    return bool(os.getenv("SCHEDULER_TRACE_PATH"))


def trace_trial(
    event: str,
    location: str,
    data: dict[str, Any] | None = None,
    *,
    request_id: str = "schedule",
) -> None:
    """
    Append a JSONL trace entry to SCHEDULER_TRACE_PATH if configured.
    """
    path = os.getenv("SCHEDULER_TRACE_PATH")
    if not path:
        return

    payload = {
        "requestId": request_id,
        "timestamp": int(time.time() * 1000),
        "thread": threading.current_thread().name,
        "location": location,
        "event": event,
        "data": data or {},
    }

    try:
        with _write_lock, open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(payload) + "\n")
    except OSError:
        # Tracing must never impact scheduling
        return
