from __future__ import annotations

import time


def now_unix() -> int:
    """Return the current time as whole seconds since the epoch."""
    return int(time.time())
