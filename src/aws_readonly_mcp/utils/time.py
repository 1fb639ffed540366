"""Time helpers."""

from __future__ import annotations

import time

SESSION_NAME_PREFIX = "aws-mcp-readonly"


def session_name(prefix: str = SESSION_NAME_PREFIX) -> str:
    """Role session name unique to the current millisecond."""
    return f"{prefix}-{time.time_ns() // 1_000_000}"
