"""
ToolKit ID Utilities
Request ids for log correlation and ids for saved palettes.
"""
import time
import uuid
from datetime import datetime
from typing import Iterable, Optional


def generate_request_id(prefix: str = "req") -> str:
    """
    Generate a unique request ID for tracking.

    Args:
        prefix: Short tag naming the operation, e.g. "extract"

    Returns:
        Request ID of the form ``<prefix>-<YYYYmmddHHMMSS>-<8 hex>``
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = uuid.uuid4().hex[:8]
    return f"{prefix}-{timestamp}-{short_uuid}"


def generate_palette_id(existing: Iterable[str] = (), now_ms: Optional[int] = None) -> str:
    """
    Millisecond timestamp id for a saved palette.

    Two saves within the same millisecond get consecutive values so ids stay unique.
    """
    taken = set(existing)
    candidate = now_ms if now_ms is not None else int(time.time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)
