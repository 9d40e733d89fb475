from typing import List, Sequence
from .model import LOG_CAPACITY

def clamp_log(entries: Sequence[str], limit: int = LOG_CAPACITY) -> List[str]:
    """Keep only the newest `limit` entries, oldest first."""
    return list(entries[max(0, len(entries) - limit):])

def append_log(entries: Sequence[str], entry: str, limit: int = LOG_CAPACITY) -> List[str]:
    """Return a new transcript with entry appended, evicting from the front past `limit`."""
    return clamp_log([*entries, entry], limit)
