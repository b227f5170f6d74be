from datetime import datetime, timezone
from typing import Any, Dict, List


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def created_ts(doc: Dict[str, Any]) -> float:
    """Epoch seconds of `created_at` (Firestore returns a datetime subclass); 0 when unset."""
    created = doc.get("created_at")
    return created.timestamp() if isinstance(created, datetime) else 0.0


def newest_first(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(docs, key=created_ts, reverse=True)
