from __future__ import annotations

import uuid


def is_uuid(value: str) -> bool:
    """Return ``True`` for a canonical, hyphenated UUID string (any version)."""
    try:
        parsed = uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return str(parsed) == value.lower()
