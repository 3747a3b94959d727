from __future__ import annotations

from datetime import datetime, timedelta, timezone

API = "/api"


def iso_in(**delta: float) -> str:
    """ISO-8601 timestamp offset from now, e.g. ``iso_in(days=1)``."""
    return (datetime.now(timezone.utc) + timedelta(**delta)).isoformat()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
