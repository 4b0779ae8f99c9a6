"""UTC timestamp helpers shared by models and order numbering."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware now; timestamp columns are ``timestamptz``."""
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime | None = None) -> int:
    """Milliseconds since the Unix epoch for ``moment`` (default: now)."""
    return int((moment or utc_now()).timestamp() * 1000)
