"""Hour labels for the shared x-axis of a location's charts."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

HOUR_LABEL_FORMAT = "%Y-%m-%d %H:00"
HOUR = dt.timedelta(seconds=3600)


def _as_aware(reference: dt.datetime) -> dt.datetime:
    """Interpret naive datetimes as process-local wall time."""
    if reference.tzinfo is None or reference.tzinfo.utcoffset(reference) is None:
        return reference.astimezone()
    return reference


def build_hourly_labels(
    length: int,
    reference: dt.datetime,
    tz: Optional[dt.tzinfo] = None,
) -> List[str]:
    """
    Return `length` labels ending at `reference`, each one hour before the next.

    Steps are taken on absolute time (3600 s each) and only then converted to
    the display zone, so DST transitions repeat or skip a wall-clock hour rather
    than shifting the anchor. `tz=None` renders in the local zone of the
    process. The caller is responsible for passing series of the same length.
    """
    if length <= 0:
        return []

    # aware arithmetic is wall-clock within a zone; step in UTC instead
    anchor = _as_aware(reference).astimezone(dt.timezone.utc)
    labels: List[str] = []
    for i in range(length):
        stamp = anchor - (length - 1 - i) * HOUR
        local = stamp.astimezone(tz) if tz is not None else stamp.astimezone()
        labels.append(local.strftime(HOUR_LABEL_FORMAT))
    return labels
