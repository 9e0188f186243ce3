"""Datetime helpers for file timestamps and feed dates.

Feed dates use RFC 1123 with a numeric zone, e.g.
``Mon, 02 Jan 2006 15:04:05 -0700``. All datetimes handled here are
timezone-aware and expressed in the local zone.
"""

from datetime import datetime
from email.utils import format_datetime


def local_now() -> datetime:
    """Get the current wall-clock time as an aware local datetime."""
    return datetime.now().astimezone()


def from_timestamp(timestamp: float) -> datetime:
    """Convert a POSIX timestamp (e.g. ``st_mtime``) to an aware local datetime."""
    return datetime.fromtimestamp(timestamp).astimezone()


def format_rfc1123(dt: datetime) -> str:
    """Format a datetime as RFC 1123 with a numeric zone.

    Naive datetimes are assumed to be local time.
    """
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return format_datetime(dt)
