from datetime import datetime, timezone


def utc_now():
    # Naive UTC so values compare cleanly after a SQLite round trip.
    return datetime.now(timezone.utc).replace(tzinfo=None)
