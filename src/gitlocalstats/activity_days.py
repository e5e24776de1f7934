from __future__ import annotations

import datetime as dt

DAYS_IN_LAST_SIX_MONTHS = 183
WEEKS_IN_LAST_SIX_MONTHS = 26
OUT_OF_RANGE = 99999

# isoweekday() -> column offset that lines the newest grid column up with today
_WEEKDAY_OFFSETS = {
    7: 7,  # Sunday
    1: 6,
    2: 5,
    3: 4,
    4: 3,
    5: 2,
    6: 1,  # Saturday
}


def beginning_of_day(t: dt.datetime) -> dt.datetime:
    return t.replace(hour=0, minute=0, second=0, microsecond=0)


def _in_zone_of(t: dt.datetime, now: dt.datetime) -> dt.datetime:
    if t.tzinfo is None:
        return t.replace(tzinfo=now.tzinfo)
    if now.tzinfo is None:
        # naive `now` is local wall time
        return t.astimezone().replace(tzinfo=None)
    return t.astimezone(now.tzinfo)


def count_days_since(when: dt.datetime, *, now: dt.datetime) -> int:
    """
    Whole days between the calendar day of `when` and the calendar day of `now`,
    both taken in `now`'s timezone. Future instants count as 0 days; anything
    older than the six month window is OUT_OF_RANGE.
    """
    day = _in_zone_of(when, now).date()
    days = (now.date() - day).days
    if days < 0:
        return 0
    if days > DAYS_IN_LAST_SIX_MONTHS:
        return OUT_OF_RANGE
    return days


def calc_offset(now: dt.datetime) -> int:
    return _WEEKDAY_OFFSETS[now.isoweekday()]


def week_starts(now: dt.datetime) -> list[dt.date]:
    """First day of each header week, oldest first, ending no later than `now`."""
    cur = beginning_of_day(now - dt.timedelta(days=DAYS_IN_LAST_SIX_MONTHS))
    out: list[dt.date] = []
    while cur <= now:
        out.append(cur.date())
        cur = cur + dt.timedelta(days=7)
    return out
