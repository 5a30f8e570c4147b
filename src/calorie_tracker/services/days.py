"""Day bucketing, totals and navigation for calorie entries."""

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from calorie_tracker.domain.calories import CalorieEntry, DaySummary, EntryType
from calorie_tracker.services.clock import Clock


def entries_for_day(
    entries: Iterable[CalorieEntry], day: date, tz: ZoneInfo
) -> list[CalorieEntry]:
    """Return the entries recorded on ``day`` in ``tz``, newest first."""
    matching = [
        entry for entry in entries if entry.recorded_at.astimezone(tz).date() == day
    ]
    return sort_for_display(matching)


def summarize_day(
    entries: Iterable[CalorieEntry], day: date, tz: ZoneInfo, goal: int
) -> DaySummary:
    """Compute consumed and burned totals for a local calendar day."""
    consumed = 0
    burned = 0
    for entry in entries:
        if entry.recorded_at.astimezone(tz).date() != day:
            continue
        if entry.type == EntryType.CONSUMED:
            consumed += entry.calories
        else:
            burned += entry.calories
    return DaySummary(day=day, goal=goal, consumed=consumed, burned=burned)


def sort_for_display(entries: Iterable[CalorieEntry]) -> list[CalorieEntry]:
    return sorted(entries, key=lambda entry: entry.recorded_at, reverse=True)


def search_entries(
    entries: Iterable[CalorieEntry], query: str | None
) -> list[CalorieEntry]:
    """Filter entries by a case-insensitive match on name and note."""
    if not query:
        return list(entries)
    needle = query.casefold()
    return [
        entry
        for entry in entries
        if needle in f"{entry.name} {entry.note or ''}".casefold()
    ]


def previous_day(day: date) -> date:
    return day - timedelta(days=1)


def next_day(day: date) -> date:
    return day + timedelta(days=1)


def today(clock: Clock) -> date:
    return clock.today()


def recorded_at_for_day(day: date, now: datetime, tz: ZoneInfo) -> datetime:
    """Place an entry on ``day`` at the current local time of day.

    The result is an aware UTC instant that projects back onto ``day``
    in ``tz``.
    """
    local_now = now.astimezone(tz)
    local = datetime.combine(day, local_now.time(), tzinfo=tz)
    return local.astimezone(UTC)
