"""30-day calendar view model built from saved entries."""

DAYS = 30


def build_days(entries):
    """Return one slot per day 1..30, unsaved days defaulting to 0/0."""
    by_day = {e["day_number"]: e for e in entries}
    days = []
    for day in range(1, DAYS + 1):
        existing = by_day.get(day)
        days.append({
            "day_number": day,
            "motivation_score": existing["motivation_score"] if existing else 0,
            "satisfaction_score": existing["satisfaction_score"] if existing else 0,
        })
    return days


def goal_reached(days) -> bool:
    last = days[DAYS - 1]
    return last["motivation_score"] > 0 or last["satisfaction_score"] > 0
