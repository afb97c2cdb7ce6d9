from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo
from boxoffice.core.config import APP_TIMEZONE, TIME_CONFLICT_HOURS
from boxoffice.domain.events.models import EventState

ALLOWED_TRANSITIONS = {
    EventState.PROXIMO: {EventState.ACTIVO, EventState.FINALIZADO, EventState.CANCELADO},
    EventState.ACTIVO: {EventState.FINALIZADO, EventState.CANCELADO},
}

FINAL_STATES = {EventState.FINALIZADO, EventState.CANCELADO}
SWEEPABLE_STATES = frozenset({EventState.PROXIMO, EventState.ACTIVO})


def app_timezone() -> tzinfo:
    return ZoneInfo(APP_TIMEZONE)


def can_transition(current: EventState, new: EventState) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, set())


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def local_day_bounds(now: datetime, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    tz = tz or app_timezone()
    local_day: date = _as_aware(now).astimezone(tz).date()
    today = datetime.combine(local_day, time.min, tzinfo=tz)
    tomorrow = datetime.combine(local_day + timedelta(days=1), time.min, tzinfo=tz)
    return today, tomorrow


def classify_event_state(
        state: EventState,
        event_date: datetime,
        now: datetime,
        tz: tzinfo | None = None
) -> EventState:
    """State an event should be in after a sweep at ``now``.

    Past events that are still upcoming or running are finished, upcoming
    events taking place today are activated. Final states are left alone.
    """
    if state not in SWEEPABLE_STATES:
        return state

    today, tomorrow = local_day_bounds(now, tz)
    event_date = _as_aware(event_date)
    if event_date < today:
        return EventState.FINALIZADO
    if state == EventState.PROXIMO and today <= event_date < tomorrow:
        return EventState.ACTIVO
    return state


def has_time_conflict(a: datetime, b: datetime, tz: tzinfo | None = None) -> bool:
    a, b = _as_aware(a), _as_aware(b)
    if tz is not None:
        a, b = a.astimezone(tz), b.astimezone(tz)
    if a.date() != b.date():
        return False
    return abs(a - b) < timedelta(hours=TIME_CONFLICT_HOURS)


def seconds_until_next_sweep(now: datetime, minute: int) -> float:
    target = now.replace(minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(hours=1)
    return (target - now).total_seconds()
