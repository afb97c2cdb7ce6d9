import logging
from datetime import datetime, timezone
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.config import STATE_SWEEP_DEBOUNCE_SECONDS, STATE_SWEEP_KEY
from boxoffice.domain.events.lifecycle import local_day_bounds, app_timezone
from boxoffice.domain.events.schemas import SweepResultDTO
from boxoffice.domain.events import crud

logger = logging.getLogger("boxoffice.events.state")


async def update_event_states(db: AsyncSession, now: datetime | None = None) -> SweepResultDTO:
    """Finish past events, then activate the ones taking place today.

    Both steps are bulk updates guarded by the current state, so running the
    sweep again on the same day changes nothing.
    """
    now = now or datetime.now(timezone.utc)
    today, tomorrow = local_day_bounds(now, app_timezone())

    finalized = await crud.finalize_past_events(db, today)
    activated = await crud.activate_events_between(db, today, tomorrow)
    await db.flush()

    if finalized or activated:
        logger.info("State sweep: %d finalized, %d activated (day=%s)", finalized, activated, today.date())
    else:
        logger.debug("State sweep: no changes (day=%s)", today.date())

    return SweepResultDTO(finalized=finalized, activated=activated, timestamp=now)


async def _acquire_sweep_slot(redis: Redis, now: datetime, force: bool) -> bool:
    if force:
        await redis.set(STATE_SWEEP_KEY, now.isoformat(), ex=STATE_SWEEP_DEBOUNCE_SECONDS)
        return True
    acquired = await redis.set(STATE_SWEEP_KEY, now.isoformat(), nx=True, ex=STATE_SWEEP_DEBOUNCE_SECONDS)
    return bool(acquired)


async def refresh_event_states(
        db: AsyncSession,
        redis: Redis | None,
        *,
        force: bool = False,
        now: datetime | None = None
) -> SweepResultDTO | None:
    now = now or datetime.now(timezone.utc)

    if redis is not None:
        try:
            if not await _acquire_sweep_slot(redis, now, force):
                logger.debug("State sweep skipped, last run within %ds", STATE_SWEEP_DEBOUNCE_SECONDS)
                return None
        except RedisError:
            logger.warning("State sweep debounce unavailable, running sweep", exc_info=True)

    return await update_event_states(db, now)
