import asyncio
import signal
import logging
from datetime import datetime, timezone
import redis.asyncio as redis
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from boxoffice.core.config import DATABASE_URL, STATE_SWEEP_MINUTE
from boxoffice.core.logging_config import configure_logging
from boxoffice.core.redis import create_redis
from boxoffice.domain.events.lifecycle import seconds_until_next_sweep
from boxoffice.services.event_state_service import refresh_event_states

logger = logging.getLogger("boxoffice.worker.state_sweep")


async def run_sweep(session: async_sessionmaker[AsyncSession], r: redis.Redis | None) -> None:
    try:
        async with session() as db:
            async with db.begin():
                result = await refresh_event_states(db, r, force=True)
        logger.info(
            "Sweep done | finalized=%d activated=%d at=%s",
            result.finalized, result.activated, result.timestamp.isoformat()
        )
    except Exception:
        logger.exception("Sweep failed; retrying on the next tick")


async def _wait(stop: asyncio.Event, delay: float) -> None:
    try:
        await asyncio.wait_for(stop.wait(), timeout=delay)
    except asyncio.TimeoutError:
        pass


async def run() -> None:
    configure_logging()
    r = await create_redis()
    engine = create_async_engine(DATABASE_URL, pool_pre_ping=True)
    session = async_sessionmaker(bind=engine, expire_on_commit=False)

    stop = asyncio.Event()

    def _graceful(*_):
        stop.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _graceful)
        except NotImplementedError:
            pass

    logger.info("State sweep worker started | minute=%d", STATE_SWEEP_MINUTE)

    try:
        await run_sweep(session, r)
        while not stop.is_set():
            delay = seconds_until_next_sweep(datetime.now(timezone.utc), STATE_SWEEP_MINUTE)
            logger.debug("Next sweep in %.0f s", delay)
            await _wait(stop, delay)
            if not stop.is_set():
                await run_sweep(session, r)
    finally:
        logger.info("Shutting down state sweep worker...")
        try:
            await r.aclose()
        except RedisError:
            logger.exception("Redis close failed")
        await engine.dispose()
        logger.info("State sweep worker stopped.")


if __name__ == "__main__":
    asyncio.run(run())
