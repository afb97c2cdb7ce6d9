from fastapi import FastAPI
from boxoffice.api.exceptions import register_error_handler
from boxoffice.api.v1.routes import events, tickets, locations
from boxoffice.core.logging_config import configure_logging
from boxoffice.core.middleware.request_id import RequestIdMiddleware
from boxoffice.core.redis import create_redis


async def lifespan(app: FastAPI):
    configure_logging()
    r = await create_redis()
    app.state.redis = r
    try:
        yield
    finally:
        await r.aclose()


app = FastAPI(title="boxoffice", lifespan=lifespan)
app.add_middleware(RequestIdMiddleware, header_name="X-Request-ID")
register_error_handler(app)
app.include_router(events.router)
app.include_router(tickets.router)
app.include_router(locations.router)
