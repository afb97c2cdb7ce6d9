from fastapi import Depends
from typing import Annotated
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.database import get_db
from boxoffice.core.dependencies.auth import require_roles
from boxoffice.domain.auth.schemas import Principal
from boxoffice.domain.events.models import Event
from boxoffice.domain.events import crud
from boxoffice.domain.exceptions import NotFound

require_admin = require_roles("ADMIN")


async def get_event_or_404(db: AsyncSession, event_id: int) -> Event:
    event = await crud.get_event_by_id(db, event_id)
    if not event:
        raise NotFound("Event not found", ctx={"event_id": event_id})
    return event


async def require_event(event_id: int, db: Annotated[AsyncSession, Depends(get_db)]) -> Event:
    return await get_event_or_404(db, event_id)


async def require_admin_event(
        event_id: int,
        db: Annotated[AsyncSession, Depends(get_db)],
        _: Annotated[Principal, Depends(require_admin)]
) -> Event:
    return await get_event_or_404(db, event_id)
