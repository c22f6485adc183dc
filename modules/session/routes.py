"""
Session API endpoints.

Streams the signed-in principal's profile snapshots over SSE.
"""

import asyncio
from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from sse_starlette.sse import EventSourceResponse

from api.dependencies import ServiceContainer, get_container
from api.middleware.auth import get_current_user
from shared.models import Identity

from .context import SessionContext, fixed_identity
from .models import SessionSnapshot

router = APIRouter()

# Seconds between disconnect checks while no snapshot arrives
POLL_INTERVAL = 15.0


async def snapshot_generator(
    request: Request,
    context: SessionContext,
) -> AsyncIterator[dict]:
    """
    Yield one SSE event per snapshot until the client disconnects.

    The context (and with it the profile subscription) lives exactly as
    long as the connection.
    """
    queue: asyncio.Queue[SessionSnapshot] = asyncio.Queue()
    async with context:
        unsubscribe = context.subscribe(queue.put_nowait)
        try:
            while not await request.is_disconnected():
                try:
                    snapshot = await asyncio.wait_for(queue.get(), POLL_INTERVAL)
                except asyncio.TimeoutError:
                    continue
                yield {
                    "event": "loading" if snapshot.loading else "session",
                    "data": snapshot.model_dump_json(),
                }
        finally:
            unsubscribe()


@router.get("/stream")
async def stream_session(
    request: Request,
    identity: Identity = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    """
    Stream session snapshots via SSE.

    Event format:
        event: loading | session
        data: {"loading": false, "principal": {...}}

    A first connection for an identity without a profile creates the
    pending profile and then emits it.
    """
    context = SessionContext(
        container.gateway,
        container.profile_service,
        settings=container.settings,
        auth_source=fixed_identity(identity),
    )
    return EventSourceResponse(
        snapshot_generator(request, context),
        media_type="text/event-stream",
    )
