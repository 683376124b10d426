"""
ConnectionManager cleanup when the socket handler is cancelled.
"""
import asyncio

import pytest

from app.api.ws.connection.connection_manager import ConnectionManager
from conftest import join


async def test_cancelled_disconnect_still_notifies_room(hub, connect):
    manager = ConnectionManager(hub)
    a, b = connect("A"), connect("B")
    await hub.handle(a, join("R1"))
    await hub.handle(b, join("R1"))
    b.clear()
    b.delay = 0.02

    task = asyncio.create_task(manager.disconnect(a))
    await asyncio.sleep(0.005)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await asyncio.sleep(0.1)

    assert b.types() == ["mentorLeft", "userCountUpdated"]
    assert hub.registry.get_room("R1").member_count == 1
    assert manager._cleanups == set()


async def test_close_all_waits_for_pending_cleanups(hub, connect):
    manager = ConnectionManager(hub)
    a, b = connect("A"), connect("B")
    await hub.handle(a, join("R1"))
    await hub.handle(b, join("R1"))
    b.clear()
    b.delay = 0.02

    task = asyncio.create_task(manager.disconnect(a))
    await asyncio.sleep(0.005)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    await manager.close_all()
    assert b.types() == ["mentorLeft", "userCountUpdated"]
    assert len(hub.registry) == 0
