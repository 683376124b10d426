from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from typing import List
from app.core.security import require_api_key
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/rooms",
    tags=["rooms"],
    dependencies=[Depends(require_api_key)],
)


class RoomInfo(BaseModel):
    """Point-in-time view of a room. Never includes anyone's code."""
    room_id: str
    member_count: int
    student_count: int
    has_mentor: bool
    mentor_departed: bool
    has_solution: bool
    created_at: str
    last_activity: str


@router.get("", response_model=List[RoomInfo])
async def list_rooms(request: Request):
    """
    Get information about all live rooms.

    Requires the X-API-Key header.
    """
    registry = request.app.state.connection_manager.hub.registry
    return [RoomInfo(**info) for info in registry.get_all_rooms_info()]


@router.get("/{room_id}", response_model=RoomInfo)
async def get_room(room_id: str, request: Request):
    """
    Get information about one room.

    Args:
        room_id: The room to inspect
    """
    registry = request.app.state.connection_manager.hub.registry
    info = registry.get_room_info(room_id)
    if info is None:
        raise HTTPException(status_code=404, detail=f"No live room: {room_id}")
    return RoomInfo(**info)
