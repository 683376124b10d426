from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["room"],
)


@router.websocket("/ws")
async def room_socket(websocket: WebSocket):
    """
    Room protocol endpoint.

    One socket is one participant. The client sends joinRoom / leaveRoom /
    codeChange / mentorSolution / checkSolution frames; every disconnect,
    clean or not, goes through the same leave cleanup.
    """
    connection_manager = websocket.app.state.connection_manager
    hub = connection_manager.hub
    connection = await connection_manager.connect(websocket)
    try:
        while True:
            event = await websocket.receive()
            if event.get("type") == "websocket.disconnect":
                break
            data_text = event.get("text")
            data_bytes = event.get("bytes")
            if data_text is not None:
                await hub.handle(connection, data_text)
            elif data_bytes is not None:
                await hub.handle(connection, data_bytes)
            else:
                logger.debug(f"Received event: {event}")
    except WebSocketDisconnect:
        logger.info(f"WebSocket {connection.connection_id} disconnected by client.")
    except RuntimeError as e:
        # receive() after the hub closed the socket following a failed delivery
        logger.info(f"WebSocket {connection.connection_id} closed: {e}")
    except Exception as e:
        logger.error(f"Unexpected error in room socket {connection.connection_id}: {e}", exc_info=True)
    finally:
        logger.info(f"Cleaning up connection {connection.connection_id}")
        await connection_manager.disconnect(connection)
